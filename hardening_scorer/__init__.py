"""
Hardening Scorer

Evaluates declarative hardening checks against a live Linux image and
turns the outcomes into a point score for security training and
competition environments.
"""

__version__ = "1.0.0"

from .core.orchestrator import HardeningScorer
from .core.engine import run_check, run_checks
from .core.models import Check, CheckOutcome, ScoreReport
from .core.scoring import awarded_points, max_points

__all__ = [
    "HardeningScorer", "Check", "CheckOutcome", "ScoreReport",
    "run_check", "run_checks", "max_points", "awarded_points",
]
