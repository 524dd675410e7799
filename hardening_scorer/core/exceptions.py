"""
Error kinds surfaced by the hardening scorer.
"""

from typing import Optional, Sequence


class ScorerError(Exception):
    """Base class for all scorer errors."""


class ProbeSpawnError(ScorerError):
    """An external command needed to observe system state could not be started."""

    def __init__(self, command: Sequence[str], reason: Optional[BaseException] = None):
        self.command = list(command)
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to execute {' '.join(self.command)}{detail}")


class ConfigLoadError(ScorerError):
    """The checks configuration could not be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load checks from {path}: {reason}")
