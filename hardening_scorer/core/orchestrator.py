"""
Core orchestrator for the hardening scorer.

The HardeningScorer class ties together settings, the check loader, the
platform probe and the evaluation engine to score the live system.
"""

import copy
import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from ..checks.loader import DEFAULT_CHECKS_PATH, CheckLoader
from ..probes.base import BaseProbe
from ..probes.factory import ProbeFactory
from ..probes.linux import DEFAULT_ADMIN_MARKER
from ..utils.os_detection import detect_os
from .engine import TraceHook, run_checks
from .models import Check, OSType, ScoreReport, SystemInfo
from .scoring import awarded_points, max_points

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "scoring": {
        "checks_path": DEFAULT_CHECKS_PATH,
    },
    "probes": {
        "admin_marker": DEFAULT_ADMIN_MARKER,
    },
}


class HardeningScorer:
    """
    Main orchestrator class for scoring passes.

    Each call to ``score`` re-observes the live system
    for every check.
    """

    def __init__(self, config_path: Optional[str] = None,
                 probe: Optional[BaseProbe] = None,
                 system_info: Optional[SystemInfo] = None):
        """
        Initialize the scorer.

        Args:
            config_path: Path to YAML settings file (optional)
            probe: Probe to observe the system with (detected if None)
            system_info: Known system information (detected if None)
        """
        self.config = self._load_config(config_path)
        self.system_info = system_info or detect_os()
        self._probe = probe

    @property
    def probe(self) -> BaseProbe:
        """Probe for the current platform, created on first use."""
        if self._probe is None:
            os_type = self.system_info.os_type
            if os_type == OSType.UNKNOWN:
                # an unrecognised Linux still has systemctl, which and id
                os_type = OSType.UBUNTU
            self._probe = ProbeFactory.get_probe(
                os_type, admin_marker=self.config["probes"]["admin_marker"]
            )
        return self._probe

    def load_checks(self, checks_path: Optional[str] = None) -> List[Check]:
        """
        Load checks from the configured or given JSON file.

        Raises:
            ConfigLoadError: If the checks file cannot be loaded
        """
        loader = CheckLoader(checks_path or self.config["scoring"]["checks_path"])
        return loader.get_checks()

    def score(self, checks: Optional[List[Check]] = None,
              checks_path: Optional[str] = None,
              trace_hook: Optional[TraceHook] = None) -> ScoreReport:
        """
        Run one scoring pass.

        Args:
            checks: Checks to evaluate (loaded from file if None)
            checks_path: Checks file overriding the settings
            trace_hook: Optional callback for diagnostic traces

        Returns:
            ScoreReport: Points and per-check outcomes

        Raises:
            ConfigLoadError: If checks must be loaded and cannot be
        """
        if checks is None:
            checks = self.load_checks(checks_path)

        run = run_checks(checks, self.probe, trace_hook)
        report = ScoreReport.from_run(
            run,
            max_points=max_points(checks),
            awarded_points=awarded_points(checks),
            system_info=self.system_info
        )
        logger.info("Scored %d/%d points over %d checks",
                    report.awarded_points, report.max_points, report.total_checks)
        return report

    def _load_config(self, config_path: Optional[str]) -> Dict:
        """Load settings from file merged over defaults."""
        config = copy.deepcopy(DEFAULT_CONFIG)

        if config_path and Path(config_path).exists():
            try:
                with open(config_path, 'r') as f:
                    user_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Ignoring settings file %s: %s", config_path, e)
                return config

            if not isinstance(user_config, dict):
                logger.warning("Ignoring settings file %s: not a mapping", config_path)
                return config

            for section, values in user_config.items():
                if not isinstance(values, dict):
                    logger.warning("Ignoring settings section %r in %s: not a mapping",
                                   section, config_path)
                    continue
                config.setdefault(section, {}).update(values)

        return config
