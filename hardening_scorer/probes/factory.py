"""
Probe factory for creating OS-specific probes.

Provides a unified interface for accessing the probe that observes
system state on the detected operating system.
"""

from typing import Any, Dict, List, Type

from ..core.models import OSType
from .base import BaseProbe
from .linux import LinuxProbe


class ProbeFactory:
    """
    Factory class for creating platform-specific probes.

    Another platform can be supported by registering an adapter whose
    command output carries the same markers as the Linux tools.
    """

    _probes: Dict[OSType, Type[BaseProbe]] = {
        OSType.UBUNTU: LinuxProbe,
        OSType.CENTOS: LinuxProbe,
    }

    @classmethod
    def get_probe(cls, os_type: OSType, **options: Any) -> BaseProbe:
        """
        Get probe for the specified OS type.

        Args:
            os_type: Operating system type
            **options: Keyword arguments passed to the probe constructor

        Returns:
            BaseProbe: Platform-specific probe instance

        Raises:
            ValueError: If OS type is not supported
        """
        if os_type not in cls._probes:
            raise ValueError(f"Unsupported platform: {os_type}")

        probe_class = cls._probes[os_type]
        return probe_class(os_type, **options)

    @classmethod
    def get_supported_platforms(cls) -> List[OSType]:
        """Get list of supported platform types."""
        return list(cls._probes.keys())

    @classmethod
    def register_probe(cls, os_type: OSType, probe_class: Type[BaseProbe]) -> None:
        """
        Register a new probe.

        Args:
            os_type: Operating system type to register for
            probe_class: Probe class
        """
        cls._probes[os_type] = probe_class
