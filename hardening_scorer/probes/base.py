"""
Base probe interface for observing live system state.

Defines the raw observations every platform-specific probe must provide.
Probes hold no decision logic and keep no state between calls.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from ..core.exceptions import ProbeSpawnError
from ..core.models import OSType

logger = logging.getLogger(__name__)


class BaseProbe(ABC):
    """
    Abstract base class for platform-specific probes.

    Every observation is made fresh on each call; nothing is cached.
    """

    def __init__(self, os_type: OSType):
        """
        Initialize probe.

        Args:
            os_type: Operating system type this probe supports
        """
        self.os_type = os_type

    @abstractmethod
    def service_status(self, service_name: str) -> str:
        """
        Query the service manager for the activity state of a service.

        Args:
            service_name: Name of the service to check

        Returns:
            str: Raw textual output of the service manager

        Raises:
            ProbeSpawnError: If the service manager cannot be started
        """
        pass

    @abstractmethod
    def locate_binary(self, binary_name: str) -> str:
        """
        Search PATH for an executable.

        Args:
            binary_name: Name of the executable

        Returns:
            str: Raw textual output of the PATH-search tool

        Raises:
            ProbeSpawnError: If the PATH-search tool cannot be started
        """
        pass

    @abstractmethod
    def identity(self, user: str) -> str:
        """
        Look up the groups and roles of a user.

        Args:
            user: Account name

        Returns:
            str: Raw textual output of the identity-lookup tool

        Raises:
            ProbeSpawnError: If the identity-lookup tool cannot be started
        """
        pass

    @abstractmethod
    def list_users(self) -> List[str]:
        """
        Enumerate the local user accounts.

        Returns:
            List[str]: Account names
        """
        pass

    @abstractmethod
    def is_administrator(self, identity_output: str) -> bool:
        """
        Decide whether identity-lookup output marks a privileged user.

        Args:
            identity_output: Output of ``identity``

        Returns:
            bool: True if the privileged-role marker is present
        """
        pass

    def file_exists(self, file_path: str) -> bool:
        """Check if a file exists."""
        return Path(file_path).exists()

    def read_file(self, file_path: str) -> str:
        """
        Read a whole file.

        A missing or unreadable file reads as empty content.
        """
        try:
            with open(file_path, 'r', newline='') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Treating %s as empty: %s", file_path, e)
            return ""

    def execute_command(self, command: Sequence[str]) -> str:
        """
        Execute a system command and capture its output.

        A non-zero exit status is not an error; only stdout is returned.

        Args:
            command: Command and arguments

        Returns:
            str: Captured standard output

        Raises:
            ProbeSpawnError: If the command cannot be started
        """
        cmd_args = list(command)
        try:
            result = subprocess.run(
                cmd_args,
                capture_output=True,
                text=True,
                errors="replace",
                check=False
            )
        except OSError as e:
            logger.error("Failed to execute %s: %s", cmd_args[0], e)
            raise ProbeSpawnError(cmd_args, e) from e

        logger.debug("%s exited with %s", " ".join(cmd_args), result.returncode)
        return result.stdout
