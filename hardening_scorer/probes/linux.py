"""
Linux probe implementation for Ubuntu and CentOS images.

Observes services through systemd, executables through ``which`` and
group membership through ``id``. Accounts come from the local user
database.
"""

import pwd
from typing import List

from ..core.models import OSType
from .base import BaseProbe

DEFAULT_ADMIN_MARKER = "sudo"


class LinuxProbe(BaseProbe):
    """
    Linux probe for Ubuntu and CentOS systems.

    The administrator marker is the privileged group searched for in
    ``id`` output: ``sudo`` on Debian-family images, usually ``wheel``
    on RHEL-family images.
    """

    def __init__(self, os_type: OSType, admin_marker: str = DEFAULT_ADMIN_MARKER):
        """Initialize Linux probe."""
        super().__init__(os_type)
        self.admin_marker = admin_marker

    def service_status(self, service_name: str) -> str:
        """Get service activity via ``systemctl is-active``."""
        return self.execute_command(["systemctl", "is-active", service_name])

    def locate_binary(self, binary_name: str) -> str:
        """Locate an executable via ``which``."""
        return self.execute_command(["which", binary_name])

    def identity(self, user: str) -> str:
        """Get user and group ids via ``id``."""
        return self.execute_command(["id", user])

    def list_users(self) -> List[str]:
        """List account names from the local user database."""
        return [entry.pw_name for entry in pwd.getpwall()]

    def is_administrator(self, identity_output: str) -> bool:
        return self.admin_marker in identity_output
