"""
Operating System detection utilities.

Detects the Linux distribution family of the scored image so the
matching probe can be selected.
"""

import platform
import subprocess
from pathlib import Path
from typing import Tuple

from ..core.models import OSType, SystemInfo


def detect_os() -> SystemInfo:
    """
    Detect the current operating system and gather system information.

    Returns:
        SystemInfo: OS type, version, architecture and hostname

    Raises:
        RuntimeError: If reading the distribution information fails
    """
    system = platform.system().lower()
    hostname = platform.node()
    architecture = platform.machine()

    if system == "linux":
        return _detect_linux(hostname, architecture)

    return SystemInfo(
        os_type=OSType.UNKNOWN,
        os_version=platform.release(),
        architecture=architecture,
        hostname=hostname,
        kernel_version=platform.release()
    )


def _detect_linux(hostname: str, architecture: str) -> SystemInfo:
    """Detect Linux distribution (Ubuntu or CentOS) and version."""
    os_release_path = Path("/etc/os-release")
    if os_release_path.exists():
        os_info = _parse_os_release(os_release_path)
        os_type = _determine_linux_type(os_info)
        os_version = os_info.get("VERSION", os_info.get("VERSION_ID", "Unknown"))
    else:
        os_type, os_version = _detect_linux_fallback()

    return SystemInfo(
        os_type=os_type,
        os_version=os_version,
        architecture=architecture,
        hostname=hostname,
        kernel_version=platform.release()
    )


def _parse_os_release(os_release_path: Path) -> dict:
    """Parse /etc/os-release file into a dictionary."""
    os_info = {}

    try:
        with open(os_release_path, 'r') as f:
            for line in f:
                line = line.strip()
                if '=' in line and not line.startswith('#'):
                    key, value = line.split('=', 1)
                    os_info[key] = value.strip('"\'')
    except OSError as e:
        raise RuntimeError(f"Cannot read {os_release_path}: {e}")

    return os_info


def _determine_linux_type(os_info: dict) -> OSType:
    """Determine Linux distribution family from os-release information."""
    id_field = os_info.get("ID", "").lower()
    id_like = os_info.get("ID_LIKE", "").lower()
    name = os_info.get("NAME", "").lower()

    if "ubuntu" in id_field or "ubuntu" in name:
        return OSType.UBUNTU

    if any(distro in id_field for distro in ["centos", "rhel", "redhat"]):
        return OSType.CENTOS

    # Derivatives report their parent in ID_LIKE
    if "ubuntu" in id_like or "debian" in id_like:
        return OSType.UBUNTU
    elif any(distro in id_like for distro in ["rhel", "fedora", "centos"]):
        return OSType.CENTOS

    return OSType.UNKNOWN


def _detect_linux_fallback() -> Tuple[OSType, str]:
    """Fallback Linux detection for older systems without os-release."""
    for release_file in ["/etc/centos-release", "/etc/redhat-release"]:
        if Path(release_file).exists():
            try:
                with open(release_file, 'r') as f:
                    return OSType.CENTOS, f.read().strip()
            except OSError:
                continue

    try:
        result = subprocess.run(
            ["lsb_release", "-d"],
            capture_output=True,
            text=True,
            timeout=5
        )
        if result.returncode == 0 and "ubuntu" in result.stdout.lower():
            return OSType.UBUNTU, result.stdout.split(":", 1)[-1].strip()
    except (subprocess.TimeoutExpired, OSError):
        pass

    return OSType.UNKNOWN, "Unknown Linux Distribution"
