"""
Test fixtures and utilities for the hardening scorer test suite.

Provides a scripted probe that never touches the real system, plus
helpers to build checks.
"""

import json

import pytest

from hardening_scorer.core.models import Check, OSType, SystemInfo
from hardening_scorer.probes.base import BaseProbe


class FakeProbe(BaseProbe):
    """Probe returning canned command output."""

    def __init__(self, services=None, binaries=None, identities=None, users=None,
                 admin_marker="sudo"):
        super().__init__(OSType.UBUNTU)
        self.services = services or {}
        self.binaries = binaries or {}
        self.identities = identities or {}
        self.users = list(users or [])
        self.admin_marker = admin_marker
        self.calls = []

    def service_status(self, service_name):
        self.calls.append(("service_status", service_name))
        return self.services.get(service_name, "inactive\n")

    def locate_binary(self, binary_name):
        self.calls.append(("locate_binary", binary_name))
        return self.binaries.get(binary_name, "")

    def identity(self, user):
        self.calls.append(("identity", user))
        return self.identities.get(user, "")

    def list_users(self):
        self.calls.append(("list_users",))
        return list(self.users)

    def is_administrator(self, identity_output):
        return self.admin_marker in identity_output


def make_check(kind, points=10, message="passed", penalty_message="failed"):
    """Helper function to create a check with ``completed`` False."""
    return Check(points=points, message=message, penalty_message=penalty_message, kind=kind)


@pytest.fixture
def fake_probe():
    """Create an empty scripted probe."""
    return FakeProbe()


@pytest.fixture
def mock_system_info():
    """Create a SystemInfo object."""
    return SystemInfo(
        os_type="ubuntu",
        os_version="24.04.3 LTS",
        architecture="x86_64",
        hostname="test-host",
        kernel_version="6.8.0-40-generic"
    )


@pytest.fixture
def five_line_file(tmp_path):
    """Create a five line configuration file."""
    path = tmp_path / "sshd_config"
    path.write_text(
        "Port 22\n"
        "Protocol 2\n"
        "PermitRootLogin no\n"
        "PasswordAuthentication no\n"
        "X11Forwarding no\n"
    )
    return path


@pytest.fixture
def checks_file(tmp_path):
    """Write a checks file and return a function producing its path."""
    def _write(data):
        path = tmp_path / "checks.json"
        path.write_text(json.dumps(data) if not isinstance(data, str) else data)
        return path
    return _write


SAMPLE_CHECKS = {
    "file_exists": [
        {
            "points": 5,
            "message": "Backdoor removed",
            "penalty_message": "Backdoor present",
            "file_path": "/tmp/backdoor",
            "should_exist": False
        },
        {
            "points": 3,
            "message": "Banner installed",
            "penalty_message": "Banner missing",
            "file_path": "/etc/issue.net",
            "should_exist": True
        }
    ],
    "file_line_contains": [
        {
            "points": 5,
            "message": "Root login disabled",
            "penalty_message": "Root login allowed",
            "file_path": "/etc/ssh/sshd_config",
            "line": 3,
            "line_content": "PermitRootLogin no",
            "should_contain": True
        }
    ],
}
