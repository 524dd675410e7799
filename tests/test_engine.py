"""
Unit tests for the check evaluation engine.

Checks run against a scripted probe and temporary files; no real
system commands are started.
"""

import logging
from unittest.mock import Mock

import pytest

from conftest import FakeProbe, make_check
from hardening_scorer.core.engine import evaluate, run_check, run_checks
from hardening_scorer.core.exceptions import ProbeSpawnError
from hardening_scorer.core.models import (
    BinaryExists, CheckStatus, FileContainsContent, FileExists, FileLineContains,
    ServiceUp, User, UserInGroup, UserIsAdministrator
)

ID_SUDO = "uid=1000(bob) gid=1000(bob) groups=1000(bob),27(sudo)\n"
ID_PLAIN = "uid=1001(eve) gid=1001(eve) groups=1001(eve),4(adm)\n"


class TestFileChecks:
    """Test file based checks."""

    @pytest.mark.parametrize("should_exist", [True, False])
    def test_file_exists_toggle(self, tmp_path, fake_probe, should_exist):
        """Toggling should_exist flips completed for a fixed file."""
        present = tmp_path / "present"
        present.write_text("")

        check = make_check(FileExists(file_path=str(present), should_exist=should_exist))
        assert run_check(check, fake_probe).completed is should_exist

        check = make_check(FileExists(file_path=str(tmp_path / "absent"), should_exist=should_exist))
        assert run_check(check, fake_probe).completed is not should_exist

    def test_line_contains_pass(self, five_line_file, fake_probe):
        check = make_check(FileLineContains(
            file_path=str(five_line_file), line=3,
            line_content="PermitRootLogin no", should_contain=True
        ))
        assert run_check(check, fake_probe).completed is True

    @pytest.mark.parametrize("should_contain", [True, False])
    def test_line_six_of_five_line_file_fails(self, five_line_file, fake_probe, should_contain):
        check = make_check(FileLineContains(
            file_path=str(five_line_file), line=6,
            line_content="", should_contain=should_contain
        ))
        assert run_check(check, fake_probe).completed is False

    def test_bare_cr_file_read_untranslated(self, tmp_path, fake_probe):
        """A lone CR on disk stays inside its line."""
        path = tmp_path / "sshd_config"
        path.write_bytes(b"a\rPermitRootLogin no\n")

        check = make_check(FileLineContains(
            file_path=str(path), line=1,
            line_content="PermitRootLogin", should_contain=False
        ))
        assert run_check(check, fake_probe).completed is False

    def test_missing_file_reads_empty(self, tmp_path, fake_probe):
        """An unreadable file behaves as empty content."""
        check = make_check(FileContainsContent(
            file_path=str(tmp_path / "nope"), content="x", should_contain=False
        ))
        assert run_check(check, fake_probe).completed is True

    def test_content_ignores_spaces_not_tabs(self, tmp_path, fake_probe):
        no_space = tmp_path / "no_space"
        no_space.write_text("ab")
        tabbed = tmp_path / "tabbed"
        tabbed.write_text("a\tb")

        check = make_check(FileContainsContent(
            file_path=str(no_space), content="a b",
            whitespace_matters=False, should_contain=True
        ))
        assert run_check(check, fake_probe).completed is True

        check = make_check(FileContainsContent(
            file_path=str(tabbed), content="a b",
            whitespace_matters=False, should_contain=True
        ))
        assert run_check(check, fake_probe).completed is False


class TestCommandChecks:
    """Test checks backed by external commands."""

    def test_service_inactive(self):
        probe = FakeProbe(services={"ssh": "inactive"})
        up = make_check(ServiceUp(service_name="ssh", should_be_up=True))
        down = make_check(ServiceUp(service_name="ssh", should_be_up=False))

        assert run_check(up, probe).completed is False
        assert run_check(down, probe).completed is True
        assert probe.calls == [("service_status", "ssh"), ("service_status", "ssh")]

    def test_service_active(self):
        probe = FakeProbe(services={"ufw": "active\n"})
        check = make_check(ServiceUp(service_name="ufw", should_be_up=True))
        assert run_check(check, probe).completed is True

    def test_binary_exists(self):
        probe = FakeProbe(binaries={"nc": "/usr/bin/nc\n"})
        assert run_check(make_check(BinaryExists(binary_name="nc", should_exist=False)), probe).completed is False
        assert run_check(make_check(BinaryExists(binary_name="john", should_exist=False)), probe).completed is True

    def test_user_in_group(self):
        probe = FakeProbe(identities={"eve": ID_PLAIN})
        check = make_check(UserInGroup(user="eve", group="adm", should_be=False))
        assert run_check(check, probe).completed is False

    @pytest.mark.parametrize("should_be,initial_admin,identity,expected", [
        (True, True, ID_SUDO, True),
        (True, False, ID_SUDO, True),
        (False, True, ID_SUDO, False),
        (False, True, ID_PLAIN, True),
        (False, False, ID_PLAIN, False),
    ])
    def test_user_is_administrator(self, should_be, initial_admin, identity, expected):
        probe = FakeProbe(identities={"bob": identity})
        check = make_check(UserIsAdministrator(
            user="bob", should_be=should_be, initial_admin=initial_admin
        ))
        assert run_check(check, probe).completed is expected

    def test_admin_marker_is_configurable(self):
        probe = FakeProbe(identities={"bob": "groups=10(wheel)"}, admin_marker="wheel")
        check = make_check(UserIsAdministrator(user="bob", should_be=True, initial_admin=True))
        assert run_check(check, probe).completed is True


class TestUserCheck:
    """Test account existence checks and their trace hook."""

    def test_kept_user_passes(self):
        probe = FakeProbe(users=["root", "bob"])
        check = make_check(User(user="bob", should_exist=True, does_exist=True))
        assert run_check(check, probe).completed is True

    def test_kept_primary_user_fails(self):
        probe = FakeProbe(users=["root", "bob"])
        check = make_check(User(user="bob", should_exist=True, is_primary_user=True, does_exist=True))
        assert run_check(check, probe).completed is False

    def test_removed_user_passes(self):
        probe = FakeProbe(users=["root"])
        check = make_check(User(user="eve", should_exist=False, does_exist=True))
        assert run_check(check, probe).completed is True

    def test_trace_hook_called_when_first_rule_misses(self):
        hook = Mock()
        probe = FakeProbe(users=["root"])
        check = make_check(User(user="eve", should_exist=False, does_exist=True))

        run_check(check, probe, trace_hook=hook)

        hook.assert_called_once()
        traced_check, message = hook.call_args.args
        assert traced_check is check
        assert "eve" in message

    def test_trace_hook_not_called_when_first_rule_matches(self):
        hook = Mock()
        probe = FakeProbe(users=["bob"])
        check = make_check(User(user="bob", should_exist=True, does_exist=True))

        run_check(check, probe, trace_hook=hook)

        hook.assert_not_called()

    def test_trace_is_logged(self, caplog):
        probe = FakeProbe(users=[])
        check = make_check(User(user="eve", should_exist=False, does_exist=True))

        with caplog.at_level(logging.DEBUG, logger="hardening_scorer.core.engine"):
            run_check(check, probe)

        assert any("eve" in r.getMessage() for r in caplog.records)


class TestRunCheck:
    """Test run_check contract."""

    def test_returns_copy(self, fake_probe):
        check = make_check(ServiceUp(service_name="ssh", should_be_up=False))
        result = run_check(check, fake_probe)

        assert result is not check
        assert result == check
        assert check.completed is True

    def test_idempotent(self, five_line_file, fake_probe):
        check = make_check(FileLineContains(
            file_path=str(five_line_file), line=1, line_content="Port", should_contain=True
        ))
        first = run_check(check, fake_probe).completed
        second = run_check(check, fake_probe).completed
        assert first is second is True

    def test_completed_reflects_latest_run(self, tmp_path, fake_probe):
        path = tmp_path / "flag"
        check = make_check(FileExists(file_path=str(path), should_exist=True))

        path.write_text("")
        assert run_check(check, fake_probe).completed is True
        path.unlink()
        assert run_check(check, fake_probe).completed is False

    def test_spawn_error_propagates(self, fake_probe):
        fake_probe.service_status = Mock(side_effect=ProbeSpawnError(["systemctl"]))
        check = make_check(ServiceUp(service_name="ssh", should_be_up=False))
        check.completed = True

        with pytest.raises(ProbeSpawnError):
            run_check(check, fake_probe)
        assert check.completed is False

    def test_evaluate_does_not_modify(self, fake_probe):
        check = make_check(ServiceUp(service_name="ssh", should_be_up=False))
        assert evaluate(check, fake_probe) is True
        assert check.completed is False


class TestRunChecks:
    """Test a full evaluation pass."""

    def test_outcomes_in_order(self, tmp_path):
        probe = FakeProbe(services={"ufw": "active"})
        checks = [
            make_check(ServiceUp(service_name="ufw", should_be_up=True), points=3, message="fw up"),
            make_check(FileExists(file_path=str(tmp_path / "x"), should_exist=True),
                       points=2, penalty_message="x missing"),
        ]

        run = run_checks(checks, probe)

        assert [o.status for o in run.outcomes] == [CheckStatus.PASS, CheckStatus.FAIL]
        assert [o.message for o in run.outcomes] == ["fw up", "x missing"]
        assert [o.index for o in run.outcomes] == [0, 1]
        assert run.completed_at is not None
        assert run.checks[0] is checks[0]

    def test_spawn_error_does_not_halt_pass(self):
        probe = FakeProbe(services={"ufw": "active"})
        probe.locate_binary = Mock(side_effect=ProbeSpawnError(["which", "nc"]))
        checks = [
            make_check(BinaryExists(binary_name="nc", should_exist=False)),
            make_check(ServiceUp(service_name="ufw", should_be_up=True)),
        ]

        run = run_checks(checks, probe)

        assert run.outcomes[0].status == CheckStatus.ERROR
        assert "which nc" in run.outcomes[0].error
        assert checks[0].completed is False
        assert run.outcomes[1].status == CheckStatus.PASS
        assert checks[1].completed is True
        assert run.errors == [run.outcomes[0]]

    def test_empty_pass(self, fake_probe):
        run = run_checks([], fake_probe)
        assert run.outcomes == []
        assert run.errors == []
