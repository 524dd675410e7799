"""
Check evaluation engine.

``run_check`` observes the live system for one check, applies the decision
rule of its kind and records the result in ``completed``. ``run_checks``
runs one synchronous pass over a list of checks.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, assert_never

from ..probes.base import BaseProbe
from . import predicates
from .exceptions import ProbeSpawnError
from .models import (
    BinaryExists, Check, CheckOutcome, CheckStatus, FileContainsContent,
    FileExists, FileLineContains, ScoringRun, ServiceUp, User, UserInGroup,
    UserIsAdministrator
)

logger = logging.getLogger(__name__)

TraceHook = Callable[[Check, str], None]


def evaluate(check: Check, probe: BaseProbe, trace_hook: Optional[TraceHook] = None) -> bool:
    """
    Observe the system for ``check`` and decide whether it passes.

    Does not modify the check.

    Raises:
        ProbeSpawnError: If a required external command cannot be started
    """
    kind = check.kind
    match kind:
        case FileExists():
            return predicates.file_exists_passes(
                probe.file_exists(kind.file_path), kind.should_exist
            )
        case FileLineContains():
            return predicates.file_line_contains_passes(
                probe.read_file(kind.file_path), kind.line, kind.line_content,
                kind.should_contain
            )
        case FileContainsContent():
            return predicates.file_contains_content_passes(
                probe.read_file(kind.file_path), kind.content,
                kind.whitespace_matters, kind.should_contain
            )
        case ServiceUp():
            return predicates.service_up_passes(
                probe.service_status(kind.service_name), kind.should_be_up
            )
        case BinaryExists():
            return predicates.binary_exists_passes(
                probe.locate_binary(kind.binary_name), kind.binary_name,
                kind.should_exist
            )
        case UserInGroup():
            return predicates.user_in_group_passes(
                probe.identity(kind.user), kind.group, kind.should_be
            )
        case UserIsAdministrator():
            is_admin = probe.is_administrator(probe.identity(kind.user))
            return predicates.admin_status_passes(
                kind.should_be, kind.initial_admin, is_admin
            )
        case User():
            exists = predicates.user_exists(probe.list_users(), kind.user)
            if not predicates.non_primary_user_kept(
                kind.should_exist, kind.is_primary_user, kind.does_exist, exists
            ):
                _trace(check, trace_hook,
                       f"user {kind.user!r}: should_exist={kind.should_exist} "
                       f"does_exist={kind.does_exist} exists={exists} "
                       f"is_primary_user={kind.is_primary_user}")
            return predicates.user_existence_passes(
                kind.should_exist, kind.is_primary_user, kind.does_exist, exists
            )
        case _:
            assert_never(kind)


def run_check(check: Check, probe: BaseProbe, trace_hook: Optional[TraceHook] = None) -> Check:
    """
    Evaluate a check in place.

    Args:
        check: Check to evaluate; its ``completed`` flag is overwritten
        probe: Probe observing the live system
        trace_hook: Optional callback for diagnostic traces

    Returns:
        Check: A copy of the updated check

    Raises:
        ProbeSpawnError: If a required external command cannot be started.
            ``completed`` is left False.
    """
    check.completed = False
    check.completed = evaluate(check, probe, trace_hook)
    logger.debug("%s -> %s", check.kind.type, "pass" if check.completed else "fail")
    return check.model_copy(deep=True)


def run_checks(checks: List[Check], probe: BaseProbe,
               trace_hook: Optional[TraceHook] = None) -> ScoringRun:
    """
    Run one evaluation pass over ``checks`` in order.

    A check whose probe cannot be started is recorded as an error and
    counted as not completed; the pass continues with the next check.

    Returns:
        ScoringRun: The evaluated checks and one outcome per check
    """
    run = ScoringRun(checks=checks)

    for index, check in enumerate(checks):
        try:
            run_check(check, probe, trace_hook)
        except ProbeSpawnError as e:
            check.completed = False
            run.outcomes.append(CheckOutcome(
                index=index,
                kind=check.kind.type,
                points=check.points,
                status=CheckStatus.ERROR,
                message=check.penalty_message,
                error=str(e)
            ))
            continue

        run.outcomes.append(CheckOutcome(
            index=index,
            kind=check.kind.type,
            points=check.points,
            status=CheckStatus.PASS if check.completed else CheckStatus.FAIL,
            message=check.display_message
        ))

    run.completed_at = datetime.utcnow()
    if run.errors:
        logger.warning("%d of %d checks could not be evaluated", len(run.errors), len(checks))
    return run


def _trace(check: Check, trace_hook: Optional[TraceHook], message: str) -> None:
    logger.debug(message)
    if trace_hook is not None:
        trace_hook(check, message)
