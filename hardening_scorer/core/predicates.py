"""
Decision rules for every check kind.

Each function is pure: it takes the already-observed state (file content,
command output, existence flags) plus the check's parameters and returns
whether the check passes.
"""

from typing import Sequence


def file_exists_passes(exists: bool, should_exist: bool) -> bool:
    return exists == should_exist


def file_line_contains_passes(content: str, line: int, line_content: str,
                              should_contain: bool) -> bool:
    """
    Check one 1-indexed line of ``content``.

    Only LF separates lines; a final LF does not start another line and a
    trailing CR is dropped from each line. A line number outside the file
    fails the check instead of raising.
    """
    lines = content.split("\n") if content else []
    if content.endswith("\n"):
        lines.pop()
    lines = [text[:-1] if text.endswith("\r") else text for text in lines]
    if line < 1 or line > len(lines):
        return False
    return (line_content in lines[line - 1]) == should_contain


def file_contains_content_passes(content: str, search: str, whitespace_matters: bool,
                                 should_contain: bool) -> bool:
    """
    Substring search over a whole file.

    When whitespace does not matter only ASCII spaces are removed from both
    sides; tabs and newlines are kept.
    """
    if not whitespace_matters:
        content = content.replace(" ", "")
        search = search.replace(" ", "")
    return (search in content) == should_contain


def service_up_passes(status_output: str, should_be_up: bool) -> bool:
    # anything but "inactive" counts as up
    return ("inactive" in status_output) != should_be_up


def binary_exists_passes(locate_output: str, binary_name: str, should_exist: bool) -> bool:
    return (binary_name in locate_output) == should_exist


def user_in_group_passes(identity_output: str, group: str, should_be: bool) -> bool:
    return (group in identity_output) == should_be


def user_exists(users: Sequence[str], user: str) -> bool:
    return any(name == user for name in users)


def admin_status_passes(should_be: bool, initial_admin: bool, is_admin: bool) -> bool:
    """
    Reconcile desired, initial and current administrator status.

    Passes when privilege was kept, correctly granted, or correctly revoked.
    A user who never was, should not be, and still is not an administrator
    fails.
    """
    if should_be and initial_admin and is_admin:
        return True
    if is_admin and not initial_admin and should_be:
        return True
    if is_admin and initial_admin and not should_be:
        return False
    if not is_admin and initial_admin and not should_be:
        return True
    return False


def non_primary_user_kept(should_exist: bool, is_primary_user: bool, does_exist: bool,
                          exists: bool) -> bool:
    """First rule of the user table: an existing non-primary account was kept."""
    return should_exist and does_exist and exists and not is_primary_user


def user_existence_passes(should_exist: bool, is_primary_user: bool, does_exist: bool,
                          exists: bool) -> bool:
    """
    Reconcile desired, initial and current account existence.

    Passes when a non-primary account was kept, or an account was correctly
    created or removed. A primary account never passes through the first
    rule, and an account that never existed and still does not exist fails.
    """
    if non_primary_user_kept(should_exist, is_primary_user, does_exist, exists):
        return True
    if exists and not does_exist and should_exist:
        return True
    if exists and does_exist and not should_exist:
        return False
    if not exists and does_exist and not should_exist:
        return True
    return False
