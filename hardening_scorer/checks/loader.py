"""
Check loader for building checks from a JSON configuration file.

Each top-level key of the file holds an optional list of records for one
check kind. Records become ``Check`` values with ``completed`` False, in
file order within a key and in ``CHECK_SECTIONS`` order across keys.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from ..core.exceptions import ConfigLoadError
from ..core.models import (
    BinaryExists, Check, FileContainsContent, FileExists, FileLineContains,
    ServiceUp, User, UserInGroup, UserIsAdministrator
)

logger = logging.getLogger(__name__)

DEFAULT_CHECKS_PATH = "./config/checks.json"


class _Record(BaseModel):
    points: int
    message: str
    penalty_message: str


class FileExistsRecord(_Record):
    file_path: str
    should_exist: bool


class FileLineContainsRecord(_Record):
    file_path: str
    line: int
    line_content: str
    should_contain: bool


class FileContainsContentRecord(_Record):
    file_path: str
    content: str
    whitespace_matters: bool = True
    should_contain: bool


class ServiceUpRecord(_Record):
    service_name: str
    should_be_up: bool


class BinaryExistsRecord(_Record):
    binary_name: str
    should_exist: bool


class UserInGroupRecord(_Record):
    user: str
    group: str
    should_be: bool


class UserIsAdministratorRecord(_Record):
    user: str
    should_be: bool
    initial_admin: bool


class UserRecord(_Record):
    user: str
    should_exist: bool
    is_primary_user: bool = False
    does_exist: bool


class ChecksConfig(BaseModel):
    """Parsed checks file. Absent keys are empty."""
    file_exists: Optional[List[FileExistsRecord]] = None
    file_line_contains: Optional[List[FileLineContainsRecord]] = None
    file_contains_content: Optional[List[FileContainsContentRecord]] = None
    service_up: Optional[List[ServiceUpRecord]] = None
    binary_exists: Optional[List[BinaryExistsRecord]] = None
    user_in_group: Optional[List[UserInGroupRecord]] = None
    user_is_administrator: Optional[List[UserIsAdministratorRecord]] = None
    user: Optional[List[UserRecord]] = None


# Section key -> kind model, in the order checks are produced
CHECK_SECTIONS: Dict[str, Type[BaseModel]] = {
    "file_exists": FileExists,
    "file_line_contains": FileLineContains,
    "file_contains_content": FileContainsContent,
    "service_up": ServiceUp,
    "binary_exists": BinaryExists,
    "user_in_group": UserInGroup,
    "user_is_administrator": UserIsAdministrator,
    "user": User,
}


class CheckLoader:
    """
    Loads check definitions from a JSON file.

    Unlike probe failures, any problem reading the checks file is fatal
    and raised as ``ConfigLoadError`` before a check is evaluated.
    """

    def __init__(self, checks_path: Optional[str] = None):
        """
        Initialize check loader.

        Args:
            checks_path: Path to the JSON checks file (uses default if None)
        """
        self.checks_path = Path(checks_path or DEFAULT_CHECKS_PATH)

    def load_config(self) -> ChecksConfig:
        """
        Read and validate the checks file.

        Raises:
            ConfigLoadError: If the file is unreadable, malformed or invalid
        """
        try:
            with open(self.checks_path, 'r') as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigLoadError(str(self.checks_path), str(e)) from e
        except json.JSONDecodeError as e:
            raise ConfigLoadError(str(self.checks_path), f"malformed JSON: {e}") from e

        return self.parse_config(data)

    def parse_config(self, data: Any) -> ChecksConfig:
        """Validate an already-decoded checks document."""
        if not isinstance(data, dict):
            raise ConfigLoadError(str(self.checks_path), "top level must be a JSON object")

        try:
            return ChecksConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigLoadError(str(self.checks_path), str(e)) from e

    def get_checks(self) -> List[Check]:
        """Load the checks file and build the ordered list of checks."""
        checks = build_checks(self.load_config())
        logger.info("Loaded %d checks from %s", len(checks), self.checks_path)
        return checks


def build_checks(config: ChecksConfig) -> List[Check]:
    """
    Turn parsed records into checks with ``completed`` False.

    Input order is kept within each section; sections are concatenated in
    ``CHECK_SECTIONS`` order.
    """
    checks: List[Check] = []

    for section, kind_class in CHECK_SECTIONS.items():
        for record in getattr(config, section) or []:
            fields = record.model_dump()
            checks.append(Check(
                points=fields.pop("points"),
                message=fields.pop("message"),
                penalty_message=fields.pop("penalty_message"),
                completed=False,
                kind=kind_class(**fields)
            ))

    return checks
