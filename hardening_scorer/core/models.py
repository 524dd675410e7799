"""
Data models for the hardening scorer using Pydantic for validation.

A ``Check`` pairs scoring metadata with one immutable ``CheckKind`` payload.
``CheckKind`` is a closed union discriminated by the ``type`` field; every
consumer dispatches over all eight variants.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OSType(str, Enum):
    """Supported operating system types."""
    UBUNTU = "ubuntu"
    CENTOS = "centos"
    UNKNOWN = "unknown"


class CheckStatus(str, Enum):
    """Outcome of evaluating one check."""
    PASS = "pass"
    FAIL = "fail"
    ERROR = "error"


class SystemInfo(BaseModel):
    """System information detected during runtime."""
    os_type: OSType
    os_version: str
    architecture: str
    hostname: str
    kernel_version: Optional[str] = None
    detected_at: datetime = Field(default_factory=datetime.utcnow)


class _Kind(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class FileExists(_Kind):
    """The file at ``file_path`` should (or should not) exist."""
    type: Literal["file_exists"] = "file_exists"
    file_path: str
    should_exist: bool


class FileLineContains(_Kind):
    """Line ``line`` (1-indexed) of a file should contain ``line_content``."""
    type: Literal["file_line_contains"] = "file_line_contains"
    file_path: str
    line: int
    line_content: str
    should_contain: bool


class FileContainsContent(_Kind):
    """A file should contain ``content`` anywhere in its body."""
    type: Literal["file_contains_content"] = "file_contains_content"
    file_path: str
    content: str
    whitespace_matters: bool = True
    should_contain: bool


class ServiceUp(_Kind):
    type: Literal["service_up"] = "service_up"
    service_name: str
    should_be_up: bool


class BinaryExists(_Kind):
    type: Literal["binary_exists"] = "binary_exists"
    binary_name: str
    should_exist: bool


class UserInGroup(_Kind):
    type: Literal["user_in_group"] = "user_in_group"
    user: str
    group: str
    should_be: bool


class UserIsAdministrator(_Kind):
    """
    Administrator status of ``user``.

    ``initial_admin`` is the status captured before any remediation; it is
    supplied with the check definition, never probed.
    """
    type: Literal["user_is_administrator"] = "user_is_administrator"
    user: str
    should_be: bool
    initial_admin: bool


class User(_Kind):
    """
    Existence of the account ``user``.

    ``does_exist`` is the existence captured before any remediation.
    ``is_primary_user`` marks a protected account of the image.
    """
    type: Literal["user"] = "user"
    user: str
    should_exist: bool
    is_primary_user: bool = False
    does_exist: bool


CheckKind = Annotated[
    Union[
        FileExists,
        FileLineContains,
        FileContainsContent,
        ServiceUp,
        BinaryExists,
        UserInGroup,
        UserIsAdministrator,
        User,
    ],
    Field(discriminator="type"),
]


class Check(BaseModel):
    """One scored assertion about system state."""
    points: int = Field(..., description="Signed score; sign convention belongs to the caller")
    message: str = Field(..., description="Shown when the check passes")
    penalty_message: str = Field(..., description="Shown when the check fails")
    completed: bool = Field(False, description="Outcome of the most recent evaluation")
    kind: CheckKind

    @property
    def display_message(self) -> str:
        """Message matching the current ``completed`` flag."""
        return self.message if self.completed else self.penalty_message


class CheckOutcome(BaseModel):
    """Result of evaluating one check within a pass."""
    index: int
    kind: str
    points: int
    status: CheckStatus
    message: str
    error: Optional[str] = None


class ScoringRun(BaseModel):
    """One synchronous evaluation pass over a fixed list of checks."""
    started_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None
    checks: List[Check] = Field(default_factory=list)
    outcomes: List[CheckOutcome] = Field(default_factory=list)

    @property
    def errors(self) -> List[CheckOutcome]:
        """Outcomes whose probe could not be run."""
        return [o for o in self.outcomes if o.status == CheckStatus.ERROR]


class ScoreReport(BaseModel):
    """Summary of a scoring pass."""
    system_info: Optional[SystemInfo] = None
    max_points: int = 0
    awarded_points: int = 0
    total_checks: int = 0
    passed_checks: int = 0
    failed_checks: int = 0
    error_checks: int = 0
    outcomes: List[CheckOutcome] = Field(default_factory=list)

    @field_validator("total_checks", "passed_checks", "failed_checks", "error_checks")
    @classmethod
    def validate_counts(cls, v):
        """Counts are never negative."""
        if v < 0:
            raise ValueError("check counts must be non-negative")
        return v

    @classmethod
    def from_run(cls, run: ScoringRun, max_points: int, awarded_points: int,
                 system_info: Optional[SystemInfo] = None) -> "ScoreReport":
        """Build the summary for a finished run."""
        return cls(
            system_info=system_info,
            max_points=max_points,
            awarded_points=awarded_points,
            total_checks=len(run.outcomes),
            passed_checks=sum(1 for o in run.outcomes if o.status == CheckStatus.PASS),
            failed_checks=sum(1 for o in run.outcomes if o.status == CheckStatus.FAIL),
            error_checks=sum(1 for o in run.outcomes if o.status == CheckStatus.ERROR),
            outcomes=list(run.outcomes),
        )

    @property
    def passed(self) -> bool:
        """Whether every check passed."""
        return self.failed_checks == 0 and self.error_checks == 0
