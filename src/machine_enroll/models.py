from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AutoTestIntervalUnit(str, Enum):
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"


_UNIT_SECONDS = {
    AutoTestIntervalUnit.SECONDS: 1,
    AutoTestIntervalUnit.MINUTES: 60,
    AutoTestIntervalUnit.HOURS: 3600,
}


class CredentialEntry(BaseModel):
    """A remote machine and the logon used to monitor its services.

    ``password`` holds the protected (encrypted) form once an entry has been
    committed.
    """

    host: str
    user: str
    password: str = Field("", repr=False)
    auto_test_interval_value: int = Field(10, ge=0)
    auto_test_interval_unit: AutoTestIntervalUnit = AutoTestIntervalUnit.MINUTES

    @property
    def interval_seconds(self) -> int:
        return self.auto_test_interval_value * _UNIT_SECONDS[self.auto_test_interval_unit]


class HostReason(str, Enum):
    NONE = "none"
    LOCAL_HOST = "local_host"
    DUPLICATE_HOST = "duplicate_host"
    BAD_SYNTAX = "bad_syntax"


class UserReason(str, Enum):
    NONE = "none"
    BAD_SYNTAX = "bad_syntax"


class ValidationResult(BaseModel):
    """Per-field validity of the host and user text.

    Empty fields are valid here ("not yet judged"); completeness is checked
    separately by ``entries_are_valid``.
    """

    model_config = ConfigDict(frozen=True)

    host_valid: bool = True
    host_reason: HostReason = HostReason.NONE
    user_valid: bool = True
    user_reason: UserReason = UserReason.NONE


class ProbeResult(BaseModel):
    online: bool


class NoticeKind(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class NoticeChoice(str, Enum):
    YES = "yes"
    NO = "no"


class TestOutcome(str, Enum):
    __test__ = False  # not a pytest test class

    SUCCESS = "success"
    FAILURE = "failure"


class CommitStatus(str, Enum):
    COMMITTED = "committed"
    ABORTED = "aborted"
    FAILURE = "failure"


class FailureReason(str, Enum):
    ENTRIES_INVALID = "entries_invalid"
    NOT_ONLINE = "not_online"
    OVERWRITE_DECLINED = "overwrite_declined"


class CommitOutcome(BaseModel):
    """Result of a commit request.

    ``entry`` is only set when ``status`` is ``COMMITTED``. ``stored`` is set
    when the registry already holds the entry because an accepted overwrite
    wrote it; callers add the entry themselves only when it is False.
    """

    status: CommitStatus
    entry: Optional[CredentialEntry] = None
    reason: Optional[FailureReason] = None
    stored: bool = False

    @property
    def committed(self) -> bool:
        return self.status == CommitStatus.COMMITTED
