"""Outcome values returned by registry, group and ranking operations."""
from enum import Enum
from typing import Any, List, Optional


class Status(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    TOO_MANY_MEMBERS = "too_many_members"
    NO_VALID_MEMBERS = "no_valid_members"
    INSUFFICIENT_DATA = "insufficient_data"
    NOT_IN_TOP_N = "not_in_top_n"
    INCONSISTENT_STATE = "inconsistent_state"


class Result:
    def __init__(self, status: Status, value: Any = None, message: str = "",
                 warnings: Optional[List[str]] = None):
        self.status = status
        self.value = value
        self.message = message
        self.warnings = list(warnings) if warnings else []

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    @classmethod
    def success(cls, value: Any = None, message: str = "", warnings: Optional[List[str]] = None) -> "Result":
        return cls(Status.OK, value, message, warnings)

    @classmethod
    def failure(cls, status: Status, message: str = "", warnings: Optional[List[str]] = None) -> "Result":
        return cls(status, None, message, warnings)

    def __bool__(self) -> bool:
        return self.ok

    def __repr__(self) -> str:
        return f"Result(status={self.status.value}, value={self.value!r}, message={self.message!r})"
