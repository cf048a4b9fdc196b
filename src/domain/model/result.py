"""Service result envelope.

Every user service operation returns either a Success or a Failure.
Build them through success() / failure(); both validate their kind so a
failure without a message or a success tagged with a failure kind cannot exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar('T')


class ResultKind(str, Enum):
    """Transport-independent classification of an operation outcome."""
    SUCCESS_WITH_DATA = 'success_with_data'
    CREATED = 'created'
    SUCCESS_NO_DATA = 'success_no_data'
    VALIDATION_FAILURE = 'validation_failure'
    UNAUTHENTICATED = 'unauthenticated'
    INVALID_CREDENTIALS = 'invalid_credentials'
    FORBIDDEN = 'forbidden'
    NOT_FOUND = 'not_found'
    CONFLICT = 'conflict'

    @property
    def is_success(self) -> bool:
        return self in _SUCCESS_KINDS


_SUCCESS_KINDS = frozenset({
    ResultKind.SUCCESS_WITH_DATA,
    ResultKind.CREATED,
    ResultKind.SUCCESS_NO_DATA,
})


@dataclass(frozen=True)
class Success(Generic[T]):
    payload: T | None
    kind: ResultKind = ResultKind.SUCCESS_WITH_DATA

    def __post_init__(self):
        if not self.kind.is_success:
            raise ValueError(f"Success cannot carry failure kind {self.kind.value}")

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    message: str
    kind: ResultKind = ResultKind.VALIDATION_FAILURE

    def __post_init__(self):
        if not self.message:
            raise ValueError("Failure requires a message")
        if self.kind.is_success:
            raise ValueError(f"Failure cannot carry success kind {self.kind.value}")

    @property
    def ok(self) -> bool:
        return False


ServiceResult = Union[Success[Any], Failure]


def success(payload: Any = None, kind: ResultKind = ResultKind.SUCCESS_WITH_DATA) -> Success:
    return Success(payload=payload, kind=kind)


def failure(message: str, kind: ResultKind = ResultKind.VALIDATION_FAILURE) -> Failure:
    return Failure(message=message, kind=kind)
