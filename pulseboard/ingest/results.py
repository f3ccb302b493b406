"""Classified fetch results and the fallback policy that consumes them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    NETWORK = "network"
    TIMEOUT = "timeout"
    SERVER = "server"
    CLIENT = "client"
    MALFORMED = "malformed"


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class TransientFailure:
    """Backend unavailable: transport errors, timeouts, 5xx."""

    kind: ErrorKind
    message: str
    status: int | None = None


@dataclass(frozen=True, slots=True)
class PermanentFailure:
    """The request itself was refused or the answer is unusable."""

    kind: ErrorKind
    message: str
    status: int | None = None


FetchResult = Union[Ok, TransientFailure, PermanentFailure]


class ReadAction(str, Enum):
    ACCEPT = "accept"
    RETRY = "retry"
    FALLBACK = "fallback"


class WriteAction(str, Enum):
    ACCEPT = "accept"
    ECHO = "echo"
    REJECT = "reject"


class MutationRejected(RuntimeError):
    def __init__(self, failure: PermanentFailure) -> None:
        super().__init__(f"Write rejected ({failure.status}): {failure.message}")
        self.failure = failure
        self.status = failure.status


def read_policy(
    result: FetchResult,
    *,
    attempt: int,
    max_attempts: int,
    fallback_active: bool,
) -> ReadAction:
    if isinstance(result, Ok):
        return ReadAction.ACCEPT
    if isinstance(result, PermanentFailure):
        return ReadAction.FALLBACK
    if fallback_active:
        return ReadAction.FALLBACK
    if attempt < max_attempts:
        return ReadAction.RETRY
    return ReadAction.FALLBACK


def write_policy(result: FetchResult) -> WriteAction:
    if isinstance(result, Ok):
        return WriteAction.ACCEPT
    if isinstance(result, PermanentFailure) and result.kind is ErrorKind.CLIENT:
        return WriteAction.REJECT
    return WriteAction.ECHO
