"""Estado de carga de un resolver (Loading / Ready / Failed).

Cada resolver posee su propia instancia; el renderer solo la lee.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class FailureKind(str, Enum):
    TRANSPORT = "transport"
    PARSE = "parse"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Ready(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failed:
    reason: str
    kind: FailureKind = FailureKind.TRANSPORT


FetchState = Union[Loading, Ready[T], Failed]
