"""Success/failure result wrappers.

Parsing, compact URL decoding and decryption return one of these instead of
raising, so callers can branch on ``result.success``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Literal, TypeVar, Union

from wols.errors import WolsError

T = TypeVar("T")


@dataclass(frozen=True)
class ParseSuccess(Generic[T]):
    """Successful result wrapper.

    Attributes:
        data: The decoded value
    """

    data: T
    success: Literal[True] = field(default=True, init=False)


@dataclass(frozen=True)
class ParseFailure:
    """Failed result wrapper.

    Attributes:
        error: The classified error
    """

    error: WolsError
    success: Literal[False] = field(default=False, init=False)


ParseResult = Union[ParseSuccess[T], ParseFailure]
