"""Structured error types for scan/evaluation separation."""

from __future__ import annotations

from dataclasses import dataclass


class JError(Exception):
    """Base class for structured j-jax errors."""


class JScanError(JError):
    """Failure while turning source text into words."""


@dataclass(frozen=True)
class UnexpectedCharacterError(JScanError):
    """A character that cannot start or continue any word."""

    char: str
    pos: int

    def __str__(self) -> str:
        return f"unexpected character {self.char!r} at index {self.pos}"


@dataclass(frozen=True)
class NumberParseError(JScanError):
    """A numeric literal that the float parser rejected."""

    text: str
    pos: int

    def __str__(self) -> str:
        return f"invalid number {self.text!r} at index {self.pos}"


class JUnimplementedError(JError):
    """Feature exists in J but is not supported by this interpreter."""


class JRuntimeError(JError):
    """Generic evaluation failure after a successful scan."""


class JDomainError(JRuntimeError):
    """Argument outside the mathematical domain of a primitive."""


class JLengthError(JRuntimeError):
    """Operands whose shapes do not agree."""


class JOutOfMemoryError(JRuntimeError):
    """Requested allocation is above the configured array size ceiling."""


class JSyntaxError(JError):
    """The sentence did not reduce to a single word."""

    def __init__(self, message: str, residue: tuple[object, ...] = ()) -> None:
        super().__init__(message)
        self.residue = residue
