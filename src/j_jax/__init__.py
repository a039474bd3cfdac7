"""j-jax public API."""

__version__ = "0.1.0"

from .values import Array, Atom, Noun, format_atom, format_noun, format_real
from .primitives import ARRAY_SIZE_LIMIT, PRIMITIVES, Primitive, by_name, lookup
from .words import CLOSE_PAREN, OPEN_PAREN, Sentence, Word
from .lexer import scan_sentence
from .evaluator import Session, evaluate
from .errors import (
    JDomainError,
    JError,
    JLengthError,
    JOutOfMemoryError,
    JRuntimeError,
    JScanError,
    JSyntaxError,
    JUnimplementedError,
    NumberParseError,
    UnexpectedCharacterError,
)

__all__ = [
    "__version__",
    "Atom",
    "Array",
    "Noun",
    "format_atom",
    "format_noun",
    "format_real",
    "ARRAY_SIZE_LIMIT",
    "PRIMITIVES",
    "Primitive",
    "by_name",
    "lookup",
    "OPEN_PAREN",
    "CLOSE_PAREN",
    "Sentence",
    "Word",
    "scan_sentence",
    "Session",
    "evaluate",
    "JError",
    "JScanError",
    "UnexpectedCharacterError",
    "NumberParseError",
    "JUnimplementedError",
    "JRuntimeError",
    "JDomainError",
    "JLengthError",
    "JOutOfMemoryError",
    "JSyntaxError",
]
