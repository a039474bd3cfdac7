"""Runtime value model and text formatting for J nouns."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Final, Iterable, Iterator, Union

import jax
import jax.numpy as jnp

# Atoms are complex doubles; without x64 jax silently narrows to complex64.
jax.config.update("jax_enable_x64", True)

DTYPE: Final = jnp.complex128
DISPLAY_WIDTH: Final[int] = max(1, int(os.environ.get("J_JAX_DISPLAY_WIDTH", "80")))
_ELLIPSIS: Final[str] = " ..."


@dataclass(frozen=True)
class Atom:
    """A single complex-valued scalar."""

    value: complex

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", complex(self.value))

    @property
    def re(self) -> float:
        return self.value.real

    @property
    def im(self) -> float:
        return self.value.imag

    def is_real(self) -> bool:
        return self.value.imag == 0.0

    def try_to_float(self) -> float | None:
        """Return the real part if the atom has no imaginary part."""
        if self.is_real():
            return self.value.real
        return None

    def as_jax(self) -> jnp.ndarray:
        return jnp.asarray(self.value, dtype=DTYPE)

    def __str__(self) -> str:
        return format_atom(self)


@dataclass(frozen=True, eq=False)
class Array:
    """A rank-1 list of atoms held as a ``complex128`` vector.

    Only one-dimensional arrays exist, so the shape is always ``(length,)``.
    """

    data: jnp.ndarray

    def __post_init__(self) -> None:
        data = jnp.asarray(self.data, dtype=DTYPE)
        if data.ndim != 1:
            data = data.reshape(-1)
        object.__setattr__(self, "data", data)

    @classmethod
    def from_atoms(cls, atoms: Iterable[Atom | complex | float | int]) -> "Array":
        values = [a.value if isinstance(a, Atom) else complex(a) for a in atoms]
        return cls(jnp.asarray(values, dtype=DTYPE))

    @property
    def shape(self) -> tuple[int, ...]:
        return (int(self.data.shape[0]),)

    def __len__(self) -> int:
        return self.shape[0]

    def __iter__(self) -> Iterator[Atom]:
        return (Atom(v) for v in self.data.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Array):
            return NotImplemented
        return self.shape == other.shape and bool(jnp.array_equal(self.data, other.data))

    def __repr__(self) -> str:
        return f"Array([{', '.join(repr(a.value) for a in self)}])"

    def __str__(self) -> str:
        return format_array(self)


Noun = Union[Atom, Array]


def shape_of(value: Noun) -> tuple[int, ...]:
    if isinstance(value, Atom):
        return ()
    if isinstance(value, Array):
        return value.shape
    raise TypeError(f"shape_of expects a noun, got {type(value).__name__}")


def as_jax_array(value: Noun) -> jnp.ndarray:
    if isinstance(value, Atom):
        return value.as_jax()
    return value.data


def noun_from_jax(result: jnp.ndarray, *, like: Noun) -> Noun:
    """Wrap a kernel result in the same kind of noun as ``like``."""
    if isinstance(like, Atom):
        return Atom(complex(result.item()))
    return Array(result)


def format_real(x: float) -> str:
    """Format a double the way J prints it.

    Infinities are ``_`` and ``__``, the minus sign is ``_``, and the digits are
    the shortest decimal that reads back to the same double, never in exponent
    form.
    """
    if math.isnan(x):
        return "_."
    if x == math.inf:
        return "_"
    if x == -math.inf:
        return "__"
    if x == 0.0:
        return "0"
    text = repr(x)
    if "e" in text:
        text = format(Decimal(text), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text.replace("-", "_")


def format_atom(atom: Atom | complex) -> str:
    value = atom.value if isinstance(atom, Atom) else complex(atom)
    if value.imag == 0.0:
        return format_real(value.real)
    return f"{format_real(value.real)}j{format_real(value.imag)}"


def format_array(array: Array, width: int | None = None) -> str:
    """Space-separated atoms, cut off with `` ...`` to fit ``width`` columns.

    The first atom is always printed in full, however long. Only a prefix of
    the array is converted off the device, since every printed atom after the
    first takes at least two columns.
    """
    if width is None:
        width = DISPLAY_WIDTH
    texts = [format_atom(value) for value in array.data[: width // 2 + 2].tolist()]
    if len(texts) == len(array):
        line = " ".join(texts)
        if len(line) <= width or len(texts) == 1:
            return line
    out = texts[0]
    for text in texts[1:]:
        if len(out) + 1 + len(text) + len(_ELLIPSIS) > width:
            break
        out += " " + text
    return out + _ELLIPSIS


def format_noun(value: Noun, width: int | None = None) -> str:
    if isinstance(value, Atom):
        return format_atom(value)
    if isinstance(value, Array):
        return format_array(value, width)
    raise TypeError(f"format_noun expects a noun, got {type(value).__name__}")
