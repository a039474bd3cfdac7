"""Primitive (built-in) verbs and the rank logic that applies them.

See https://code.jsoftware.com/wiki/Vocabulary/Words#Primitives for the J
vocabulary this is a small subset of.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from typing import Callable, ClassVar, Final, Union

import jax
from jax import lax
import jax.numpy as jnp

from .errors import JDomainError, JLengthError, JOutOfMemoryError, JUnimplementedError
from .values import DTYPE, Array, Atom, Noun, as_jax_array, noun_from_jax, shape_of

logger = logging.getLogger(__name__)

_USE_JITTED_KERNELS: Final[bool] = os.environ.get("J_JAX_DISABLE_JITTED_KERNELS", "0") != "1"

# Error rather than allocating an array larger than this, so that the
# machine's memory is not exhausted.
ARRAY_SIZE_LIMIT: Final[int] = max(0, int(os.environ.get("J_JAX_ARRAY_SIZE_LIMIT", "100000000")))

Kernel = Callable[..., jnp.ndarray]
DomainCheck = Callable[..., None]


@dataclass(frozen=True)
class PerAtom:
    """Rank 0: the kernel is defined on atoms and mapped over lists."""

    kernel: Kernel
    check: DomainCheck | None = None
    rank: ClassVar[str] = "0"


@dataclass(frozen=True)
class WholeValue:
    """Infinite rank: the function sees the whole noun."""

    fn: Callable[..., Noun]
    rank: ClassVar[str] = "_"


@dataclass(frozen=True)
class Unimplemented:
    rank: ClassVar[None] = None


UNIMPLEMENTED: Final = Unimplemented()

Valence = Union[PerAtom, WholeValue, Unimplemented]


_JITTED_KERNELS: dict[tuple[str, str], Kernel] = {}


def _compiled_kernel(name: str, valence: str, kernel: Kernel) -> Kernel:
    if not _USE_JITTED_KERNELS:
        return kernel
    key = (name, valence)
    fn = _JITTED_KERNELS.get(key)
    if fn is None:
        logger.debug("jit-compiling %s kernel for %r", valence, name)
        fn = jax.jit(kernel)
        _JITTED_KERNELS[key] = fn
    return fn


@dataclass(frozen=True)
class Primitive:
    """A builtin verb such as ``-`` or ``<.``."""

    name: str
    monad_impl: Valence = UNIMPLEMENTED
    dyad_impl: Valence = UNIMPLEMENTED

    def monad(self, y: Noun) -> Noun:
        impl = self.monad_impl
        if isinstance(impl, PerAtom):
            arr = as_jax_array(y)
            if impl.check is not None:
                impl.check(arr)
            result = _compiled_kernel(self.name, "monad", impl.kernel)(arr)
            return noun_from_jax(result, like=y)
        if isinstance(impl, WholeValue):
            return impl.fn(y)
        raise JUnimplementedError(f"unimplemented: monad {self.name}")

    def dyad(self, x: Noun, y: Noun) -> Noun:
        impl = self.dyad_impl
        if isinstance(impl, PerAtom):
            xa, ya, like = _agree(x, y)
            if impl.check is not None:
                impl.check(xa, ya)
            result = _compiled_kernel(self.name, "dyad", impl.kernel)(xa, ya)
            return noun_from_jax(result, like=like)
        if isinstance(impl, WholeValue):
            return impl.fn(x, y)
        raise JUnimplementedError(f"unimplemented: dyad {self.name}")

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Primitive(name={self.name!r})"


def _agree(x: Noun, y: Noun) -> tuple[jnp.ndarray, jnp.ndarray, Noun]:
    """Pair up dyad operands: equal shapes, or an atom against anything."""
    if isinstance(x, Atom) and isinstance(y, Atom):
        return x.as_jax(), y.as_jax(), x
    if isinstance(x, Array) and isinstance(y, Array):
        if x.shape != y.shape:
            raise JLengthError(f"length error: shapes {x.shape} and {y.shape} do not agree")
        return x.data, y.data, y
    if isinstance(x, Atom) and isinstance(y, Array):
        return jnp.broadcast_to(x.as_jax(), y.shape), y.data, y
    if isinstance(x, Array) and isinstance(y, Atom):
        return x.data, jnp.broadcast_to(y.as_jax(), x.shape), x
    raise TypeError(f"dyad operands must be nouns, got {type(x).__name__} and {type(y).__name__}")


def _require_real(name: str) -> DomainCheck:
    def check(*arrays: jnp.ndarray) -> None:
        for arr in arrays:
            if bool(jnp.any(jnp.imag(arr) != 0)):
                raise JDomainError(f"domain error: {name} requires real arguments")

    return check


def _require_boolean_range(y: jnp.ndarray) -> None:
    re = jnp.real(y)
    if bool(jnp.any(jnp.imag(y) != 0)) or not bool(jnp.all((re >= 0) & (re <= 1))):
        raise JDomainError("domain error: -. requires arguments between 0 and 1")


def _as_complex(re: jnp.ndarray) -> jnp.ndarray:
    return lax.complex(re, jnp.zeros_like(re))


def _both_real(x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    return (jnp.imag(x) == 0) & (jnp.imag(y) == 0)


def _plus(x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    return x + y


def _minus(x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    return x - y


def _negate(y: jnp.ndarray) -> jnp.ndarray:
    return -y


def _times(x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    # Real operands multiply as reals so inf * 2 has no NaN imaginary part.
    real_product = _as_complex(jnp.real(x) * jnp.real(y))
    product = jnp.where(_both_real(x, y), real_product, x * y)
    return jnp.where((x == 0) | (y == 0), jnp.zeros_like(product), product)


def _signum(y: jnp.ndarray) -> jnp.ndarray:
    real_sign = _as_complex(jnp.sign(jnp.real(y)))
    magnitude = jnp.abs(y)
    unit = y / jnp.where(magnitude == 0, 1.0, magnitude)
    return jnp.where(jnp.imag(y) == 0, real_sign, unit)


def _quotient_by_real(n: jnp.ndarray, d: jnp.ndarray) -> jnp.ndarray:
    q = n / d
    return jnp.where((n == 0) & (d == 0), jnp.zeros_like(q), q)


def _divide(x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    real_divisor = jnp.imag(y) == 0
    yr = jnp.real(y)
    by_real = lax.complex(_quotient_by_real(jnp.real(x), yr), _quotient_by_real(jnp.imag(x), yr))
    general = x / jnp.where(real_divisor, jnp.ones_like(y), y)
    return jnp.where(real_divisor, by_real, general)


def _reciprocal(y: jnp.ndarray) -> jnp.ndarray:
    return _divide(jnp.ones_like(y), y)


def _not(y: jnp.ndarray) -> jnp.ndarray:
    return 1 - y


def _floor(y: jnp.ndarray) -> jnp.ndarray:
    return _as_complex(jnp.floor(jnp.real(y)))


def _ceiling(y: jnp.ndarray) -> jnp.ndarray:
    return _as_complex(jnp.ceil(jnp.real(y)))


def _lesser_of(x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    return _as_complex(jnp.minimum(jnp.real(x), jnp.real(y)))


def _larger_of(x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    return _as_complex(jnp.maximum(jnp.real(x), jnp.real(y)))


def _equal(x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    return (x == y).astype(DTYPE)


def _less_than(x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    return (jnp.real(x) < jnp.real(y)).astype(DTYPE)


def _larger_than(x: jnp.ndarray, y: jnp.ndarray) -> jnp.ndarray:
    return (jnp.real(x) > jnp.real(y)).astype(DTYPE)


def _shape_of(y: Noun) -> Noun:
    return Array.from_atoms(shape_of(y))


def _tally(y: Noun) -> Noun:
    return Atom(len(y) if isinstance(y, Array) else 1)


def _integers(y: Noun) -> Noun:
    if isinstance(y, Array):
        raise JUnimplementedError("unimplemented: i. of a list (multi-dimensional result)")
    value = y.try_to_float()
    if value is None or not math.isfinite(value) or not value.is_integer():
        raise JDomainError("domain error: i. requires an integer argument")
    n = int(value)
    if abs(n) > ARRAY_SIZE_LIMIT:
        raise JOutOfMemoryError(f"out of memory: i. argument exceeds the array size limit of {ARRAY_SIZE_LIMIT}")
    if n >= 0:
        return Array(jnp.arange(n, dtype=jnp.float64))
    return Array(jnp.arange(-n - 1, -1, -1, dtype=jnp.float64))


PLUS: Final = Primitive("+", dyad_impl=PerAtom(_plus))
MINUS: Final = Primitive("-", PerAtom(_negate), PerAtom(_minus))
STAR: Final = Primitive("*", PerAtom(_signum), PerAtom(_times))
PERCENT: Final = Primitive("%", PerAtom(_reciprocal), PerAtom(_divide))
MINUS_DOT: Final = Primitive("-.", PerAtom(_not, _require_boolean_range))
LESS_DOT: Final = Primitive(
    "<.",
    PerAtom(_floor, _require_real("<.")),
    PerAtom(_lesser_of, _require_real("<.")),
)
GREATER_DOT: Final = Primitive(
    ">.",
    PerAtom(_ceiling, _require_real(">.")),
    PerAtom(_larger_of, _require_real(">.")),
)
EQUAL: Final = Primitive("=", dyad_impl=PerAtom(_equal))
LESS: Final = Primitive("<", dyad_impl=PerAtom(_less_than, _require_real("<")))
GREATER: Final = Primitive(">", dyad_impl=PerAtom(_larger_than, _require_real(">")))
DOLLAR: Final = Primitive("$", WholeValue(_shape_of))
HASH: Final = Primitive("#", WholeValue(_tally))
I_DOT: Final = Primitive("i.", WholeValue(_integers))

# All primitive verbs, searched by exact spelling.
PRIMITIVES: Final[tuple[Primitive, ...]] = (
    PLUS,
    MINUS,
    STAR,
    PERCENT,
    MINUS_DOT,
    LESS_DOT,
    GREATER_DOT,
    EQUAL,
    LESS,
    GREATER,
    DOLLAR,
    HASH,
    I_DOT,
)


def lookup(name: str) -> Primitive | None:
    for primitive in PRIMITIVES:
        if primitive.name == name:
            return primitive
    return None


def by_name(name: str) -> Primitive:
    primitive = lookup(name)
    if primitive is None:
        raise JUnimplementedError(f"unimplemented: primitive {name}")
    return primitive
