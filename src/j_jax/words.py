"""Words and sentences: the units passed from the scanner to the evaluator.

A run of space separated numbers is a single word, so ``1 2 3 + 4 5 6`` is
three words.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .primitives import Primitive
from .values import Array, Atom, format_noun


@dataclass(frozen=True)
class OpenParen:
    def __str__(self) -> str:
        return "("


@dataclass(frozen=True)
class CloseParen:
    def __str__(self) -> str:
        return ")"


OPEN_PAREN = OpenParen()
CLOSE_PAREN = CloseParen()

Word = Union[Atom, Array, Primitive, OpenParen, CloseParen]


def is_noun_word(word: object) -> bool:
    return isinstance(word, (Atom, Array))


def is_verb_word(word: object) -> bool:
    return isinstance(word, Primitive)


def format_word(word: Word, width: int | None = None) -> str:
    if is_noun_word(word):
        return format_noun(word, width)
    return str(word)


@dataclass(frozen=True)
class Sentence:
    """One line of J, as an ordered tuple of words."""

    words: tuple[Word, ...] = ()

    def __len__(self) -> int:
        return len(self.words)

    def __iter__(self):
        return iter(self.words)

    def __getitem__(self, index):
        return self.words[index]

    def display(self) -> str:
        return " ".join(format_word(w) for w in self.words)

    def __str__(self) -> str:
        return self.display()
