"""Right-to-left evaluation of scanned J sentences."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import JError, JSyntaxError
from .lexer import scan_sentence
from .primitives import Primitive
from .values import Array, Atom
from .words import OpenParen, CloseParen, Sentence, Word, format_word, is_noun_word

logger = logging.getLogger(__name__)


def _is_verb(word: Word) -> bool:
    return isinstance(word, Primitive)


def _at(stack: list[Word], i: int) -> Word | None:
    if 0 <= i < len(stack):
        return stack[i]
    return None


def _reduce_at(stack: list[Word], i: int) -> bool:
    """Try each grammar rule at position ``i``; rewrite ``stack`` on a match."""
    here = stack[i]
    right = _at(stack, i + 1)
    left = _at(stack, i - 1)

    if _is_verb(here) and is_noun_word(right) and (left is None or _is_verb(left) or isinstance(left, OpenParen)):
        result = here.monad(right)
        logger.debug("monad %s %s -> %s", here, format_word(right), format_word(result))
        stack[i : i + 2] = [result]
        return True

    far_right = _at(stack, i + 2)
    if is_noun_word(here) and _is_verb(right) and is_noun_word(far_right):
        result = right.dyad(here, far_right)
        logger.debug("dyad %s %s %s -> %s", format_word(here), right, format_word(far_right), format_word(result))
        stack[i : i + 3] = [result]
        return True

    if isinstance(here, OpenParen) and (is_noun_word(right) or _is_verb(right)) and isinstance(far_right, CloseParen):
        stack[i : i + 3] = [right]
        return True

    return False


def reduce_sentence(sentence: Sentence) -> Word | None:
    """Reduce a sentence to at most one word.

    The cursor starts at the right end and moves left. After a reduction it
    steps back one place to the right, because the new word can complete a
    pattern on either side of it.
    """
    stack: list[Word] = list(sentence.words)
    i = len(stack) - 1
    while i >= 0:
        if _reduce_at(stack, i):
            i = min(i + 1, len(stack) - 1)
        else:
            i -= 1

    if not stack:
        return None
    if len(stack) == 1 and (is_noun_word(stack[0]) or _is_verb(stack[0])):
        return stack[0]
    residue = " | ".join(format_word(w) for w in stack)
    raise JSyntaxError(f"syntax error: cannot reduce [{residue}]", tuple(stack))


@dataclass
class Session:
    """A J interpreter session.

    Sessions hold no bindings yet; each host connection should own its own.
    """

    def eval_sentence(self, sentence: Sentence) -> Word | None:
        """Evaluate a scanned sentence; ``None`` for an empty one."""
        return reduce_sentence(sentence)

    def eval_text(self, line: str) -> str:
        """Evaluate one line of text and return the result as text."""
        try:
            word = self.eval_sentence(scan_sentence(line))
        except JError as err:
            return f"error: {err}"
        if word is None:
            return ""
        return format_word(word)


def evaluate(source: str, session: Session | None = None) -> Atom | Array | Primitive | None:
    """Scan and evaluate ``source``, raising ``JError`` on failure."""
    if session is None:
        session = Session()
    return session.eval_sentence(scan_sentence(source))
