"""Scan J source into words.

Scanning proceeds left to right and produces a sentence of words: constant
nouns, verbs, and parentheses. Comments are dropped at this stage.

The most interesting thing about J's grammar is that a space separated list
of numbers is a single word: this is how ``* 1 2 3`` knows to apply to all the
numbers, because together they are the one argument.
"""

from __future__ import annotations

import math

from .errors import NumberParseError, UnexpectedCharacterError
from .primitives import by_name
from .values import Array, Atom
from .words import CLOSE_PAREN, OPEN_PAREN, Sentence, Word

_VERB_SYMBOLS = "#$%&*+-/<=>?@"
_INFLECTIONS = ".:"
_WHITESPACE = " \t\n\r\f\v"


def _is_ascii_alpha(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class Lex:
    """A cursor over source text, with lookahead."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0

    def is_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self) -> str:
        """The next character; only valid when not at the end."""
        return self.source[self.pos]

    def try_peek(self) -> str | None:
        if self.is_end():
            return None
        return self.peek()

    def lookahead(self, n: int) -> str | None:
        i = self.pos + n
        if i < len(self.source):
            return self.source[i]
        return None

    def take(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def take_if(self, ch: str) -> bool:
        if self.try_peek() == ch:
            self.pos += 1
            return True
        return False

    def take_any(self, chars: str) -> str | None:
        """Consume and return the next character if it is one of ``chars``."""
        ch = self.try_peek()
        if ch is not None and ch in chars:
            self.pos += 1
            return ch
        return None

    def starts_with(self, prefix: str) -> bool:
        return self.source.startswith(prefix, self.pos)

    def drop_whitespace(self) -> None:
        while not self.is_end() and self.peek() in _WHITESPACE:
            self.pos += 1

    def drop_line(self) -> None:
        while not self.is_end():
            if self.take() == "\n":
                break


def scan_sentence(source: str) -> Sentence:
    """Scan one line of J into a sentence of words."""
    lex = Lex(source)
    words: list[Word] = []
    while True:
        word = _scan_word(lex)
        if word is None:
            break
        words.append(word)
    return Sentence(tuple(words))


def _skip_blanks_and_comments(lex: Lex) -> None:
    while True:
        lex.drop_whitespace()
        if lex.starts_with("NB."):
            lex.drop_line()
            continue
        return


def _scan_word(lex: Lex) -> Word | None:
    _skip_blanks_and_comments(lex)
    if lex.is_end():
        return None

    sym = lex.take_any(_VERB_SYMBOLS)
    if sym is not None:
        name = sym + (lex.take_any(_INFLECTIONS) or "")
        return by_name(name)

    if _is_ascii_alpha(lex.peek()):
        dots = lex.lookahead(1)
        if dots is not None and dots in _INFLECTIONS:
            name = lex.take() + lex.take()
            return by_name(name)
    elif lex.take_if("("):
        return OPEN_PAREN
    elif lex.take_if(")"):
        return CLOSE_PAREN

    # Take as many contiguous numbers as we can as one list-of-numbers word.
    numbers: list[complex] = []
    while True:
        number = _scan_number(lex)
        if number is None:
            break
        numbers.append(number)
        lex.drop_whitespace()

    if len(numbers) == 1:
        return Atom(numbers[0])
    if numbers:
        return Array.from_atoms(numbers)
    if lex.is_end():
        return None
    raise UnexpectedCharacterError(lex.peek(), lex.pos)


def _scan_number(lex: Lex) -> complex | None:
    """Take one number, if one starts here."""
    ch = lex.try_peek()
    if ch is None or not (_is_ascii_digit(ch) or ch == "_"):
        return None

    start = lex.pos
    # A leading _ is J's negative sign; mapping every _ to - also makes
    # 1_000 fail in the float parser rather than being read as 1000.
    chars: list[str] = []
    while True:
        ch = lex.try_peek()
        if ch is None:
            break
        if ch == "." or ch == "e" or _is_ascii_digit(ch):
            chars.append(lex.take())
        elif ch == "_":
            lex.take()
            chars.append("-")
        elif _is_ascii_alpha(ch):
            raise UnexpectedCharacterError(ch, lex.pos)
        else:
            break

    text = "".join(chars)
    if text == "-":
        return complex(math.inf, 0.0)
    if text == "--":
        return complex(-math.inf, 0.0)
    try:
        return complex(float(text), 0.0)
    except ValueError as exc:
        raise NumberParseError(lex.source[start : lex.pos], start) from exc
