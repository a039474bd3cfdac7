from __future__ import annotations

import importlib.util
import math
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for scanner tests")
class ScanSentenceTests(unittest.TestCase):
    """Scanning text into words.

    A word can hold several numbers, which is easy to miss when testing only
    through evaluated text.
    """

    def _words(self, source: str):
        from j_jax.lexer import scan_sentence

        return scan_sentence(source).words

    def test_number_with_whitespace(self) -> None:
        from j_jax.lexer import scan_sentence
        from j_jax.values import Atom

        sentence = scan_sentence("  123.45  ")
        self.assertEqual(sentence.words, (Atom(123.45),))
        self.assertEqual(sentence.display(), "123.45")

    def test_simple_numbers(self) -> None:
        from j_jax.values import Atom

        cases = [
            ("123", 123.0),
            ("123.456", 123.456),
            ("0.456789", 0.456789),
            ("_1", -1.0),
            ("_4.5", -4.5),
            ("1e3", 1000.0),
            ("1e_2", 0.01),
        ]
        for source, expected in cases:
            with self.subTest(source=source):
                self.assertEqual(self._words(source), (Atom(expected),))

    def test_infinities(self) -> None:
        from j_jax.lexer import scan_sentence
        from j_jax.values import Atom

        self.assertEqual(self._words("_"), (Atom(math.inf),))
        self.assertEqual(scan_sentence("_").display(), "_")
        self.assertEqual(self._words("__"), (Atom(-math.inf),))
        self.assertEqual(scan_sentence("__").display(), "__")

    def test_several_numbers_in_one_word(self) -> None:
        from j_jax.lexer import scan_sentence
        from j_jax.values import Array

        sentence = scan_sentence("  1 2 3 _4.56 _99 __")
        self.assertEqual(
            sentence.words,
            (Array.from_atoms([1.0, 2.0, 3.0, -4.56, -99.0, -math.inf]),),
        )
        self.assertEqual(sentence.display(), "1 2 3 _4.56 _99 __")

    def test_number_list_stops_at_verb(self) -> None:
        from j_jax.primitives import PLUS
        from j_jax.values import Array, Atom

        self.assertEqual(
            self._words("1 2 3+4"),
            (Array.from_atoms([1, 2, 3]), PLUS, Atom(4)),
        )

    def test_primitives(self) -> None:
        from j_jax.primitives import I_DOT, LESS_DOT, MINUS, MINUS_DOT

        self.assertEqual(self._words(" - -"), (MINUS, MINUS))
        self.assertIs(self._words("-.")[0], MINUS_DOT)
        self.assertIs(self._words("<.")[0], LESS_DOT)
        self.assertIs(self._words("i. 3")[0], I_DOT)

    def test_verb_words_are_the_registered_instances(self) -> None:
        from j_jax.primitives import lookup

        for spelling in ("+", "-", "*", "%", "-.", "$", "#", "i."):
            with self.subTest(spelling=spelling):
                self.assertIs(self._words(spelling)[0], lookup(spelling))

    def test_parentheses(self) -> None:
        from j_jax.values import Atom
        from j_jax.words import CLOSE_PAREN, OPEN_PAREN

        self.assertEqual(self._words("(1)"), (OPEN_PAREN, Atom(1), CLOSE_PAREN))
        self.assertEqual(self._words(" ( ) "), (OPEN_PAREN, CLOSE_PAREN))

    def test_comments_are_dropped(self) -> None:
        from j_jax.values import Atom

        self.assertEqual(self._words("NB. nothing here"), ())
        self.assertEqual(self._words("1 NB. one"), (Atom(1),))
        self.assertEqual(self._words("NB. a\nNB. b\n2"), (Atom(2),))

    def test_empty_input(self) -> None:
        self.assertEqual(self._words(""), ())
        self.assertEqual(self._words(" \t\n"), ())

    def test_no_underscore_inside_numbers(self) -> None:
        from j_jax.errors import NumberParseError
        from j_jax.lexer import scan_sentence

        with self.assertRaises(NumberParseError) as ctx:
            scan_sentence("1_000")
        self.assertEqual(ctx.exception.text, "1_000")
        self.assertEqual(ctx.exception.pos, 0)

    def test_malformed_numbers(self) -> None:
        from j_jax.errors import NumberParseError
        from j_jax.lexer import scan_sentence

        for source in ("1.2.3", "___", "1e", "2 3..4"):
            with self.subTest(source=source):
                with self.assertRaises(NumberParseError):
                    scan_sentence(source)

    def test_letters_inside_numbers_are_unexpected(self) -> None:
        from j_jax.errors import UnexpectedCharacterError
        from j_jax.lexer import scan_sentence

        with self.assertRaises(UnexpectedCharacterError) as ctx:
            scan_sentence("12a")
        self.assertEqual(ctx.exception.char, "a")
        self.assertEqual(ctx.exception.pos, 2)

    def test_unexpected_characters(self) -> None:
        from j_jax.errors import JScanError, UnexpectedCharacterError
        from j_jax.lexer import scan_sentence

        for source, char in (("~", "~"), ("1 + é", "é"), ("x", "x"), ("'a'", "'")):
            with self.subTest(source=source):
                with self.assertRaises(UnexpectedCharacterError) as ctx:
                    scan_sentence(source)
                self.assertEqual(ctx.exception.char, char)
                self.assertIsInstance(ctx.exception, JScanError)

    def test_unknown_primitive_spellings_are_unimplemented(self) -> None:
        from j_jax.errors import JScanError, JUnimplementedError
        from j_jax.lexer import scan_sentence

        for source in ("&", "+:", "a.", "x:", "@."):
            with self.subTest(source=source):
                with self.assertRaises(JUnimplementedError) as ctx:
                    scan_sentence(source)
                self.assertNotIsInstance(ctx.exception, JScanError)


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for scanner tests")
class LexCursorTests(unittest.TestCase):
    def test_peek_take_and_lookahead(self) -> None:
        from j_jax.lexer import Lex

        lex = Lex("ab")
        self.assertEqual(lex.peek(), "a")
        self.assertEqual(lex.lookahead(1), "b")
        self.assertIsNone(lex.lookahead(2))
        self.assertEqual(lex.take(), "a")
        self.assertFalse(lex.take_if("a"))
        self.assertTrue(lex.take_if("b"))
        self.assertTrue(lex.is_end())
        self.assertIsNone(lex.try_peek())

    def test_take_any_and_prefixes(self) -> None:
        from j_jax.lexer import Lex

        lex = Lex("NB. x\n-.")
        self.assertTrue(lex.starts_with("NB."))
        lex.drop_line()
        self.assertEqual(lex.take_any("+-"), "-")
        self.assertIsNone(lex.take_any("+-"))
        self.assertEqual(lex.take_any(".:"), ".")


if __name__ == "__main__":
    unittest.main()
