"""Re-run J transcripts: input lines after a three-space prompt, output flush left."""

from __future__ import annotations

from .evaluator import Session
from .lexer import scan_sentence
from .words import format_word

PROMPT = "   "


def input_lines(transcript: str) -> list[str]:
    """The J sentences in a transcript, with the prompt removed."""
    return [line[len(PROMPT) :] for line in transcript.splitlines() if line.startswith(PROMPT)]


def _eval_strict(session: Session, sentence: str) -> str:
    word = session.eval_sentence(scan_sentence(sentence))
    return "" if word is None else format_word(word)


def rerun(session: Session, transcript: str, *, strict: bool = False) -> str:
    """Evaluate every prompted line and return a transcript with fresh outputs.

    Lines without the prompt are previous outputs and are dropped. With
    ``strict`` a failing sentence raises its ``JError`` instead of recording
    the error text as output.
    """
    out: list[str] = []
    for line in transcript.splitlines():
        if not line.startswith(PROMPT):
            continue
        sentence = line[len(PROMPT) :]
        if sentence.startswith(" "):
            raise ValueError(f"transcript input is over-indented: {line!r}")
        output = _eval_strict(session, sentence) if strict else session.eval_text(sentence)
        out.append(line + "\n")
        out.append(output + "\n")
    return "".join(out)
