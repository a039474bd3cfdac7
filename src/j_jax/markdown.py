"""Execute J code within code blocks in Markdown documents.

A document is split into chunks that are either J code blocks or any other
text. Concatenating the chunks reproduces the document byte for byte, so
re-running the examples and reassembling gives back the input exactly when
every recorded output is current.
"""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Union

from markdown_it import MarkdownIt

from .evaluator import Session
from .transcript import rerun

logger = logging.getLogger(__name__)

INDENT: Final[str] = "    "
DIFF_CONTEXT_LINES: Final[int] = 8

# Fenced blocks are only run when untagged or tagged as J.
_J_FENCE_LANGUAGES: Final[frozenset[str]] = frozenset({"", "j", "ijs"})


@dataclass(frozen=True)
class TextChunk:
    """Markdown text outside any J example."""

    text: str


@dataclass(frozen=True)
class CodeChunk:
    """A J example: prompted input lines and flush-left output lines.

    Indented blocks have their four-space indent removed from ``text``;
    fenced blocks keep their fence lines verbatim in ``opening`` and
    ``closing``.
    """

    text: str
    fenced: bool = False
    opening: str = ""
    closing: str = ""

    def render(self, body: str) -> str:
        if self.fenced:
            return self.opening + body + self.closing
        return "".join(INDENT + line if line.strip() else line for line in _split_lines(body))


Chunk = Union[TextChunk, CodeChunk]


def _split_lines(text: str) -> list[str]:
    """Split after each newline, keeping it; unlike ``str.splitlines`` only ``\\n`` counts."""
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _is_fence_line(line: str, markup: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and stripped.startswith(markup) and set(stripped) == {markup[0]}


class Literate:
    """A parsed Markdown file containing J examples."""

    def __init__(self, chunks: list[Chunk]) -> None:
        self.chunks = chunks

    @classmethod
    def parse(cls, markdown: str) -> "Literate":
        lines = _split_lines(markdown)
        tokens = MarkdownIt("commonmark").parse(markdown)
        chunks: list[Chunk] = []
        # Everything in lines[:prev] has already been moved into chunks.
        prev = 0
        for token in tokens:
            if token.level != 0 or token.map is None:
                continue
            start, end = token.map
            if token.type == "code_block":
                chunk = CodeChunk(text=token.content)
            elif token.type == "fence":
                language = token.info.strip().split(" ")[0].lower() if token.info.strip() else ""
                if language not in _J_FENCE_LANGUAGES:
                    continue
                closed = end - 1 > start and _is_fence_line(lines[end - 1], token.markup)
                chunk = CodeChunk(
                    text=token.content,
                    fenced=True,
                    opening=lines[start],
                    closing=lines[end - 1] if closed else "",
                )
            else:
                continue
            if start > prev:
                chunks.append(TextChunk("".join(lines[prev:start])))
            chunks.append(chunk)
            prev = end
        if prev < len(lines):
            chunks.append(TextChunk("".join(lines[prev:])))
        return cls(chunks)

    def examples(self) -> list[CodeChunk]:
        return [chunk for chunk in self.chunks if isinstance(chunk, CodeChunk)]

    def extract_transcript(self) -> str:
        """The J transcript of all the examples."""
        return "".join(chunk.text for chunk in self.examples())

    def reassemble(self) -> str:
        """Rebuild the document from its chunks without running anything."""
        return "".join(chunk.render(chunk.text) if isinstance(chunk, CodeChunk) else chunk.text for chunk in self.chunks)

    def run(self, session: Session, *, strict: bool = True) -> str:
        """Run all the examples and return the reassembled document."""
        out: list[str] = []
        for chunk in self.chunks:
            if isinstance(chunk, CodeChunk):
                out.append(chunk.render(rerun(session, chunk.text, strict=strict)))
            else:
                out.append(chunk.text)
        return "".join(out)


def _run_file(markdown_path: Path, *, strict: bool) -> tuple[str, str]:
    markdown = Path(markdown_path).read_text(encoding="utf-8")
    literate = Literate.parse(markdown)
    logger.info("running %d examples from %s", len(literate.examples()), markdown_path)
    return markdown, literate.run(Session(), strict=strict)


def diff_file(markdown_path: Path | str, *, strict: bool = True) -> str:
    """Run the examples in a Markdown file and diff the recorded outputs.

    The result is an empty string when every output is up to date.
    """
    markdown, output = _run_file(Path(markdown_path), strict=strict)
    diff = difflib.unified_diff(
        _split_lines(markdown),
        _split_lines(output),
        fromfile=str(markdown_path),
        tofile=f"{markdown_path}.new",
        n=DIFF_CONTEXT_LINES,
    )
    return "".join(diff)


def update_file(markdown_path: Path | str, *, strict: bool = True) -> bool:
    """Rewrite a Markdown file with fresh example outputs.

    The previous content is kept as ``<path>.old``. Returns whether the file
    changed.
    """
    path = Path(markdown_path)
    markdown, output = _run_file(path, strict=strict)
    if output == markdown:
        return False
    backup = path.with_name(path.name + ".old")
    path.replace(backup)
    path.write_text(output, encoding="utf-8")
    logger.info("updated %s (previous content in %s)", path, backup)
    return True


def extract_transcript(markdown_path: Path | str) -> str:
    markdown = Path(markdown_path).read_text(encoding="utf-8")
    return Literate.parse(markdown).extract_transcript()
