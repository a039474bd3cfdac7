"""Read-eval-print loop."""

from __future__ import annotations

import sys
from typing import Callable, TextIO

try:
    import readline  # noqa: F401  line editing and history for input()
except ImportError:
    readline = None

from .evaluator import Session

PROMPT = "   "


def repl(
    session: Session | None = None,
    *,
    read: Callable[[str], str] = input,
    out: TextIO | None = None,
) -> None:
    """Read and evaluate lines until end of input or an interrupt."""
    if session is None:
        session = Session()
    if out is None:
        out = sys.stdout
    while True:
        try:
            line = read(PROMPT)
        except EOFError:
            print("CTRL-D", file=out)
            break
        except KeyboardInterrupt:
            print("CTRL-C", file=out)
            break
        output = session.eval_text(line)
        if output:
            print(output, file=out)
