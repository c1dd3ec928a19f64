# pr_review/diff_annotator.py
from typing import Iterable

from .models import ChangedFile

MAX_CHANGES = 500
LINE_NUMBER_WIDTH = 5


def annotate(patch: str) -> str:
    """
    Prefix every line that exists in the post-change file with its line number.

    Added ('+') and context (' ') lines advance a counter shared by every hunk
    in the patch and get the counter right-aligned in a 5-wide field plus a
    space. Removed ('-') lines get a blank field so their text lines up.
    Anything else (hunk headers, file headers, binary notices, "\\ No newline")
    passes through untouched.
    """
    line_number = 0
    out = []
    for line in patch.split("\n"):
        if line.startswith("+") or line.startswith(" "):
            line_number += 1
            out.append(f"{line_number:>{LINE_NUMBER_WIDTH}} {line}")
        elif line.startswith("-"):
            out.append(" " * LINE_NUMBER_WIDTH + line)
        else:
            out.append(line)
    return "\n".join(out)


def build_diff(files: Iterable[ChangedFile], max_changes: int = MAX_CHANGES) -> str:
    """Annotated diff of every file small enough to review, one block per file."""
    blocks = []
    for f in files:
        if f.changes > max_changes:
            continue
        blocks.append(f"File: {f.filename}\n{annotate(f.patch or '')}")
    return "\n\n".join(blocks)
