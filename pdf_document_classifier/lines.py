from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence


@dataclass(frozen=True)
class TextFragment:
    """A piece of text as positioned on a PDF page by the layout engine."""

    text: str
    page: int = 0
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


def iter_fragments(pages: Iterable[Sequence[TextFragment]]) -> Iterable[TextFragment]:
    for page in pages:
        yield from page


def reconstruct_lines(pages: Iterable[Sequence[TextFragment]]) -> str:
    """
    Rebuild logical text lines from page-ordered fragments.

    Fragments are taken in the order the engine returns them. An empty
    fragment ends the current line; any other fragment is appended to it
    without a separator. No reordering by coordinates is done, so the
    result is only as good as the engine's fragment boundaries.
    """
    lines: List[str] = []
    line = ""
    for fragment in iter_fragments(pages):
        if fragment.text == "":
            lines.append(line)
            line = ""
        else:
            line += fragment.text
    if line:
        lines.append(line)
    return "\n".join(lines)
