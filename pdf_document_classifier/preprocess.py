from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List

import fitz  # PyMuPDF

from .agents import DocumentContext
from .lines import TextFragment, reconstruct_lines

# PyMuPDF block types
TEXT_BLOCK = 0


@dataclass
class PDFPreprocessor:
    """
    Extracts positioned text fragments from a PDF and rebuilds its text.

    Each span of a PyMuPDF text line becomes one fragment, and every line is
    closed with an empty fragment marking the line break.
    """

    max_pages: int | None = None

    def load(self, file_path: Path) -> DocumentContext:
        with fitz.open(file_path) as doc:
            if doc.page_count == 0:
                raise ValueError(f"No pages in {file_path.name}")

            pages: List[List[TextFragment]] = []
            for page_index in range(doc.page_count):
                if self.max_pages is not None and page_index >= self.max_pages:
                    break
                page = doc.load_page(page_index)
                pages.append(self._page_fragments(page, page_index))
            page_count = doc.page_count

        metadata = {
            "pages": page_count,
            "file": file_path.name,
            "type": "pdf",
        }
        return DocumentContext(
            file_path=file_path,
            pages=pages,
            text=reconstruct_lines(pages),
            metadata=metadata,
        )

    def _page_fragments(self, page: Any, page_index: int) -> List[TextFragment]:
        fragments: List[TextFragment] = []
        layout = page.get_text("dict")
        for block in layout.get("blocks", []):
            if block.get("type") != TEXT_BLOCK:
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    text = span.get("text", "")
                    if not text:
                        continue
                    x0, y0, x1, y1 = span["bbox"]
                    fragments.append(
                        TextFragment(
                            text=text,
                            page=page_index,
                            x=x0,
                            y=y0,
                            width=x1 - x0,
                            height=y1 - y0,
                        )
                    )
                fragments.append(TextFragment(text="", page=page_index))
        return fragments
