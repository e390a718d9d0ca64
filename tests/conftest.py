import json
from pathlib import Path
from typing import Callable, List

import fitz  # PyMuPDF
import pytest
from pydantic_ai.messages import ModelMessage, ModelResponse, TextPart
from pydantic_ai.models.function import AgentInfo, FunctionModel

from pdf_document_classifier.agents import AttributeAgent

INVOICE_ATTRIBUTES = {
    "type": "請求書",
    "recipient": "Example",
    "author": "ACME",
    "date": "20240101",
    "amount": 1000,
    "symbol": "円",
}


def write_pdf(path: Path, lines: List[str]) -> Path:
    doc = fitz.open()
    page = doc.new_page()
    for i, line in enumerate(lines):
        page.insert_text((72, 72 + 28 * i), line)
    doc.save(path)
    doc.close()
    return path


def reply_model(reply: str, seen: List[List[ModelMessage]] | None = None) -> FunctionModel:
    def respond(messages: List[ModelMessage], info: AgentInfo) -> ModelResponse:
        if seen is not None:
            seen.append(list(messages))
        return ModelResponse(parts=[TextPart(content=reply)])

    return FunctionModel(respond)


@pytest.fixture()
def make_pdf(tmp_path) -> Callable[..., Path]:
    def _make(name: str, lines: List[str] | None = None) -> Path:
        pdfs = tmp_path / "pdfs"
        pdfs.mkdir(exist_ok=True)
        return write_pdf(pdfs / name, lines or ["INVOICE ACME", "Total 1000"])

    return _make


@pytest.fixture()
def invoice_agent() -> AttributeAgent:
    return AttributeAgent(model=reply_model(json.dumps(INVOICE_ATTRIBUTES, ensure_ascii=False)))
