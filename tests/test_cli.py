from pathlib import Path

from typer.testing import CliRunner

import main
from pdf_document_classifier.agents import DEFAULT_MODEL_NAME
from pdf_document_classifier.config import load_settings

runner = CliRunner()


def test_settings_defaults(monkeypatch):
    for name in ("PDFS_DIR", "OUTPUT_DIR", "OPENAI_MODEL", "OPENAI_API_KEY", "OPENAI_BASE_URL"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.pdfs_dir == Path("pdfs")
    assert settings.output_dir == Path("output")
    assert settings.model_name == DEFAULT_MODEL_NAME
    assert settings.api_key is None


def test_settings_from_env_and_arguments(monkeypatch):
    monkeypatch.setenv("PDFS_DIR", "/data/in")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    settings = load_settings(output_dir=Path("/data/out"))

    assert settings.pdfs_dir == Path("/data/in")
    assert settings.output_dir == Path("/data/out")
    assert settings.model_name == "gpt-4o-mini"
    assert settings.api_key == "sk-test"


def test_cli_classifies_directory(tmp_path, make_pdf, invoice_agent, monkeypatch):
    make_pdf("a.pdf")
    (tmp_path / "pdfs" / "broken.pdf").write_bytes(b"garbage")
    monkeypatch.setattr(main, "AttributeAgent", lambda *args, **kwargs: invoice_agent)
    output = tmp_path / "output"

    result = runner.invoke(
        main.app, ["--pdfs", str(tmp_path / "pdfs"), "--output", str(output)]
    )

    assert result.exit_code == 0, result.output
    assert "a.pdf: ok (ok)" in result.output
    assert "broken.pdf: skipped" in result.output
    assert (output / "一覧.csv").exists()
    assert (output / "請求書" / "20240101_ACME_1000円_請求書.pdf").exists()
