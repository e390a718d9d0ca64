import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
import typer

from pdf_document_classifier.agents import AttributeAgent
from pdf_document_classifier.config import load_settings
from pdf_document_classifier.orchestrator import ClassificationOrchestrator
from pdf_document_classifier.preprocess import PDFPreprocessor

load_dotenv()


app = typer.Typer(add_completion=False)


@app.command()
def classify(
    pdfs: Optional[Path] = typer.Option(
        None, "--pdfs", "-i", help="Directory containing the PDFs to classify (default: ./pdfs)"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output directory for copies and manifest (default: ./output)"
    ),
    model: Optional[str] = typer.Option(
        None, "--model", "-m", help="Chat completion model identifier"
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """
    Classify every PDF in the input directory, copy it under a new name
    into a folder per document type, and write the 一覧.csv manifest.
    """
    settings = load_settings(pdfs_dir=pdfs, output_dir=output, model_name=model)

    log_path = settings.output_dir / "一覧.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_path, encoding="utf-8"),
        ],
    )
    logger = logging.getLogger(__name__)
    logger.info("Logging to %s", log_path)

    orchestrator = ClassificationOrchestrator(
        attribute_agent=AttributeAgent(
            settings.model_name,
            api_key=settings.api_key,
            base_url=settings.base_url,
        ),
        pdf_preprocessor=PDFPreprocessor(),
    )
    report = orchestrator.run(settings.pdfs_dir, settings.output_dir)
    for result in report.results:
        typer.echo(f"{result.document.name}: {result.status} ({result.error or 'ok'})")
    typer.echo(f"Wrote manifest to {report.manifest_path}")


def main():
    app()


if __name__ == "__main__":
    main()
