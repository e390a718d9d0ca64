from __future__ import annotations

import csv
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal, Sequence

import pandas as pd

from .agents import AttributeAgent
from .preprocess import PDFPreprocessor
from .schema import (
    MANIFEST_COLUMNS,
    MANIFEST_FILENAME,
    AttributeResult,
    ManifestRow,
    build_new_path,
)

logger = logging.getLogger(__name__)


@dataclass
class DocumentResult:
    document: Path
    status: Literal["ok", "skipped"]
    row: ManifestRow | None = None
    attributes: AttributeResult | None = None
    error: str | None = None


@dataclass
class RunReport:
    results: List[DocumentResult]
    manifest_path: Path
    ok: int = field(init=False)
    skipped: int = field(init=False)

    def __post_init__(self) -> None:
        self.ok = sum(1 for r in self.results if r.status == "ok")
        self.skipped = len(self.results) - self.ok


def find_pdfs(pdfs_dir: Path) -> List[Path]:
    """
    PDF files directly inside `pdfs_dir`, sorted by name.

    Subdirectories and files without a ".pdf" extension are ignored.
    """
    root = Path(pdfs_dir)
    return sorted(p for p in root.iterdir() if p.is_file() and p.name.endswith(".pdf"))


class ClassificationOrchestrator:
    """
    Runs each PDF through text extraction, attribute inference and copying.
    """

    def __init__(
        self,
        attribute_agent: AttributeAgent,
        pdf_preprocessor: PDFPreprocessor | None = None,
    ):
        self.attribute_agent = attribute_agent
        self.pdf_preprocessor = pdf_preprocessor or PDFPreprocessor()

    def process_file(self, file_path: Path, output_dir: Path) -> DocumentResult:
        """
        Classify and copy one document.

        Any error raised while doing so skips the document instead of
        aborting the run.
        """
        path = Path(file_path)
        try:
            logger.info("Extracting text from %s", path)
            context = self.pdf_preprocessor.load(path)

            logger.info("Inferring attributes for %s", path.name)
            result = self.attribute_agent.run(context.text)
            attrs = result.attributes
            logger.info("%s: %s", path.name, attrs.model_dump())

            new_path = build_new_path(attrs, output_dir)
            row = ManifestRow.from_attributes(path, attrs, new_path)

            new_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(path, new_path)
            logger.info("Copied %s to %s", path, new_path)
        except Exception as exc:
            logger.exception("Skipping %s", path.name)
            return DocumentResult(document=path, status="skipped", error=str(exc))

        return DocumentResult(document=path, status="ok", row=row, attributes=result)

    def process(self, pdfs_dir: Path, output_dir: Path) -> List[DocumentResult]:
        files = find_pdfs(pdfs_dir)
        logger.info("Found %d PDF file(s) in %s", len(files), pdfs_dir)
        return [self.process_file(path, output_dir) for path in files]

    def to_dataframe(self, results: Sequence[DocumentResult]) -> pd.DataFrame:
        """
        Manifest rows of the successfully processed documents, in order.
        """
        rows = [res.row.as_list() for res in results if res.status == "ok" and res.row]
        return pd.DataFrame(rows, columns=MANIFEST_COLUMNS, dtype=str)

    def write_manifest(self, results: Sequence[DocumentResult], output_dir: Path) -> Path:
        """
        Write the manifest CSV, quoting every field.
        """
        df = self.to_dataframe(results)
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        manifest_path = output_dir / MANIFEST_FILENAME
        logger.info("Writing manifest to %s", manifest_path)
        df.to_csv(
            manifest_path,
            index=False,
            encoding="utf-8",
            quoting=csv.QUOTE_ALL,
            lineterminator="\n",
        )
        return manifest_path

    def run(self, pdfs_dir: Path, output_dir: Path) -> RunReport:
        results = self.process(pdfs_dir, output_dir)
        manifest_path = self.write_manifest(results, output_dir)
        report = RunReport(results=results, manifest_path=manifest_path)
        logger.info("Processed %d document(s), skipped %d", report.ok, report.skipped)
        return report
