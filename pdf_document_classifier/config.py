import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .agents import DEFAULT_MODEL_NAME


@dataclass
class Settings:
    pdfs_dir: Path
    output_dir: Path
    model_name: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None


def load_settings(
    pdfs_dir: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    model_name: Optional[str] = None,
) -> Settings:
    """Build settings from arguments, falling back to the environment."""
    return Settings(
        pdfs_dir=Path(pdfs_dir or os.getenv("PDFS_DIR", "pdfs")),
        output_dir=Path(output_dir or os.getenv("OUTPUT_DIR", "output")),
        model_name=model_name or os.getenv("OPENAI_MODEL", DEFAULT_MODEL_NAME),
        api_key=os.getenv("OPENAI_API_KEY") or None,
        base_url=os.getenv("OPENAI_BASE_URL") or None,
    )
