from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr, field_validator

YEN_SYMBOL = "円"
UNKNOWN_TYPE = "不明"
UNKNOWN = "?"

MANIFEST_FILENAME = "一覧.csv"
MANIFEST_COLUMNS: List[str] = [
    "元のファイルパス",
    "種別",
    "発行元",
    "発行日",
    "金額",
    "通貨単位",
    "新しいファイル名",
]

AttributeSource = Literal["json", "fenced", "default"]


class DocumentAttributes(BaseModel):
    """Attributes the model infers for a single business document."""

    type: str = Field(..., description="Document category, in Japanese")
    recipient: Optional[str] = Field(None, description="Destination company name")
    author: str = Field(..., description="Issuing company name")
    date: str = Field(..., description="Issue date as YYYYMMDD, or '?'")
    amount: Union[StrictInt, StrictFloat, StrictStr] = Field(
        ..., description="Tax-excluded total, kept exactly as the model wrote it"
    )
    symbol: str = Field(..., description="Normalized currency symbol")

    model_config = {"extra": "ignore", "frozen": True}

    @field_validator("date", "recipient", mode="before")
    @classmethod
    def numbers_as_text(cls, value: Any) -> Any:
        # Models often write YYYYMMDD as a bare number.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return format_amount(value)
        return value


DEFAULT_ATTRIBUTES = DocumentAttributes(
    type=UNKNOWN_TYPE,
    author=UNKNOWN,
    date=UNKNOWN,
    amount=0,
    symbol=UNKNOWN,
)


@dataclass(frozen=True)
class AttributeResult:
    """
    Outcome of parsing a model reply.

    `source` tells how the record was obtained; a "default" result always
    carries DEFAULT_ATTRIBUTES and the reason parsing failed.
    """

    attributes: DocumentAttributes
    source: AttributeSource
    error: Optional[str] = None

    @property
    def defaulted(self) -> bool:
        return self.source == "default"

    @classmethod
    def fallback(cls, error: str) -> "AttributeResult":
        return cls(attributes=DEFAULT_ATTRIBUTES, source="default", error=error)


def format_amount(amount: Union[int, float, str]) -> str:
    """Render an amount the way it appears in file names and the manifest."""
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)


def price_string(attrs: DocumentAttributes) -> str:
    # Yen goes after the number, every other symbol in front of it.
    amount = format_amount(attrs.amount)
    if attrs.symbol == YEN_SYMBOL:
        return f"{amount}{attrs.symbol}"
    return f"{attrs.symbol}{amount}"


def build_new_path(attrs: DocumentAttributes, output_dir: Path) -> Path:
    """
    Destination of a classified document:
    <output>/<type>/<date>_<author>_<price>_<type>.pdf

    Leading separators are dropped so the result always stays under
    `output_dir`; a ".." component raises ValueError.
    """
    basename = f"{attrs.date}_{attrs.author}_{price_string(attrs)}_{attrs.type}.pdf"
    relative = PurePath(attrs.type.lstrip("/\\"), basename.lstrip("/\\"))
    if relative.is_absolute() or ".." in relative.parts:
        raise ValueError(f"Destination escapes the output directory: {relative}")
    return Path(output_dir) / relative


@dataclass(frozen=True)
class ManifestRow:
    original_path: str
    type: str
    author: str
    date: str
    amount: str
    symbol: str
    new_path: str

    @classmethod
    def from_attributes(
        cls, original_path: Path, attrs: DocumentAttributes, new_path: Path
    ) -> "ManifestRow":
        return cls(
            original_path=str(original_path),
            type=attrs.type,
            author=attrs.author,
            date=attrs.date,
            amount=format_amount(attrs.amount),
            symbol=attrs.symbol,
            new_path=str(new_path),
        )

    def as_list(self) -> List[str]:
        return [
            self.original_path,
            self.type,
            self.author,
            self.date,
            self.amount,
            self.symbol,
            self.new_path,
        ]
