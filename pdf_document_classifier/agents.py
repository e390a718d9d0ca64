from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence

from openai import AsyncOpenAI
from pydantic import ValidationError
from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.models.openai import OpenAIModel
from pydantic_ai.providers.openai import OpenAIProvider

from .lines import TextFragment
from .schema import AttributeResult, DocumentAttributes

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "gpt-3.5-turbo"

# First fenced block, optionally tagged as json; may span lines.
FENCED_BLOCK = re.compile(r"```(?:json)?(.+?)```", re.DOTALL | re.IGNORECASE)

PROMPT_TEMPLATE = """
入力文は、PDF文書から抜き出したテキストです。これからこのPDF文章ファイル名を属性に基づいてリネームしてフォルダに分類します。
そのために内容を解析し、属性を抽出します。

入力文を読んで、次のプロパティを持つオブジェクトをJSON形式で出力してください。

# オブジェクトのプロパティ仕様

- type: 見積書・発注書・請求書・納品書・領収書・契約書・申込書などの種別。日本語に翻訳してください。
- recipient: 宛先の会社名。ファイル名として不都合な文字は削除してください。
- author: 発行元の会社名。ファイル名として不都合な文字は削除してください。
- date: 発行日。YYYYMMDD形式で出力してください。
- amount: 税抜の合計金額。数値として出力してください。
- symbol: 通貨単位記号。JPYや¥は「円」、USDは「$」に統一してください。それ以外の通貨はそのまま出力してください。

# 入力文

{text}
"""


@dataclass
class DocumentContext:
    """Preprocessed content of one PDF."""

    file_path: Path
    pages: Sequence[Sequence[TextFragment]]
    text: str
    metadata: dict[str, Any] = field(default_factory=dict)


def build_prompt(text: str) -> str:
    return PROMPT_TEMPLATE.format(text=text)


def parse_json_reply(reply: str) -> Optional[DocumentAttributes]:
    """Parse the whole reply as an attributes object, or return None."""
    try:
        return DocumentAttributes.model_validate_json(reply)
    except ValidationError:
        return None


def parse_fenced_reply(reply: str) -> Optional[DocumentAttributes]:
    """Parse the first ``` fenced block of the reply, or return None."""
    match = FENCED_BLOCK.search(reply)
    if match is None:
        return None
    return parse_json_reply(match.group(1))


def parse_reply(reply: Optional[str]) -> AttributeResult:
    """
    Turn a free-form model reply into attributes.

    The reply is first read as raw JSON, then as JSON inside a fenced code
    block. When neither yields a complete record the default attributes are
    returned; this function never raises.
    """
    reply = reply or ""

    attrs = parse_json_reply(reply)
    if attrs is not None:
        return AttributeResult(attributes=attrs, source="json")

    attrs = parse_fenced_reply(reply)
    if attrs is not None:
        return AttributeResult(attributes=attrs, source="fenced")

    logger.warning("Could not parse attributes from model reply: %r", reply)
    return AttributeResult.fallback(f"Unparseable reply: {reply!r}")


class AttributeAgent:
    """
    LLM agent that infers document attributes from extracted PDF text.

    The completion is requested once, as a single user message, and is not
    retried. Failures of the call itself propagate to the caller.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_MODEL_NAME,
        *,
        model: Model | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
    ):
        self.model_name = model_name
        self.api_key = api_key
        self.base_url = base_url
        self._model = model
        self._agent: Optional[Agent[None, str]] = None

    @property
    def model(self) -> Model:
        if self._model is None:
            client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                max_retries=0,
            )
            self._model = OpenAIModel(
                self.model_name, provider=OpenAIProvider(openai_client=client)
            )
        return self._model

    @property
    def agent(self) -> Agent[None, str]:
        if self._agent is None:
            self._agent = Agent(model=self.model, output_type=str)
        return self._agent

    def complete(self, prompt: str) -> str:
        # pydanticAI agents are async-first; run_sync blocks for CLI usage.
        result = self.agent.run_sync(prompt)
        return result.output or ""

    def run(self, text: str) -> AttributeResult:
        """
        Ask the model for the attributes of `text` and parse its reply.
        """
        reply = self.complete(build_prompt(text))
        logger.debug("Model reply: %s", reply)
        result = parse_reply(reply)
        if result.defaulted:
            logger.warning("Falling back to default attributes for text: %r", text)
        return result
