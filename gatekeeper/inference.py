from __future__ import annotations

import logging
from typing import Final

from openai import AsyncOpenAI

from . import messages

log: Final = logging.getLogger("gatekeeper")

DEFAULT_BASE_URL: Final[str] = "https://api.together.xyz/v1"
DEFAULT_MODEL: Final[str] = "meta-llama/Llama-3.3-70B-Instruct-Turbo"

SYSTEM_INSTRUCTION: Final[str] = (
    "أنت مساعد ذكاء اصطناعي مخصص للإجابة على أسئلة التوثيق.\n"
    "لا تقم فقط بنسخ المعلومات المرجعية، بل استوعبها وأعد صياغتها بأساليب مختلفة، "
    "مع الحفاظ على الجوهر والمعنى الأساسي. اجعل كل إجابة تبدو فريدة ومفهومة."
)


def build_messages(reference: str, question: str) -> list[dict[str, str]]:
    """Compose the chat prompt for a participant question."""
    return [
        {"role": "system", "content": SYSTEM_INSTRUCTION},
        {
            "role": "user",
            "content": (
                f"📌 **مرجع التوثيق:**\n{reference}\n\n"
                "📝 فهم هذا المرجع جيدًا، ثم أعد صياغته بطريقة جديدة للإجابة على السؤال التالي:"
            ),
        },
        {"role": "user", "content": f"❓ السؤال: {question}"},
    ]


class InferenceClient:
    """Answers questions about the verification reference."""

    def __init__(
        self,
        client: AsyncOpenAI,
        reference: str,
        *,
        model: str = DEFAULT_MODEL,
    ) -> None:
        self._client = client
        self._reference = reference
        self.model = model

    @classmethod
    def create(
        cls,
        api_key: str,
        reference: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
    ) -> InferenceClient:
        client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        return cls(client, reference, model=model)

    async def answer(self, question: str) -> str:
        try:
            res = await self._client.chat.completions.create(
                model=self.model,
                messages=build_messages(self._reference, question),
            )
        except Exception as exc:  # pylint: disable=broad-except
            log.exception("Inference request failed: %s", exc)
            return messages.INFERENCE_UNAVAILABLE

        try:
            content = res.choices[0].message.content
        except (AttributeError, IndexError, TypeError):
            content = None
        if not content or not content.strip():
            return messages.EMPTY_COMPLETION
        return content.strip()
