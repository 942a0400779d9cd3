from __future__ import annotations

import time
from typing import Optional

import openai
import structlog
from openai import OpenAI

from app.config import Settings
from app.errors import UpstreamEmpty, UpstreamError
from app.services.logging import log_performance
from app.services.monitoring import AI_GENERATION_DURATION, AI_GENERATION_REQUESTS

logger = structlog.get_logger()

SUMMARY_PROMPT = "Summarize the following text:\n{text}"

# The output format here must stay in step with app.services.qa_extractor.QA_PATTERN.
QUESTIONS_PROMPT = (
    "Generate 3 practice questions based on this summary:\n{summary}\n"
    "Format:\nQ1: [question]\nA: [answer]"
)


class LLMGateway:
    """Boundary around the chat-completion API.

    One attempt per call: the client is built with ``max_retries=0`` and a
    bounded timeout, and failures surface to the caller immediately.
    """

    def __init__(
        self,
        client: Optional[OpenAI],
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        summary_max_tokens: int = 400,
        questions_max_tokens: int = 600,
    ) -> None:
        self.client = client
        self.model = model
        self.temperature = temperature
        self.summary_max_tokens = summary_max_tokens
        self.questions_max_tokens = questions_max_tokens

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMGateway":
        client = None
        if settings.openai_api_key:
            client = OpenAI(
                api_key=settings.openai_api_key,
                timeout=settings.llm_timeout_seconds,
                max_retries=0,
            )
        else:
            logger.warning("llm_client_not_configured", reason="OPENAI_API_KEY not set")
        return cls(
            client,
            model=settings.openai_model,
            temperature=settings.llm_temperature,
            summary_max_tokens=settings.summary_max_tokens,
            questions_max_tokens=settings.questions_max_tokens,
        )

    @property
    def configured(self) -> bool:
        return self.client is not None

    def close(self) -> None:
        if self.client is not None:
            self.client.close()

    def _complete(self, kind: str, prompt: str, max_tokens: int) -> str:
        if self.client is None:
            AI_GENERATION_REQUESTS.labels(type=kind, status="not_configured").inc()
            raise UpstreamError("LLM API key not configured")

        start = time.perf_counter()
        try:
            rsp = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=max_tokens,
            )
        except openai.OpenAIError as e:
            AI_GENERATION_REQUESTS.labels(type=kind, status="error").inc()
            logger.error("llm_request_failed", type=kind, model=self.model, error=str(e), error_type=type(e).__name__)
            raise UpstreamError() from e
        finally:
            AI_GENERATION_DURATION.labels(type=kind).observe(time.perf_counter() - start)

        content = rsp.choices[0].message.content if rsp.choices else None
        if not content or not content.strip():
            AI_GENERATION_REQUESTS.labels(type=kind, status="empty").inc()
            logger.warning("llm_empty_response", type=kind, model=self.model, choices=len(rsp.choices or []))
            raise UpstreamEmpty()

        AI_GENERATION_REQUESTS.labels(type=kind, status="success").inc()
        return content.strip()

    @log_performance("llm.summarize")
    def summarize(self, text: str) -> str:
        return self._complete("summary", SUMMARY_PROMPT.format(text=text), self.summary_max_tokens)

    @log_performance("llm.generate_questions")
    def generate_questions(self, summary: str) -> str:
        return self._complete("questions", QUESTIONS_PROMPT.format(summary=summary), self.questions_max_tokens)
