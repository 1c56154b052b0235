from __future__ import annotations

import json
import logging

from openai import AsyncOpenAI
from pydantic import BaseModel, Field, ValidationError

from ats_engine.core.errors import SemanticProviderError

logger = logging.getLogger(__name__)

DEEPSEEK_BASE_URL = "https://api.deepseek.com"
DEEPSEEK_MODEL = "deepseek-chat"

# Truncation keeps long resumes inside small context windows.
_MAX_INPUT_CHARS = 12000

_SYSTEM_PROMPT = (
    "You compare a resume with a job description the way a recruiter would. "
    "Judge how well the candidate's skills, experience, domain and responsibilities "
    "fit the role, including equivalent wording that is not an exact keyword match. "
    'Respond with a JSON object of the form {"score": <integer 0-100>}.'
)


class _ScorePayload(BaseModel):
    score: int = Field(ge=0, le=100)


class OpenAISemanticProvider:
    """Chat-completions scorer for OpenAI and OpenAI-compatible APIs such as DeepSeek."""

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: str | None = None,
        timeout_s: float = 30.0,
        max_retries: int = 2,
        name: str = "openai",
    ):
        key = (api_key or "").strip()
        if not key:
            raise SemanticProviderError("API key not configured", provider=name)
        self._model = model
        self._name = name
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=base_url or None,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    async def analyze(self, resume_text: str, job_text: str) -> int:
        user_prompt = (
            f"JOB DESCRIPTION:\n{job_text[:_MAX_INPUT_CHARS]}\n\n"
            f"RESUME:\n{resume_text[:_MAX_INPUT_CHARS]}"
        )
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": _SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
            temperature=0.0,
            response_format={"type": "json_object"},
            max_tokens=50,
        )
        content = response.choices[0].message.content if response.choices else ""
        if not content:
            raise SemanticProviderError("Empty response from provider", provider=self._name)
        try:
            payload = _ScorePayload.model_validate(json.loads(content))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning("semantic_payload_invalid provider=%s model=%s", self._name, self._model)
            raise SemanticProviderError("Provider returned an invalid score payload", provider=self._name) from exc
        return payload.score
