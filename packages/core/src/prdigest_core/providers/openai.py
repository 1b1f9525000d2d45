from __future__ import annotations

try:
    from openai import AsyncOpenAI as _AsyncOpenAI
except ImportError:
    _AsyncOpenAI = None  # type: ignore[assignment,misc]

from prdigest_core.providers.base import BaseCompleter


class OpenAICompleter(BaseCompleter):
    MODEL = "gpt-3.5-turbo"

    def __init__(self, api_key: str, model: str | None = None):
        if _AsyncOpenAI is None:
            raise ImportError(
                "The 'openai' package is required for this provider. " "Install it with: pip install 'prdigest[openai]'"
            )
        super().__init__(model)
        self.client = _AsyncOpenAI(api_key=api_key)

    async def _call_api(self, model: str, system_prompt: str, messages: list[dict], session_id: str) -> str | None:
        response = await self.client.chat.completions.create(
            model=model,
            messages=[{"role": "system", "content": system_prompt}, *messages],
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
            # The session id doubles as the end-user identifier OpenAI uses for abuse tracking.
            user=session_id,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content
