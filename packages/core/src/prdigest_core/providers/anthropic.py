from __future__ import annotations

from prdigest_core.providers.base import BaseCompleter


class AnthropicCompleter(BaseCompleter):
    MODEL = "claude-sonnet-4-20250514"

    def __init__(self, api_key: str, model: str | None = None):
        try:
            from anthropic import AsyncAnthropic
        except ImportError:
            raise ImportError(
                "The 'anthropic' package is required for this provider. "
                "Install it with: pip install 'prdigest[anthropic]'"
            )
        super().__init__(model)
        self.client = AsyncAnthropic(api_key=api_key)

    async def _call_api(self, model: str, system_prompt: str, messages: list[dict], session_id: str) -> str | None:
        # Imported inside the method because the anthropic package is optional;
        # __init__ already validated it is installed before we reach here.
        from anthropic.types import TextBlock

        response = await self.client.messages.create(
            model=model,
            system=system_prompt,
            messages=messages,
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
            metadata={"user_id": session_id},
        )
        text_blocks = [block.text for block in response.content if isinstance(block, TextBlock)]
        return "".join(text_blocks).strip()
