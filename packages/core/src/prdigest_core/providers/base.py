"""Base chat-completion client implementing the Template Method pattern.

All providers share the same conversation handling:
    complete() → session history lookup (reset on restart)
               → _call_api()   ← only this differs per provider
               → history update

Subclasses implement two things only:
  - __init__: validate and store the SDK client
  - _call_api: make one raw API call with a list of chat messages

A failed call never raises out of complete(): the pipeline treats a missing
result as "skip this unit", so errors are logged here and turned into None.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

_MAX_TOKENS = 1024


class BaseCompleter(ABC):
    MODEL: str = ""
    MAX_TOKENS: int = _MAX_TOKENS
    TEMPERATURE: float = 0.7

    def __init__(self, model: str | None = None):
        self.model = model or self.MODEL
        # session id → prior user/assistant turns for that conversation
        self._sessions: dict[str, list[dict]] = {}

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    async def complete(
        self,
        session_id: str,
        system_prompt: str,
        user_text: str,
        model: str | None = None,
        restart: bool = True,
    ) -> str | None:
        """Send one user message in the given session and return the reply text.

        ``restart=True`` forgets any earlier turns of the session before the
        call. Returns None when the backend fails or answers with no text.
        """
        if restart:
            self._sessions.pop(session_id, None)
        history = self._sessions.get(session_id, [])
        messages = history + [{"role": "user", "content": user_text}]

        try:
            text = await self._call_api(model or self.model, system_prompt, messages, session_id)
        except Exception as e:
            logger.error("%s completion failed for %s: %s", self.__class__.__name__, session_id, e)
            return None

        if not text or not text.strip():
            logger.warning("%s returned an empty completion for %s", self.__class__.__name__, session_id)
            return None

        self._sessions[session_id] = messages + [{"role": "assistant", "content": text}]
        return text

    def forget(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    # ------------------------------------------------------------------ #
    # Abstract: implement in each provider                                #
    # ------------------------------------------------------------------ #

    @abstractmethod
    async def _call_api(self, model: str, system_prompt: str, messages: list[dict], session_id: str) -> str | None:
        """Make a single API call and return the raw text response.

        This is the only method subclasses must implement. It may raise on
        failure; complete() handles logging and the None result.
        """
