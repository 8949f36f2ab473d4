"""Decision source backed by an external reasoning service.

Talks to any OpenAI-compatible chat-completions endpoint (OpenAI itself
or OpenRouter) in JSON response mode. Every request carries a timeout;
rate limits and dropped connections are retried with exponential
backoff, timeouts are not. Whatever still fails is raised as an
AIControlError, which the game controller turns into the default action.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI, RateLimitError
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from skirmish.core.config import Settings, get_settings
from skirmish.core.exceptions import (
    AIConnectionError,
    AIControlError,
    AIRateLimitError,
    AIResponseError,
    AITimeoutError,
    DecisionUnavailableError,
)
from skirmish.core.logging import get_logger
from skirmish.engine.combat_math import StandardCombatMath
from skirmish.models.actor import Actor
from skirmish.models.decision import DecisionPayload
from skirmish.models.turn_state import TurnState
from skirmish.players.base import DecisionSource
from skirmish.players.prompts import DECISION_SYSTEM_PROMPT, build_decision_prompt


logger = get_logger(__name__)


def _strip_code_fence(content: str) -> str:
    text = content.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def _retry_after(exc: RateLimitError) -> float | None:
    response = getattr(exc, "response", None)
    if response is None:
        return None
    value = response.headers.get("retry-after")
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


class LLMDecisionSource(DecisionSource):
    """Ask a chat model what an actor should do.

    Attributes:
        provider: 'openai' or 'openrouter'.
        model: Chat model identifier.
        temperature: Sampling temperature.
        timeout_seconds: Timeout applied to every request.
        max_retries: Extra attempts on rate limits and connection errors.

    Args:
        name: Display name. Defaults to the model identifier.
        provider: Provider to use. Defaults to settings.
        model: Model to use. Defaults to settings.
        temperature: Sampling temperature. Defaults to settings.
        timeout_seconds: Request timeout. Defaults to settings.
        max_retries: Retry attempts. Defaults to settings.
        client: Pre-built OpenAI client, mainly for tests.
        settings: Application settings. Global settings if omitted.
    """

    retry_wait = wait_exponential(multiplier=1, min=2, max=10)

    def __init__(
        self,
        name: str | None = None,
        *,
        provider: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        timeout_seconds: float | None = None,
        max_retries: int | None = None,
        client: Any = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        ai = self.settings.ai
        self.provider = provider or ai.default_provider
        self.model = model or ai.model
        self.temperature = ai.temperature if temperature is None else temperature
        self.timeout_seconds = ai.timeout_seconds if timeout_seconds is None else timeout_seconds
        self.max_retries = ai.max_retries if max_retries is None else max_retries
        self.combat_math = StandardCombatMath()
        self._client = client
        super().__init__(name or self.model)

        logger.info(
            "LLMDecisionSource initialized",
            source=self.name,
            provider=self.provider,
            model=self.model,
            timeout=self.timeout_seconds,
        )

    def _get_client(self) -> Any:
        """Get or create the OpenAI client.

        Raises:
            ConfigurationError: If no API key is configured for the provider.
        """
        if self._client is None:
            ai = self.settings.ai
            kwargs: dict[str, Any] = {
                "api_key": ai.api_key_for(self.provider),
                "timeout": self.timeout_seconds,
                "max_retries": 0,
            }
            base_url = ai.endpoint_for(self.provider)
            if base_url:
                kwargs["base_url"] = base_url
            if self.provider == "openrouter":
                kwargs["default_headers"] = {"X-Title": self.settings.app_name}
            self._client = OpenAI(**kwargs)
        return self._client

    def decide(
        self,
        actor: Actor,
        allies: Sequence[Actor],
        enemies: Sequence[Actor],
        turn_state: TurnState,
    ) -> DecisionPayload:
        """Request a decision from the model.

        Raises:
            AITimeoutError: If the request timed out.
            AIRateLimitError: If rate limited after all retries.
            AIConnectionError: On transport or HTTP errors.
            AIResponseError: If the answer is not a JSON object.
            AIControlError: On any other failure, including a missing
                API key.
        """
        prompt = build_decision_prompt(
            actor,
            allies,
            enemies,
            turn_state,
            heal_amount=self.settings.game.heal_amount,
            combat_math=self.combat_math,
        )
        messages = [
            {"role": "system", "content": DECISION_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

        logger.debug(
            "Requesting AI decision",
            actor=actor.name,
            model=self.model,
            turn=turn_state.turn_number,
        )

        try:
            payload = self.parse_response(self._request(messages))
        except DecisionUnavailableError:
            raise
        except Exception as exc:
            raise AIControlError(
                f"AI decision failed: {exc}",
                model=self.model,
                provider=self.provider,
                source=self.name,
                details={"error_type": type(exc).__name__},
            ) from exc

        logger.info(
            "AI decision received",
            actor=actor.name,
            action=payload.action_kind,
            target=payload.target_name,
        )
        return payload

    def _request(self, messages: list[dict[str, str]]) -> str:
        retrying = Retrying(
            retry=(
                retry_if_exception_type((RateLimitError, APIConnectionError))
                & retry_if_not_exception_type(APITimeoutError)
            ),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=self.retry_wait,
            before_sleep=self._log_retry,
            reraise=True,
        )
        context = {"model": self.model, "provider": self.provider, "source": self.name}

        try:
            return retrying(self._complete, messages)
        except APITimeoutError as exc:
            raise AITimeoutError(
                f"AI request timed out after {self.timeout_seconds}s",
                details={"timeout_seconds": self.timeout_seconds},
                **context,
            ) from exc
        except RateLimitError as exc:
            raise AIRateLimitError(
                f"Rate limit exceeded after {self.max_retries} retries",
                retry_after_seconds=_retry_after(exc),
                **context,
            ) from exc
        except APIConnectionError as exc:
            raise AIConnectionError(
                f"Failed to connect to AI provider: {exc}",
                **context,
            ) from exc
        except APIStatusError as exc:
            raise AIConnectionError(
                f"AI API error: {exc}",
                details={"status_code": exc.status_code},
                **context,
            ) from exc

    def _complete(self, messages: list[dict[str, str]]) -> str:
        client = self._get_client()
        response = client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            max_tokens=300,
            response_format={"type": "json_object"},
            timeout=self.timeout_seconds,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "AI request failed, retrying",
            source=self.name,
            attempt=retry_state.attempt_number,
            max_retries=self.max_retries,
            error_type=type(exc).__name__ if exc else None,
        )

    def parse_response(self, content: str) -> DecisionPayload:
        """Parse the model's answer into a payload.

        Field values are not checked here; the validation pipeline
        handles unknown actions and names.

        Raises:
            AIResponseError: If the content is empty or not a JSON object.
        """
        if content is not None and not isinstance(content, str):
            raise AIResponseError(
                "AI response content is not text",
                model=self.model,
                source=self.name,
                details={"type": type(content).__name__},
            )
        text = _strip_code_fence(content or "")
        if not text:
            raise AIResponseError("AI returned an empty response", model=self.model, source=self.name)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise AIResponseError(
                "AI response is not valid JSON",
                model=self.model,
                source=self.name,
                details={"preview": text[:100]},
            ) from exc
        if not isinstance(data, dict):
            raise AIResponseError(
                "AI response is not a JSON object",
                model=self.model,
                source=self.name,
                details={"type": type(data).__name__},
            )
        return DecisionPayload.model_validate(data)


__all__ = [
    "LLMDecisionSource",
]
