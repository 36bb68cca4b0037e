"""OpenRouter chat-completion client using LiteLLM"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, cast

import litellm
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from better_projects_ai.config import Settings
from better_projects_ai.errors import ConfigurationUnavailable, UpstreamError

logger = logging.getLogger(__name__)

# Configure LiteLLM
litellm.set_verbose = False
litellm.drop_params = True  # Drop unsupported params


class LLMClient:
    """Sends one system/user prompt pair to OpenRouter and returns the reply text.

    Temperature and max output tokens come from settings, never from callers,
    so every summary is generated with the same parameters.
    """

    def __init__(self, settings: Settings):
        self.api_key = settings.openrouter_api_key
        self.base_url = settings.openrouter_base_url.rstrip("/")
        self.temperature = settings.llm_temperature
        self.max_tokens = settings.llm_max_tokens
        self.timeout = settings.llm_timeout_secs
        self.max_attempts = settings.llm_max_attempts
        self.headers = {
            "HTTP-Referer": settings.openrouter_referer,
            "X-Title": settings.openrouter_title,
        }

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def get_model_string(self, model: str) -> str:
        """Convert a provider-qualified model id to the LiteLLM OpenRouter form.

        'openai/gpt-4o' -> 'openrouter/openai/gpt-4o'
        """
        if model.startswith("openrouter/"):
            return model
        return f"openrouter/{model}"

    async def complete(self, model: str, system_prompt: str, user_prompt: str) -> str:
        """Generate a completion.

        Raises:
            ConfigurationUnavailable: no API key is configured
            UpstreamError: the provider call failed or returned no text
        """
        if not model or not model.strip():
            raise ValueError("model must be a non-empty string")
        if not system_prompt.strip() or not user_prompt.strip():
            raise ValueError("prompts must be non-empty strings")

        if not self.available:
            logger.warning("No OpenRouter API key found, LLM completions unavailable")
            raise ConfigurationUnavailable("OpenRouter API key is not configured")

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type(UpstreamError),
            reraise=True,
        ):
            with attempt:
                return await self._call(model, messages)

        raise UpstreamError("OpenRouter request was not attempted")  # pragma: no cover

    async def _call(self, model: str, messages: List[Dict[str, str]]) -> str:
        full_model = self.get_model_string(model)
        logger.info(f"Calling OpenRouter with model: {model}")

        try:
            response = await litellm.acompletion(
                model=full_model,
                messages=messages,
                api_key=self.api_key,
                api_base=self.base_url,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
                extra_headers=self.headers,
            )
        except asyncio.TimeoutError as e:
            raise UpstreamError(
                f"OpenRouter request timed out after {self.timeout}s", original_error=e
            ) from e
        except Exception as e:
            status_code = getattr(e, "status_code", None)
            payload = self._error_payload(e)
            logger.error(f"OpenRouter API error ({status_code or 'transport'}): {e}")
            raise UpstreamError(
                f"OpenRouter API error: {payload or e}",
                status_code=status_code if isinstance(status_code, int) else None,
                payload=payload,
                original_error=e,
            ) from e

        try:
            content = cast(Optional[str], response.choices[0].message.content)
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            raise UpstreamError("OpenRouter response missing message content") from e

        if not content or not content.strip():
            raise UpstreamError("OpenRouter returned an empty completion")
        return content

    @staticmethod
    def _error_payload(error: Exception) -> Optional[Any]:
        """Pull the provider's error message out of a LiteLLM exception, if any."""
        body = getattr(error, "body", None)
        if isinstance(body, dict):
            inner = body.get("error", body)
            if isinstance(inner, dict):
                return inner.get("message") or inner
            return inner
        message = getattr(error, "message", None)
        return message if isinstance(message, str) and message else None
