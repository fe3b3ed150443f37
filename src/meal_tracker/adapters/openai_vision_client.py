"""OpenAI-compatible chat completions client for food recognition."""

import logging
from dataclasses import dataclass
from http import HTTPStatus

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI, RateLimitError
from openai.types.chat import ChatCompletion

from meal_tracker.errors import (
    MalformedUpstreamResponse,
    QuotaExceeded,
    RateLimited,
    UpstreamError,
)
from meal_tracker.services.vision import FoodRecognitionClient

_logger = logging.getLogger(__name__)


@dataclass
class OpenAIFoodRecognitionClient(FoodRecognitionClient):
    """Food recognition client backed by a chat completions gateway."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout_seconds: float = 60.0
    ) -> "OpenAIFoodRecognitionClient":
        """Create a client with SDK retries disabled."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                max_retries=0,
                http_client=httpx.AsyncClient(timeout=timeout_seconds),
            )
        )

    async def complete(
        self,
        *,
        model: str,
        temperature: float,
        messages: list[dict[str, object]],
    ) -> str:
        """Send one chat completion request and return the answer text."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
            )
        except RateLimitError as exc:
            _logger.warning("Food recognition rate limited")
            raise RateLimited("Rate limit exceeded. Please try again later.") from exc
        except APIStatusError as exc:
            if exc.status_code == HTTPStatus.PAYMENT_REQUIRED:
                _logger.warning("Food recognition quota exhausted")
                raise QuotaExceeded(
                    "Payment required. Please add credits to your workspace."
                ) from exc
            body = exc.response.text
            _logger.error(
                "Food recognition upstream error: status=%s body=%s",
                exc.status_code,
                body,
            )
            raise UpstreamError(
                "Failed to analyze image", status_code=exc.status_code, body=body
            ) from exc
        except APIConnectionError as exc:
            _logger.error("Food recognition upstream unreachable: %s", exc)
            raise UpstreamError("Could not reach the food recognition service") from exc

        if not isinstance(response, ChatCompletion) or not response.choices:
            raise MalformedUpstreamResponse("No response from upstream")
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
