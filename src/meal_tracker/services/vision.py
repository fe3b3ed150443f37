"""Food recognition through a multimodal chat-completion model."""

import base64
import json
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from meal_tracker.domain.vision import NutritionEstimate
from meal_tracker.errors import InvalidInput, MalformedUpstreamResponse

_logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a nutrition expert specialized in Indian cuisine. Analyze food images \
and provide accurate nutritional information.

Estimate the serving size based on visual cues like plate size, bowl fullness, \
utensil scale, and food density.

Return your response as a JSON object with these fields:
- name: the name of the dish
- calories: total calories (number)
- protein: grams of protein (number)
- carbs: grams of carbohydrates (number)
- fat: grams of fat (number)
- fiber: grams of fiber (number)
- serving_size: estimated portion size as a number (e.g., 1.0 for standard, \
1.5 for one and half portions)
- serving_unit: unit of measurement (e.g., "cups", "plates", "bowls", "servings")
- confidence: estimation confidence level - "high", "medium", or "low"

Be as accurate as possible. Return ONLY the JSON object, no other text."""

USER_PROMPT = "What food is in this image and what are its nutritional values?"


class FoodRecognitionClient(Protocol):
    """Interface for the upstream chat-completion model."""

    async def complete(
        self,
        *,
        model: str,
        temperature: float,
        messages: list[dict[str, object]],
    ) -> str:
        """Return the text content of the first choice.

        Raises RateLimited, QuotaExceeded, UpstreamError or
        MalformedUpstreamResponse on failure.
        """


@dataclass
class FoodRecognitionService:
    """Stateless proxy turning an image into a nutrition estimate."""

    client: FoodRecognitionClient
    model: str
    temperature: float = 0.3

    async def analyze_food(self, image: bytes | str) -> NutritionEstimate:
        """Analyze a food photo and return the parsed estimate.

        No retries or caching; upstream failures propagate as typed errors.
        """
        data_url = _resolve_image(image)
        _logger.info("Analyzing food image: model=%s", self.model)
        content = await self.client.complete(
            model=self.model,
            temperature=self.temperature,
            messages=build_messages(data_url),
        )
        estimate = parse_estimate(content)
        _logger.info(
            "Food recognized: name=%s calories=%s confidence=%s",
            estimate.name,
            estimate.calories,
            estimate.confidence,
        )
        return estimate


def build_messages(image_data_url: str) -> list[dict[str, object]]:
    """Return the system and user messages for one image."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": USER_PROMPT},
                {"type": "image_url", "image_url": {"url": image_data_url}},
            ],
        },
    ]


def parse_estimate(content: str | None) -> NutritionEstimate:
    """Parse the first JSON object embedded in the model's answer."""
    if not content:
        raise MalformedUpstreamResponse("Upstream returned no content")
    raw = extract_json_object(content)
    if raw is None:
        _logger.warning("No JSON object in upstream response: %r", content[:200])
        raise MalformedUpstreamResponse("Could not find JSON in upstream response")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        _logger.warning("Invalid JSON in upstream response: %s", exc)
        raise MalformedUpstreamResponse(
            "Failed to parse nutrition data from upstream response"
        ) from exc
    try:
        return NutritionEstimate.model_validate(payload)
    except ValidationError as exc:
        _logger.warning("Upstream nutrition data failed validation: %s", exc)
        raise MalformedUpstreamResponse(
            "Upstream nutrition data is incomplete or invalid"
        ) from exc


def extract_json_object(text: str) -> str | None:
    """Return the first balanced ``{...}`` substring, or None.

    Braces inside JSON string literals do not count towards nesting.
    """
    start = text.find("{")
    if start == -1:
        return None
    end = _find_matching_brace(text, start)
    if end is None:
        return None
    return text[start : end + 1]


def _find_matching_brace(text: str, start: int) -> int | None:
    depth = 0
    in_str = False
    escaped = False
    for index in range(start, len(text)):
        ch = text[index]
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_str = False
            continue
        if ch == '"':
            in_str = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


def _resolve_image(image: bytes | str) -> str:
    """Return a data URL for raw bytes, or validate a given data URL."""
    if isinstance(image, bytes | bytearray):
        if not image:
            raise InvalidInput("Image is empty")
        return _to_data_url(bytes(image))
    if isinstance(image, str) and image.startswith("data:image/") and "," in image:
        return image
    raise InvalidInput("Image must be raw bytes or a data:image/... URL")


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
