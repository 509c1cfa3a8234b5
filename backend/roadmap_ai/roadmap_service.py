from __future__ import annotations
import json
import logging
import re
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from .errors import InvalidModelOutputError, InvalidTopicError, MissingCredentialError
from .gemini_client import GeminiClient
from .schemas import RoadmapDocument
from .settings import Settings

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```json|```")


def build_prompt(topic: str) -> str:
	return (
		f'You are an expert learning path generator. For the topic "{topic}" produce JSON with:\n'
		"{\n"
		'  "title": "...",\n'
		'  "overview": "...",\n'
		'  "stages": [\n'
		'    { "title": "Beginner", "duration": "4-6 weeks", "items": [{ "name": "...", "description": "...", '
		'"resources": [{ "label": "", "url": "" }] }] },\n'
		"    ...\n"
		"  ]\n"
		"}\n"
		"Only return valid JSON with no extra text."
	)


def strip_code_fences(text: str) -> str:
	"""Drop every ```json / ``` marker and the surrounding whitespace."""
	return _FENCE_RE.sub("", text or "").strip()


def _reject_constant(name: str) -> Any:
	# NaN and Infinity are not JSON and cannot be sent back to the client
	raise ValueError(f"non-standard JSON constant: {name}")


def parse_roadmap_text(text: str, *, strict: bool = False) -> Any:
	cleaned = strip_code_fences(text)
	try:
		value = json.loads(cleaned, parse_constant=_reject_constant)
	except ValueError as e:
		snippet = cleaned[:200] + "..." if len(cleaned) > 200 else cleaned
		logger.warning("JSON parse error: %s. Raw (truncated): %r", e, snippet)
		raise InvalidModelOutputError(cleaned, reason=str(e)) from e
	if strict:
		_check_roadmap_shape(value, cleaned)
	return value


def _check_roadmap_shape(value: Any, raw: str) -> None:
	if not isinstance(value, dict) or not isinstance(value.get("stages"), list):
		logger.warning("Model output is not a roadmap object with a stages list")
		raise InvalidModelOutputError(raw, message="Roadmap does not match schema", reason="stages missing")
	try:
		RoadmapDocument.model_validate(value)
	except ValidationError as e:
		logger.warning("Model output failed roadmap validation: %s", e)
		raise InvalidModelOutputError(raw, message="Roadmap does not match schema", reason=str(e)) from e


def _normalize_topic(topic: Any) -> str:
	"""Trimmed topic text; "" for falsy values and anything that is not a string or number."""
	if not topic or isinstance(topic, bool):
		return ""
	if isinstance(topic, (int, float)):
		return str(topic)
	if isinstance(topic, str):
		return topic.strip()
	return ""


async def generate_roadmap(
	topic: Any,
	*,
	settings: Settings,
	transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Any:
	topic = _normalize_topic(topic)
	if not topic:
		raise InvalidTopicError()
	if not settings.gemini_api_key:
		raise MissingCredentialError()

	logger.info("Generating roadmap for topic %r with %s", topic, settings.gemini_model)
	client = GeminiClient(settings=settings, transport=transport)
	try:
		text = await client.generate(build_prompt(topic))
	finally:
		await client.aclose()
	if not text:
		logger.warning("Gemini response for %r had no candidate text", topic)
	return parse_roadmap_text(text, strict=settings.strict_schema)
