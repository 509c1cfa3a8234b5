import json
from typing import Any, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from roadmap_ai.gemini_client import get_gemini_transport
from roadmap_ai.main import app
from roadmap_ai.settings import Settings, get_settings


def gemini_body(text: Optional[str]) -> dict:
	if text is None:
		return {"candidates": []}
	return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeGemini:
	"""Stand-in for the Generative Language API that records every request."""

	def __init__(self) -> None:
		self.requests: List[httpx.Request] = []
		self.status_code = 200
		self.body: Any = gemini_body('{"title": "Python", "stages": []}')
		self.raise_error: Optional[Exception] = None

	def reply(self, text: Optional[str]) -> None:
		self.status_code = 200
		self.body = gemini_body(text)

	def fail(self, status_code: int, body: str) -> None:
		self.status_code = status_code
		self.body = body

	def handler(self, request: httpx.Request) -> httpx.Response:
		self.requests.append(request)
		if self.raise_error is not None:
			raise self.raise_error
		if isinstance(self.body, str):
			return httpx.Response(self.status_code, text=self.body)
		return httpx.Response(self.status_code, json=self.body)

	@property
	def prompts(self) -> List[str]:
		return [json.loads(r.content)["contents"][0]["parts"][0]["text"] for r in self.requests]

	def transport(self) -> httpx.MockTransport:
		return httpx.MockTransport(self.handler)


def make_settings(**overrides: Any) -> Settings:
	values = {"GEMINI_API_KEY": "test-key", "GEMINI_MODEL": "gemini-2.0-flash"}
	values.update(overrides)
	return Settings(_env_file=None, **values)


@pytest.fixture
def gemini():
	return FakeGemini()


@pytest.fixture
def settings():
	return make_settings()


@pytest.fixture
def client(gemini, settings):
	app.dependency_overrides[get_settings] = lambda: settings
	app.dependency_overrides[get_gemini_transport] = gemini.transport
	with TestClient(app) as c:
		yield c
	app.dependency_overrides.clear()


@pytest.fixture
def use_settings():
	def apply(**overrides: Any) -> Settings:
		cfg = make_settings(**overrides)
		app.dependency_overrides[get_settings] = lambda: cfg
		return cfg
	return apply
