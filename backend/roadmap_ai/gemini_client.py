from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, Optional
from .errors import MissingCredentialError, UpstreamError
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def first_candidate_text(data: Any) -> str:
	"""Text of the first candidate's first part, or "" when the response has none."""
	try:
		text = data["candidates"][0]["content"]["parts"][0]["text"]
	except (KeyError, IndexError, TypeError):
		return ""
	return text if isinstance(text, str) else ""


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		settings: Optional[Settings] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		cfg = settings or default_settings
		self.api_key = api_key or cfg.gemini_api_key
		if not self.api_key:
			raise MissingCredentialError()
		self.model = model or cfg.gemini_model
		# Google AI Studio (Generative Language API), key passed as a query parameter
		root = (base_url or cfg.gemini_base_url).rstrip("/")
		self.base_url = f"{root}/{self.model}:generateContent"
		# No timeout: the call lasts as long as the upstream takes
		self._client = httpx.AsyncClient(timeout=None, transport=transport)

	async def generate(self, prompt: str) -> str:
		payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
		return await self._post_payload(payload)

	async def _post_payload(self, payload: Dict[str, Any]) -> str:
		params: Dict[str, Any] = {"key": self.api_key}
		try:
			r = await self._client.post(self.base_url, params=params, json=payload)
		except httpx.RequestError as net_err:
			logger.error("Gemini request to %s failed: %s", self.model, net_err)
			raise UpstreamError(str(net_err)) from net_err
		if not r.is_success:
			logger.error("Gemini returned %s: %s", r.status_code, r.text[:500])
			raise UpstreamError(r.text, status_code=r.status_code)
		try:
			data = r.json()
		except ValueError:
			logger.warning("Gemini returned a non-JSON body (%s bytes)", len(r.content))
			data = None
		return first_candidate_text(data)

	async def aclose(self) -> None:
		await self._client.aclose()


def get_gemini_transport() -> Optional[httpx.AsyncBaseTransport]:
	# Default network transport; tests override this dependency with httpx.MockTransport
	return None
