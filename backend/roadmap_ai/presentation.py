from __future__ import annotations
import re
import time
from typing import Any, Dict, List, Optional, Protocol

from pydantic import ValidationError

from .schemas import LessonItem, RoadmapDocument, Stage


CELEBRATION_SECONDS = 3.0
DISPLAY_NAME_KEY = "userName"
FETCH_ERROR_MESSAGE = "Could not fetch roadmap."

EXAMPLE_TOPICS: List[Dict[str, str]] = [
	{"key": "react", "label": "React"},
	{"key": "java", "label": "Java"},
	{"key": "node", "label": "Node.js"},
	{"key": "python", "label": "Python"},
	{"key": "kubernetes", "label": "Kubernetes"},
]

POPULAR_ROADMAPS: List[Dict[str, str]] = [
	{"title": "React Developer", "subtitle": "Hooks, performance, testing", "tag": "Frontend"},
	{"title": "Java Backend", "subtitle": "Spring, concurrency, microservices", "tag": "Backend"},
	{"title": "Python Data", "subtitle": "Pandas, ML, deployment", "tag": "Data"},
	{"title": "Kubernetes & Cloud", "subtitle": "Containers, orchestration, IaC", "tag": "DevOps"},
]


def load_roadmap(value: Any) -> Optional[RoadmapDocument]:
	"""Coerce whatever the handler returned into a renderable document, or None."""
	if not isinstance(value, dict):
		return None
	try:
		return RoadmapDocument.model_validate(value)
	except ValidationError:
		return None


class StudySession:
	"""Navigation state of the study-mode walkthrough over one roadmap.

	Nothing here is stored server-side: pages carry the indices in their forms
	and rebuild the session on every step.
	"""

	ACTIONS = ("start", "select", "next", "previous", "complete")

	def __init__(self, roadmap: RoadmapDocument, *, stage: int = 0, lesson: int = 0, study_mode: bool = False) -> None:
		self.roadmap = roadmap
		self.study_mode = study_mode
		self.stage_index = 0
		self.lesson_index = 0
		self._celebrated_at: Optional[float] = None
		if 0 <= stage < len(roadmap.stages):
			self.stage_index = stage
		stage_obj = self.current_stage
		if stage_obj is not None and 0 <= lesson < len(stage_obj.items):
			self.lesson_index = lesson

	@property
	def stages(self) -> List[Stage]:
		return self.roadmap.stages

	@property
	def current_stage(self) -> Optional[Stage]:
		if not self.stages:
			return None
		return self.stages[self.stage_index]

	@property
	def current_lesson(self) -> Optional[LessonItem]:
		stage = self.current_stage
		if stage is None or not stage.items:
			return None
		return stage.items[self.lesson_index]

	@property
	def can_go_back(self) -> bool:
		return self.lesson_index > 0

	@property
	def has_next_lesson(self) -> bool:
		stage = self.current_stage
		return stage is not None and self.lesson_index < len(stage.items) - 1

	@property
	def has_next_stage(self) -> bool:
		return self.stage_index < len(self.stages) - 1

	def start(self) -> None:
		self.study_mode = True

	def select_stage(self, index: int) -> None:
		if 0 <= index < len(self.stages):
			self.stage_index = index
			self.lesson_index = 0

	def next_lesson(self) -> None:
		if self.has_next_lesson:
			self.lesson_index += 1

	def previous_lesson(self) -> None:
		if self.can_go_back:
			self.lesson_index -= 1

	def complete_stage(self, now: Optional[float] = None) -> None:
		self._celebrated_at = time.monotonic() if now is None else now
		# The last stage has no successor: completing it only celebrates
		if self.has_next_stage:
			self.stage_index += 1
			self.lesson_index = 0

	def is_celebrating(self, now: Optional[float] = None) -> bool:
		if self._celebrated_at is None:
			return False
		now = time.monotonic() if now is None else now
		return now - self._celebrated_at < CELEBRATION_SECONDS

	def apply(self, action: str, *, target: Optional[int] = None, now: Optional[float] = None) -> None:
		if action == "start":
			self.start()
		elif action == "select":
			if target is not None:
				self.select_stage(target)
		elif action == "next":
			self.next_lesson()
		elif action == "previous":
			self.previous_lesson()
		elif action == "complete":
			self.complete_stage(now)
		else:
			raise ValueError(f"unknown study action: {action}")


# --- Display name ---------------------------------------------------------

class KeyValueStore(Protocol):
	def get(self, key: str) -> Optional[str]: ...

	def set(self, key: str, value: str) -> None: ...


class MemoryStore:
	def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
		self._data: Dict[str, str] = dict(initial or {})

	def get(self, key: str) -> Optional[str]:
		return self._data.get(key)

	def set(self, key: str, value: str) -> None:
		self._data[key] = value


class CookieStore:
	"""Browser-held values: read from the request cookies, written onto a response."""

	MAX_AGE = 365 * 24 * 60 * 60

	def __init__(self, cookies: Dict[str, str]) -> None:
		self._cookies = dict(cookies)
		self._pending: Dict[str, str] = {}

	def get(self, key: str) -> Optional[str]:
		if key in self._pending:
			return self._pending[key]
		return self._cookies.get(key)

	def set(self, key: str, value: str) -> None:
		self._pending[key] = value

	def write_to(self, response: Any) -> None:
		for key, value in self._pending.items():
			response.set_cookie(key, value, max_age=self.MAX_AGE, samesite="lax")


def greeting(store: KeyValueStore) -> str:
	name = store.get(DISPLAY_NAME_KEY)
	return f"Welcome, {name}!" if name else "Welcome!"


def validate_display_name(name: Optional[str]) -> str:
	value = (name or "").strip()
	if len(value) < 2 or len(value) > 20:
		raise ValueError("name must be 2-20 characters")
	return value


# --- YouTube embeds -------------------------------------------------------

_YOUTUBE_ID_RE = re.compile(
	r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)([^\"&?/\s]{11})"
)


def youtube_video_id(url: Optional[str]) -> Optional[str]:
	if not url:
		return None
	m = _YOUTUBE_ID_RE.search(url)
	return m.group(1) if m else None


def youtube_embed_url(url: Optional[str]) -> Optional[str]:
	video_id = youtube_video_id(url)
	if not video_id:
		return None
	return f"https://www.youtube.com/embed/{video_id}"
