## Roadmap document shape
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional


class _Lenient(BaseModel):
	# Model output is loosely structured: ignore unknown keys, accept numbers where text is expected
	model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class Resource(_Lenient):
	label: str = ""
	url: str = ""


class LessonItem(_Lenient):
	name: str = ""
	description: Optional[str] = None
	resources: Optional[List[Resource]] = None


class Stage(_Lenient):
	title: str = ""
	duration: Optional[str] = None
	items: List[LessonItem] = Field(default_factory=list)

	@field_validator("items", mode="before")
	@classmethod
	def _null_items(cls, v: Any) -> Any:
		return [] if v is None else v


class RoadmapDocument(_Lenient):
	title: str = ""
	overview: Optional[str] = None
	stages: List[Stage] = Field(default_factory=list)

	@field_validator("stages", mode="before")
	@classmethod
	def _null_stages(cls, v: Any) -> Any:
		return [] if v is None else v


class SearchRequest(BaseModel):
	# Checked by the roadmap service so every falsy value gets the same "topic required" answer
	topic: Any = None
