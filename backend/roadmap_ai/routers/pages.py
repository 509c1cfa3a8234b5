from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import httpx
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from ..errors import RoadmapError
from ..gemini_client import get_gemini_transport
from ..presentation import (
	CELEBRATION_SECONDS,
	DISPLAY_NAME_KEY,
	EXAMPLE_TOPICS,
	FETCH_ERROR_MESSAGE,
	POPULAR_ROADMAPS,
	CookieStore,
	KeyValueStore,
	StudySession,
	greeting,
	load_roadmap,
	validate_display_name,
	youtube_embed_url,
)
from ..roadmap_service import generate_roadmap
from ..settings import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

templates = Jinja2Templates(directory=Path(__file__).resolve().parents[1] / "templates")
templates.env.globals["youtube_embed_url"] = youtube_embed_url


def get_display_name_store(request: Request) -> KeyValueStore:
	return CookieStore(request.cookies)


def _landing(request: Request, store: KeyValueStore, *, status_code: int = 200, name_error: Optional[str] = None):
	return templates.TemplateResponse(
		request,
		"index.html",
		{
			"greeting": greeting(store),
			"example_topics": EXAMPLE_TOPICS,
			"popular_roadmaps": POPULAR_ROADMAPS,
			"name_error": name_error,
		},
		status_code=status_code,
	)


def _error_page(request: Request, message: str, *, status_code: int):
	return templates.TemplateResponse(request, "error.html", {"message": message}, status_code=status_code)


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def landing(request: Request, store: KeyValueStore = Depends(get_display_name_store)):
	return _landing(request, store)


@router.get("/search", include_in_schema=False)
async def search_redirect(q: str = ""):
	topic = q.strip()
	if not topic:
		return RedirectResponse(url="/", status_code=303)
	return RedirectResponse(url=f"/{quote(topic, safe='')}/detail", status_code=303)


@router.post("/name", include_in_schema=False)
async def set_display_name(
	request: Request,
	name: str = Form(""),
	store: KeyValueStore = Depends(get_display_name_store),
):
	try:
		value = validate_display_name(name)
	except ValueError as e:
		return _landing(request, store, status_code=400, name_error=str(e))
	store.set(DISPLAY_NAME_KEY, value)
	response = RedirectResponse(url="/", status_code=303)
	if isinstance(store, CookieStore):
		store.write_to(response)
	return response


@router.get("/{topic:path}/detail", response_class=HTMLResponse, include_in_schema=False)
async def roadmap_detail(
	request: Request,
	topic: str,
	settings: Settings = Depends(get_settings),
	transport: Optional[httpx.AsyncBaseTransport] = Depends(get_gemini_transport),
):
	try:
		value = await generate_roadmap(topic, settings=settings, transport=transport)
	except RoadmapError as e:
		logger.error("Roadmap for %r failed: %s", topic, e.to_dict())
		return _error_page(request, FETCH_ERROR_MESSAGE, status_code=e.status_code)
	except Exception:
		logger.exception("Unexpected failure rendering roadmap for %r", topic)
		return _error_page(request, FETCH_ERROR_MESSAGE, status_code=500)

	roadmap = load_roadmap(value)
	if roadmap is None:
		logger.error("Roadmap for %r is not a document: %.200r", topic, value)
		return _error_page(request, FETCH_ERROR_MESSAGE, status_code=502)
	return templates.TemplateResponse(
		request,
		"detail.html",
		{
			"topic": topic,
			"roadmap": roadmap,
			"roadmap_json": roadmap.model_dump_json(),
		},
	)


@router.post("/{topic:path}/study", response_class=HTMLResponse, include_in_schema=False)
async def study(
	request: Request,
	topic: str,
	roadmap: str = Form(...),
	action: str = Form("start"),
	stage: int = Form(0),
	lesson: int = Form(0),
	target: Optional[int] = Form(None),
):
	try:
		doc = load_roadmap(json.loads(roadmap))
	except json.JSONDecodeError:
		doc = None
	if doc is None:
		return _error_page(request, FETCH_ERROR_MESSAGE, status_code=400)

	session = StudySession(doc, stage=stage, lesson=lesson, study_mode=action != "start")
	try:
		session.apply(action, target=target)
	except ValueError as e:
		return _error_page(request, str(e), status_code=400)

	return templates.TemplateResponse(
		request,
		"study.html",
		{
			"topic": topic,
			"session": session,
			"roadmap": doc,
			"roadmap_json": doc.model_dump_json(),
			"celebrating": session.is_celebrating(),
			"celebration_seconds": CELEBRATION_SECONDS,
		},
	)
