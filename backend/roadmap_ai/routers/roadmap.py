from __future__ import annotations
import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..errors import RoadmapError
from ..gemini_client import get_gemini_transport
from ..roadmap_service import generate_roadmap
from ..schemas import SearchRequest
from ..settings import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["roadmap"])


@router.post("/search")
async def search(
	req: SearchRequest,
	settings: Settings = Depends(get_settings),
	transport: Optional[httpx.AsyncBaseTransport] = Depends(get_gemini_transport),
):
	try:
		roadmap = await generate_roadmap(req.topic, settings=settings, transport=transport)
	except RoadmapError:
		# Rendered by the application's RoadmapError handler
		raise
	except Exception:
		logger.exception("Unexpected failure generating roadmap")
		return JSONResponse({"error": "Internal server error"}, status_code=500)
	# Any JSON value, returned exactly as parsed
	return JSONResponse(roadmap)
