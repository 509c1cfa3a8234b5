from pathlib import Path
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .errors import RoadmapError
from .settings import Settings, get_settings, settings
from .routers import health, roadmap, pages

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"

app = FastAPI(title="Roadmap.ai API")


@app.exception_handler(RoadmapError)
async def roadmap_error_handler(request: Request, exc: RoadmapError):
	logger.error("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
	return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
	# Unreadable API bodies answer like any other failed roadmap request
	if request.url.path.startswith("/api/"):
		logger.error("%s %s -> unreadable request: %s", request.method, request.url.path, exc.errors())
		return JSONResponse({"error": "Internal server error"}, status_code=500)
	return await request_validation_exception_handler(request, exc)


app.include_router(health.router)
app.include_router(roadmap.router)

# Static assets (use absolute paths so cwd doesn't matter when launching)
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

@app.get("/info")
def info(cfg: Settings = Depends(get_settings)):
	return {"status": "ok", "gemini_configured": bool(cfg.gemini_api_key)}

# Pages last: the "/{topic}/..." routes match almost any path
app.include_router(pages.router)
