"""
adsnap FastAPI application

POST /api/response generates an ad; finished videos are served from /videos.
"""

import logging
from typing import Any, Callable, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

from . import __version__
from .config import Config, config
from .errors import PipelineError
from .pipeline import PipelineOrchestrator, build_orchestrator

logger = logging.getLogger(__name__)

PROMPT_REQUIRED = "Request body must contain a 'prompt' field."


class AdRequest(BaseModel):
    """Body of POST /api/response."""

    prompt: Optional[str] = Field(None, description="Ad request")
    options: Any = Field(None, description="Generation settings, e.g. {\"duration\": 20}")

    @property
    def duration(self) -> Any:
        """Requested duration, or None when options is not an object."""
        if isinstance(self.options, dict):
            return self.options.get("duration")
        return None


class AdResponse(BaseModel):
    """Body returned for a published ad."""

    title: str
    videoUrl: str


def create_app(
    orchestrator: Optional[PipelineOrchestrator] = None,
    settings: Optional[Config] = None,
    orchestrator_factory: Callable[[Config], PipelineOrchestrator] = build_orchestrator,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        orchestrator: Pipeline to serve. Built lazily from settings on the
            first request if not provided.
        settings: Configuration. Defaults to the global config.
        orchestrator_factory: Builds the orchestrator when none is given.
    """
    settings = settings or config
    app = FastAPI(
        title="adsnap API",
        description="Prompt-to-video ad generation",
        version=__version__,
    )
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def invalid_request_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Rejected request body: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": PROMPT_REQUIRED})

    # Malformed bodies get the same error shape as a missing prompt.
    app.add_exception_handler(RequestValidationError, invalid_request_handler)

    def get_orchestrator() -> PipelineOrchestrator:
        if app.state.orchestrator is None:
            app.state.orchestrator = orchestrator_factory(settings)
        return app.state.orchestrator

    router = APIRouter()

    # Sync handler: FastAPI runs it in the threadpool.
    @router.post("/response", response_model=AdResponse)
    def generate_response(body: AdRequest):
        """Generate a video ad from a prompt."""
        if not body.prompt or not body.prompt.strip():
            return JSONResponse(
                status_code=400,
                content={"error": PROMPT_REQUIRED},
            )

        try:
            result = get_orchestrator().generate_ad(body.prompt, body.duration)
        except PipelineError as e:
            return JSONResponse(status_code=500, content={"error": str(e)})
        except Exception as e:
            logger.exception(f"API Error: {e}")
            return JSONResponse(status_code=500, content={"error": str(e)})

        return AdResponse(title=result.title, videoUrl=result.video_url)

    app.include_router(router, prefix="/api", tags=["Ads"])

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        """Root endpoint."""
        return "Welcome to backend adsnap"

    @app.middleware("http")
    async def no_cache_videos(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith("/videos/"):
            response.headers["Cache-Control"] = "no-cache"
        return response

    # StaticFiles answers Range requests.
    settings.videos_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/videos", StaticFiles(directory=str(settings.videos_dir)), name="videos")

    return app
