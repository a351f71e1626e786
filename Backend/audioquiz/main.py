import logging
import threading
from typing import Optional

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from audioquiz.errors import AudioQuizError, IntakeError, UnknownError
from audioquiz.schemas import ErrorResponse, HealthResponse, PromptVersionInfo, QuizPayload
from audioquiz.services.intake import AudioIntake
from audioquiz.services.pipeline import QuizPipeline
from audioquiz.services.prompts import PROMPT_VERSIONS, get_prompt_version
from audioquiz.services.quiz_service import QuizSynthesizer
from audioquiz.services.transcription_service import Transcriber
from audioquiz.utils.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class Services:
    """Provider-backed pipeline, built on first use unless fakes were handed in"""

    def __init__(self, settings: Settings, transcriber=None, synthesizer=None):
        self.settings = settings
        self.intake = AudioIntake.from_settings(settings)
        self.transcriber = transcriber
        self.synthesizer = synthesizer
        self._lock = threading.Lock()

    def pipeline(self) -> QuizPipeline:
        with self._lock:
            if self.transcriber is None:
                self.transcriber = Transcriber.from_settings(self.settings)
            if self.synthesizer is None:
                self.synthesizer = QuizSynthesizer.from_settings(self.settings)
        return QuizPipeline(self.intake, self.transcriber, self.synthesizer)

    def process(self, upload) -> QuizPayload:
        return self.pipeline().run(upload)


def error_response(error: AudioQuizError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


@router.post(
    "/upload-audio",
    response_model=QuizPayload,
    responses={400: {"model": ErrorResponse}, 415: {"model": ErrorResponse},
               500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def upload_audio(request: Request):
    """Transcribe an uploaded recording and return its summary and quiz.

    ``audio`` is read from the raw form: a missing or non-file value is an
    intake error, never a 422.
    """
    services: Services = request.app.state.services
    try:
        async with request.form() as form:
            # Provider calls block, keep them off the event loop
            return await run_in_threadpool(services.process, form.get("audio"))
    except StarletteHTTPException as e:
        logger.warning(f"[/api/upload-audio] unreadable form: {e.detail}")
        return error_response(IntakeError("Could not read the upload form."))
    except AudioQuizError as e:
        return error_response(e)
    except Exception:
        logger.exception("[/api/upload-audio] unexpected error")
        return error_response(UnknownError())


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse()


@router.get("/prompt-versions", response_model=list[PromptVersionInfo])
def prompt_versions():
    return [version.describe() for version in PROMPT_VERSIONS.values()]


def create_app(settings: Optional[Settings] = None, transcriber=None, synthesizer=None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=settings.log_level.upper())
    # Fail at startup rather than on the first upload
    get_prompt_version(settings.prompt_version)

    app = FastAPI(
        title="AudioQuiz API",
        description="Turns audio recordings into a summary and a multiple-choice quiz",
        version=settings.api_version,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.services = Services(settings, transcriber=transcriber, synthesizer=synthesizer)
    app.include_router(router, prefix="/api")

    @app.get("/")
    def root():
        return {"status": "online", "version": settings.api_version}

    @app.get("/healthz", response_model=HealthResponse)
    def healthz():
        return HealthResponse()

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("audioquiz.main:app", host="0.0.0.0", port=10000)
