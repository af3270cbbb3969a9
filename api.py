"""
FastAPI server exposing the movie assistant.
Endpoints:
- GET /health: basic health check
- POST /api/ask {text, context?}: one conversational turn -> summary, context, results, followup

Startup reads settings from the environment (ASSISTANT_MODE selects the
model-backed or the offline keyword pipeline) and builds the assistant once.

Usage:
    uvicorn api:app --reload --port 8000
"""

# Import standard libraries for timing
import time  # measure startup and request latencies
from typing import Any, Dict, List, Optional  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for response models
from fastapi import Body, FastAPI, Request  # FastAPI primitives
from fastapi.exceptions import RequestValidationError  # malformed JSON bodies
from fastapi.responses import JSONResponse  # explicit status/body control
from pydantic import BaseModel  # response schema definitions
from starlette.exceptions import HTTPException as StarletteHTTPException  # 404/405 raised by routing

# Import our internal modules for configuration and the pipeline
from movie_assistant.assistant import SearchAssistant, build_assistant  # core pipeline
from movie_assistant.config import Settings, configure_logging  # env settings + loguru setup
from movie_assistant.errors import InputError  # caller mistakes -> 400

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata
app = FastAPI(title="Movie Assistant API", version="1.0.0")  # web app

# Globals that hold the assistant instance and measured startup time
ASSISTANT: Optional[SearchAssistant] = None  # will point to the initialized assistant
SETTINGS: Optional[Settings] = None  # settings the assistant was built with
STARTUP_TIME_S: float = 0.0  # measures how long startup took


# Pydantic model that describes the resolved filters echoed back to the caller
class ContextOut(BaseModel):
	type: Optional[str] = None  # "movie" | "tv"
	genre: Optional[str] = None  # canonical genre
	language: Optional[str] = None  # ISO-639-1 code
	year: Optional[int] = None  # exact year
	year_after: Optional[int] = None  # strictly after
	year_before: Optional[int] = None  # strictly before
	min_rating: Optional[float] = None  # rating floor
	actor: Optional[str] = None  # actor name
	director: Optional[str] = None  # director name
	theme: Optional[str] = None  # synopsis keyword


# Pydantic model for the complete response payload of one turn
class AskResponse(BaseModel):
	summary: str  # one-line intent or default summary
	context: ContextOut  # filters to resubmit on the next turn
	results: List[Dict[str, Any]]  # ranked title records (provider-shaped)
	followup: Optional[str] = None  # one clarifying question, if any


def error_response(status_code: int, message: str) -> JSONResponse:
	return JSONResponse(status_code=status_code, content={"error": message})


# Render routing errors (wrong method, unknown path) in the same {"error": ...} shape
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
	logger.debug(f"[API] {request.method} {request.url.path} -> {exc.status_code}")
	return error_response(exc.status_code, str(exc.detail))


# A body that is not a JSON object is a caller mistake, reported as 400 rather than 422
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
	logger.info(f"[API] Invalid request body on {request.url.path}")
	return error_response(400, "Invalid request body")


# FastAPI startup hook to initialize the assistant once
@app.on_event("startup")
async def startup_event():
	"""Read settings, configure logging and build the assistant."""
	global ASSISTANT, SETTINGS, STARTUP_TIME_S  # refer to module-level globals
	start = time.time()  # start timer for startup latency

	SETTINGS = Settings.from_env()  # environment (+ .env) configuration
	configure_logging(SETTINGS.log_level)  # single stderr sink
	logger.info(f"[API] Startup: building assistant in '{SETTINGS.mode}' mode...")  # log intent

	ASSISTANT = build_assistant(SETTINGS)  # loads the catalog in keyword mode

	STARTUP_TIME_S = time.time() - start  # elapsed seconds
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s.")  # summary log


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness checks."""
	return {
		"status": "ok",  # constant indicator
		"assistant_ready": ASSISTANT is not None,  # True if assistant initialized
		"mode": SETTINGS.mode if SETTINGS else None,  # configured pipeline variant
		"startup_seconds": round(STARTUP_TIME_S, 2)  # startup latency
	}


# Main conversational endpoint
@app.post("/api/ask", response_model=AskResponse)
def ask(request_body: Optional[Dict[str, Any]] = Body(None)):
	"""Run one turn of the assistant. Any unexpected failure becomes a generic 500."""
	if ASSISTANT is None:  # assistant must be ready to serve
		logger.warning("[API] Ask requested but assistant not initialized")  # guard log
		return error_response(503, "Assistant not ready")

	body = request_body or {}
	text = body.get("text")
	context = body.get("context")

	start = time.time()  # start timer
	try:
		response = ASSISTANT.ask(text, context=context if isinstance(context, dict) else None)
	except InputError as e:
		logger.info(f"[API] Rejected request: {e}")
		return error_response(400, str(e))
	except Exception:
		logger.exception("[API] Unhandled error while answering")  # details stay server-side
		return error_response(500, "Server error")

	elapsed_ms = (time.time() - start) * 1000  # compute ms
	logger.info(f"[API] /api/ask served {len(response.results)} results in {elapsed_ms:.2f} ms")  # summary
	return AskResponse(
		summary=response.summary,
		context=ContextOut(**response.context.to_dict()),
		results=response.results,
		followup=response.followup,
	)
