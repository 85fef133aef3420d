# main.py
import logging
from typing import Optional

from dotenv import load_dotenv
load_dotenv(override=True)

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cleaner import clean_json_output, parse_model_output
from llm import GeminiClient
from models import (
    ChatAnswer,
    ChatRequest,
    ChatResponse,
    DescriptionRequest,
    DescriptionResponse,
    ErrorResponse,
    PartDescription,
    ResetResponse,
    SessionResponse,
)
from prompts import (
    ai_line,
    build_chat_prompt,
    build_conversation_prompt,
    build_description_prompt,
    user_line,
)
from sessions import SessionStore
from settings import Settings

logger = logging.getLogger("part_proxy")

MISSING_PART_NAME = "Please provide a part name."
MISSING_QUESTION = "Please provide a question."
MISSING_DESCRIPTION = "Please request a part description first."
NO_HISTORY = "No conversation history found."
DESCRIPTION_FAILED = "Failed to generate description."
CHAT_FAILED = "Failed to generate chat response."


class ProxyError(Exception):
    """Unexpected failure while serving a request; rendered as a 500."""

    def __init__(self, message: str, details: str = ""):
        super().__init__(message)
        self.message = message
        self.details = details


# --- Dependencies ---

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_llm(request: Request):
    return request.app.state.llm


def get_sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def session_token(request: Request) -> Optional[str]:
    return request.cookies.get(request.app.state.settings.SESSION_COOKIE_NAME)


# --- Shared handlers ---

def describe_part(part_name: Optional[str], llm) -> DescriptionResponse:
    if not part_name:
        raise HTTPException(status_code=400, detail=MISSING_PART_NAME)

    logger.info("Description requested: part_name=%r", part_name)
    try:
        raw_text = llm.generate(build_description_prompt(part_name))
    except Exception as e:
        logger.exception("Description generation failed: %s", e)
        raise ProxyError(DESCRIPTION_FAILED, str(e)) from e

    parsed = parse_model_output(raw_text, PartDescription)
    if parsed is None:
        return DescriptionResponse(partName=part_name, raw=raw_text)
    return DescriptionResponse(partName=part_name, description=parsed)


def answer_prompt(question: str, prompt: str, llm) -> ChatResponse:
    try:
        raw_text = llm.generate(prompt)
    except Exception as e:
        logger.exception("Chat generation failed: %s", e)
        raise ProxyError(CHAT_FAILED, str(e)) from e

    parsed = parse_model_output(raw_text, ChatAnswer)
    if parsed is None:
        return ChatResponse(question=question, raw=raw_text)
    return ChatResponse(question=question, answer=parsed)


# --- Routes ---

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}

common_router = APIRouter()
stateless_router = APIRouter(responses=ERROR_RESPONSES)
stateful_router = APIRouter(responses=ERROR_RESPONSES)


@common_router.get("/healthz")
def healthz():
    return {"ok": True}


@stateless_router.post("/description", response_model=DescriptionResponse, response_model_exclude_none=True)
def description(req: Optional[DescriptionRequest] = None, llm=Depends(get_llm)):
    return describe_part(req.partName if req else None, llm)


@stateless_router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
def chat(req: Optional[ChatRequest] = None, llm=Depends(get_llm)):
    question = req.question if req else None
    if not question:
        raise HTTPException(status_code=400, detail=MISSING_QUESTION)

    logger.info("Chat question: %s chars", len(question))
    return answer_prompt(question, build_chat_prompt(question), llm)


@stateful_router.post("/description", response_model=DescriptionResponse, response_model_exclude_none=True)
def session_description(
    request: Request,
    response: Response,
    req: Optional[DescriptionRequest] = None,
    llm=Depends(get_llm),
    sessions: SessionStore = Depends(get_sessions),
    settings: Settings = Depends(get_settings),
):
    result = describe_part(req.partName if req else None, llm)

    # only tokens this process issued are honoured
    token = session_token(request)
    if sessions.get(token) is None:
        token = sessions.new_token()
        response.set_cookie(settings.SESSION_COOKIE_NAME, token, httponly=True, samesite="lax")

    if result.description is not None:
        sessions.start(token, result.partName, result.description.model_dump())
    else:
        sessions.start(token, result.partName, result.raw)
    return result


@stateful_router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
def session_chat(
    request: Request,
    req: Optional[ChatRequest] = None,
    llm=Depends(get_llm),
    sessions: SessionStore = Depends(get_sessions),
):
    question = req.question if req else None
    if not question:
        raise HTTPException(status_code=400, detail=MISSING_QUESTION)

    session = sessions.get(session_token(request))
    if session is None or session.last_description is None:
        raise HTTPException(status_code=400, detail=MISSING_DESCRIPTION)

    logger.info("Chat question: %s chars, transcript=%s lines", len(question), len(session.transcript))
    question_line = user_line(question)
    result = answer_prompt(question, build_conversation_prompt(session.transcript + [question_line]), llm)

    # question and answer are recorded together, only once the model replied
    if result.answer is not None:
        answer = result.answer.answer
    else:
        answer = clean_json_output(result.raw or "")
    session.transcript.extend([question_line, ai_line(answer)])
    return result


@stateful_router.post("/reset", response_model=ResetResponse)
def reset(
    request: Request,
    response: Response,
    sessions: SessionStore = Depends(get_sessions),
    settings: Settings = Depends(get_settings),
):
    sessions.delete(session_token(request))
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return ResetResponse(message="Session reset successfully.")


@stateful_router.get("/session", response_model=SessionResponse)
def session_history(request: Request, sessions: SessionStore = Depends(get_sessions)):
    session = sessions.get(session_token(request))
    if session is None or not session.transcript:
        raise HTTPException(status_code=400, detail=NO_HISTORY)
    return SessionResponse(conversationHistory=list(session.transcript))


# --- Error rendering ---

def error_response(status_code: int, error: str, details: Optional[str] = None, headers=None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def describe_validation_errors(errors) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', '')}" if loc else err.get("msg", ""))
    return "; ".join(parts)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(400, "Invalid request body.", describe_validation_errors(exc.errors()))


async def proxy_error_handler(request: Request, exc: ProxyError):
    return error_response(500, exc.message, exc.details)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s: %s", request.url.path, exc)
    return error_response(500, "Internal server error.", str(exc))


# --- App factory ---

def create_app(settings: Optional[Settings] = None, llm=None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="Part Explainer Proxy", version="1.0.0")
    app.state.settings = settings
    app.state.llm = llm or GeminiClient(settings)
    app.state.sessions = SessionStore()

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ProxyError, proxy_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(common_router)
    app.include_router(stateful_router if settings.stateful else stateless_router)
    logger.info("Serving in %s mode with model %s", settings.SESSION_MODE, settings.MODEL_NAME)
    return app


settings = Settings()
logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="[%(asctime)s] %(levelname)s - %(message)s")

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
