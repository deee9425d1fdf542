import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from . import globals as app_globals
from .config import settings
from .errors import InsufficientDataError, ParseError, QuizStateError
from .models import AnswerRequest, StartRequest, Status
from .quiz import QuizFactory
from .session import QuizSession
from .storage import InputStore
from .vocabulary import VocabularyManager

logger = logging.getLogger(__name__)

router = APIRouter()

# Answered pages reload shortly after the auto-advance has fired.
REFRESH_SECONDS = settings.ADVANCE_DELAY_MS // 1000 + 1


# --- Dependencies ---
def get_quiz_session() -> QuizSession:
    return app_globals.quiz_session


def get_input_store() -> InputStore:
    return app_globals.input_store


def get_vocab_manager() -> VocabularyManager:
    return app_globals.vocab_manager


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _render_setup(
    request: Request,
    raw_input: str,
    vocab: VocabularyManager,
    mode: str,
    error: Optional[str] = None,
    status_code: int = 200,
) -> HTMLResponse:
    return app_globals.templates.TemplateResponse(
        request,
        "setup.html",
        {
            "raw_input": raw_input,
            "topics": vocab.get_topics(),
            "modes": QuizFactory.modes(),
            "mode": mode,
            "error": error,
        },
        status_code=status_code,
    )


# --- Pages ---
@router.get("/", response_class=HTMLResponse)
async def setup_page(
    request: Request,
    session: QuizSession = Depends(get_quiz_session),
    store: InputStore = Depends(get_input_store),
    vocab: VocabularyManager = Depends(get_vocab_manager),
):
    return _render_setup(request, store.load(), vocab, session.mode)


@router.post("/input", response_class=RedirectResponse)
async def save_input(
    raw_input: str = Form(...), store: InputStore = Depends(get_input_store)
):
    store.save(raw_input)
    return RedirectResponse(url="/", status_code=302)


@router.post("/preset/{topic}")
async def load_preset(
    request: Request,
    topic: str,
    session: QuizSession = Depends(get_quiz_session),
    store: InputStore = Depends(get_input_store),
    vocab: VocabularyManager = Depends(get_vocab_manager),
):
    try:
        store.save(vocab.as_json(topic))
    except KeyError:
        return _render_setup(
            request, store.load(), vocab, session.mode, f"Unknown preset: {topic}", 404
        )
    logger.info(f"Loaded preset {topic} into the editor")
    return RedirectResponse(url="/", status_code=302)


@router.post("/start")
async def start_quiz(
    request: Request,
    raw_input: str = Form(...),
    mode: str = Form(settings.DEFAULT_MODE),
    session: QuizSession = Depends(get_quiz_session),
    store: InputStore = Depends(get_input_store),
    vocab: VocabularyManager = Depends(get_vocab_manager),
):
    store.save(raw_input)
    try:
        session.start(raw_input, mode)
    except (ParseError, InsufficientDataError) as e:
        logger.info(f"Quiz not started: {e}")
        return _render_setup(request, raw_input, vocab, mode, str(e), 400)
    return RedirectResponse(url="/quiz", status_code=302)


@router.get("/quiz", response_class=HTMLResponse)
async def quiz_page(request: Request, session: QuizSession = Depends(get_quiz_session)):
    if session.status == Status.SETUP:
        return RedirectResponse(url="/", status_code=302)
    if session.status == Status.FINISHED:
        return RedirectResponse(url="/result", status_code=302)
    return app_globals.templates.TemplateResponse(
        request,
        "quiz.html",
        {"state": session.snapshot(), "refresh_seconds": REFRESH_SECONDS},
    )


@router.post("/answer", response_class=RedirectResponse)
async def answer_page(
    option_index: int = Form(...),
    current_index: int = Form(...),
    session: QuizSession = Depends(get_quiz_session),
):
    # A resubmitted form for an earlier question is dropped.
    if (
        session.status == Status.ACTIVE
        and current_index == session.current_index
        and 0 <= option_index < len(session.options)
    ):
        session.check_answer(session.options[option_index], current_index)
    return RedirectResponse(url="/quiz", status_code=302)


@router.post("/speak", response_class=RedirectResponse)
async def speak_page(session: QuizSession = Depends(get_quiz_session)):
    session.speak_current()
    return RedirectResponse(url="/quiz", status_code=302)


@router.get("/result", response_class=HTMLResponse)
async def result_page(request: Request, session: QuizSession = Depends(get_quiz_session)):
    if session.status == Status.ACTIVE:
        return RedirectResponse(url="/quiz", status_code=302)
    if session.status == Status.SETUP:
        return RedirectResponse(url="/", status_code=302)
    return app_globals.templates.TemplateResponse(
        request, "result.html", {"result": session.result()}
    )


@router.post("/restart")
async def restart_quiz(
    request: Request,
    session: QuizSession = Depends(get_quiz_session),
    store: InputStore = Depends(get_input_store),
    vocab: VocabularyManager = Depends(get_vocab_manager),
):
    raw_input = store.load()
    try:
        session.start(raw_input)
    except (ParseError, InsufficientDataError) as e:
        session.return_to_setup()
        return _render_setup(request, raw_input, vocab, session.mode, str(e), 400)
    return RedirectResponse(url="/quiz", status_code=302)


@router.post("/setup", response_class=RedirectResponse)
async def back_to_setup(session: QuizSession = Depends(get_quiz_session)):
    session.return_to_setup()
    return RedirectResponse(url="/", status_code=302)


# --- JSON API ---
@router.get("/api/topics")
async def get_topics(vocab: VocabularyManager = Depends(get_vocab_manager)):
    return vocab.get_topics()


@router.get("/api/topics/{topic}")
async def get_topic_words(topic: str, vocab: VocabularyManager = Depends(get_vocab_manager)):
    words = vocab.get_words(topic)
    if not words:
        return _error(f"Unknown preset: {topic}", 404)
    return words


@router.get("/api/state")
async def get_state(session: QuizSession = Depends(get_quiz_session)):
    return session.snapshot()


@router.post("/api/start")
async def api_start(
    body: StartRequest,
    session: QuizSession = Depends(get_quiz_session),
    store: InputStore = Depends(get_input_store),
):
    if body.raw_input is None:
        raw_input = store.load()
    else:
        raw_input = body.raw_input
        store.save(raw_input)
    try:
        return session.start(raw_input, body.mode)
    except (ParseError, InsufficientDataError) as e:
        return _error(str(e), 400)


@router.post("/api/answer")
async def api_answer(body: AnswerRequest, session: QuizSession = Depends(get_quiz_session)):
    if session.status != Status.ACTIVE:
        return _error(f"Cannot answer while {session.status.value}.", 409)
    if body.current_index != session.current_index:
        return _error(f"Question {body.current_index} is not the current one.", 409)
    if not (0 <= body.option_index < len(session.options)):
        return _error("Invalid option", 400)
    session.check_answer(session.options[body.option_index], body.current_index)
    return session.snapshot()


@router.post("/api/speak")
async def api_speak(session: QuizSession = Depends(get_quiz_session)):
    return {"spoken": session.speak_current()}


@router.get("/api/result")
async def api_result(session: QuizSession = Depends(get_quiz_session)):
    try:
        return session.result()
    except QuizStateError as e:
        return _error(str(e), 409)


@router.post("/api/reset")
async def api_reset(session: QuizSession = Depends(get_quiz_session)):
    return session.return_to_setup()
