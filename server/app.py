from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from wordwizard import GameConfig, GameSession, LeaderboardService
from wordwizard.clients import DreamloClient, RandomWordClient, ThesaurusClient
from wordwizard.events import map_events
from wordwizard.exceptions import SessionNotFoundError, TransportError, ValidationRejection
from wordwizard.settings import (
    configure_logging,
    get_app_settings,
    get_leaderboard_settings,
    get_word_api_settings,
)
from wordwizard.snapshot import serialize_snapshot
from wordwizard.sources import NoSynonyms, SynonymSource

from .registry import SessionRegistry
from .schemas import (
    CreateSessionRequest,
    EventListResponse,
    GuessRequest,
    GuessResponse,
    HintResponse,
    LeaderboardEntryDTO,
    LeaderboardResponse,
    LetterRequest,
    LetterResponse,
    RejectionResponse,
    SessionResponse,
    WordLengthResponse,
)

logger = logging.getLogger(__name__)


def build_registry() -> SessionRegistry:
    """Wire HTTP collaborators from environment settings."""
    word_settings = get_word_api_settings()
    board_settings = get_leaderboard_settings()

    words = RandomWordClient.from_settings(word_settings)
    synonyms: SynonymSource
    if word_settings.thesaurus_api_key is not None:
        synonyms = ThesaurusClient.from_settings(word_settings)
    else:
        logger.warning("No thesaurus API key configured; hints will use first/last letters")
        synonyms = NoSynonyms()

    leaderboard = None
    if board_settings.is_configured:
        leaderboard = LeaderboardService(DreamloClient.from_settings(board_settings))
    else:
        logger.warning("Leaderboard codes not configured; scores will not be submitted")

    config = GameConfig.from_settings(get_app_settings())
    return SessionRegistry(words, synonyms, leaderboard, config)


async def _close_collaborators(registry: SessionRegistry) -> None:
    collaborators = [registry.words, registry.synonyms]
    if registry.leaderboard is not None:
        collaborators.append(registry.leaderboard.transport)
    for collaborator in collaborators:
        aclose = getattr(collaborator, "aclose", None)
        if aclose is not None:
            await aclose()


def create_app(registry: Optional[SessionRegistry] = None) -> FastAPI:
    """Build the API; pass a registry to inject collaborators (tests do)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = registry is None
        app.state.registry = build_registry() if owned else registry
        logger.info("Word Wizard server started")

        yield

        await app.state.registry.close_all()
        if owned:
            await _close_collaborators(app.state.registry)
        logger.info("Word Wizard server stopped")

    app = FastAPI(title="Word Wizard Server", version="0.1.0", lifespan=lifespan)

    @app.exception_handler(ValidationRejection)
    async def rejection_handler(request: Request, exc: ValidationRejection):
        body = RejectionResponse(reason=exc.reason.value, detail=str(exc))
        return JSONResponse(status_code=409, content=body.model_dump())

    @app.exception_handler(SessionNotFoundError)
    async def not_found_handler(request: Request, exc: SessionNotFoundError):
        return JSONResponse(status_code=404, content={"detail": "Session not found"})

    _register_routes(app)
    return app


# ---- Dependencies ----

def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


async def get_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> GameSession:
    return await registry.get(session_id)


def _rejected(reason: str, detail: str) -> JSONResponse:
    body = RejectionResponse(reason=reason, detail=detail)
    return JSONResponse(status_code=409, content=body.model_dump())


def _not_active(session: GameSession) -> JSONResponse:
    return _rejected("not_active", f"Session is {session.phase.value}, not accepting actions")


def _register_routes(app: FastAPI) -> None:

    @app.post("/sessions", response_model=SessionResponse)
    async def create_session(req: CreateSessionRequest, registry: SessionRegistry = Depends(get_registry)):
        session_id, session = await registry.create_session(req.player_name)
        await session.wait_until_settled()
        return SessionResponse(session_id=session_id, snapshot=serialize_snapshot(session))

    @app.get("/sessions/{session_id}")
    async def get_snapshot(session: GameSession = Depends(get_session)):
        return serialize_snapshot(session)

    @app.delete("/sessions/{session_id}")
    async def delete_session(session_id: str, registry: SessionRegistry = Depends(get_registry)):
        if not await registry.close(session_id):
            raise HTTPException(status_code=404, detail="Session not found")
        return {"session_id": session_id, "closed": True}

    @app.post("/sessions/{session_id}/new-game")
    async def new_game(session: GameSession = Depends(get_session)):
        session.start_new_game()
        await session.wait_until_settled()
        return serialize_snapshot(session)

    @app.post("/sessions/{session_id}/guess", response_model=GuessResponse)
    async def guess(req: GuessRequest, session: GameSession = Depends(get_session)):
        result = session.submit_guess(req.guess)
        if result is None:
            return _not_active(session)
        return GuessResponse(
            correct=result.correct,
            score=result.score,
            attempts_left=result.attempts_left,
            phase=result.phase.value,
            revealed_word=result.revealed_word,
        )

    @app.post("/sessions/{session_id}/letter", response_model=LetterResponse)
    async def check_letter(req: LetterRequest, session: GameSession = Depends(get_session)):
        count = session.check_letter(req.letter)
        if count is None:
            return _not_active(session)
        return LetterResponse(letter=req.letter.lower(), count=count, score=session.score)

    @app.post("/sessions/{session_id}/length", response_model=WordLengthResponse)
    async def word_length(session: GameSession = Depends(get_session)):
        length = session.reveal_word_length()
        if length is None:
            return _not_active(session)
        return WordLengthResponse(length=length, score=session.score)

    @app.post("/sessions/{session_id}/hint", response_model=HintResponse)
    async def hint(session: GameSession = Depends(get_session)):
        generation = session.generation
        result = await session.request_hint()
        if result is None:
            if session.generation != generation:
                return _rejected("stale", "The word changed while the hint was loading")
            return _not_active(session)
        return HintResponse(hint=result.text, fallback=result.fallback, score=session.score)

    @app.get("/sessions/{session_id}/events", response_model=EventListResponse)
    async def list_events(
        session_id: str,
        since: int = Query(default=0, ge=0),
        session: GameSession = Depends(get_session),
    ):
        log = session.event_log
        start = max(since, log.dropped)
        return EventListResponse(
            session_id=session_id,
            since=since,
            events=map_events(log.events_since(start), start_index=start),
        )

    @app.get("/leaderboard", response_model=LeaderboardResponse)
    async def leaderboard(
        limit: Optional[int] = Query(default=None, ge=1, le=1000),
        registry: SessionRegistry = Depends(get_registry),
    ):
        if registry.leaderboard is None:
            raise HTTPException(status_code=503, detail="Leaderboard not configured")
        limit = limit or get_leaderboard_settings().limit
        try:
            entries = await registry.leaderboard.top_scores(limit)
        except TransportError as e:
            logger.warning(f"Leaderboard fetch failed: {e}")
            raise HTTPException(status_code=502, detail=f"Error loading leaderboard: {e}")
        return LeaderboardResponse(
            limit=limit,
            entries=[
                LeaderboardEntryDTO(
                    rank=i,
                    name=e.name,
                    score=e.score,
                    seconds=e.seconds,
                    time=e.formatted_time,
                    text=e.text,
                    date=e.date,
                )
                for i, e in enumerate(entries, start=1)
            ],
        )

    @app.get("/")
    async def root():
        return {"name": "Word Wizard Server", "sessions": "/sessions", "leaderboard": "/leaderboard"}


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_app_settings()
    configure_logging(settings.log_level)
    uvicorn.run("server.app:app", host=settings.host, port=settings.port)
