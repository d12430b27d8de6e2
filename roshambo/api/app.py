"""
FastAPI Application - REST API for Roshambo Race front ends.

Endpoints:
    POST   /api/v1/sessions                 Create game session
    GET    /api/v1/sessions                 List active sessions
    GET    /api/v1/sessions/{id}            Get session status
    DELETE /api/v1/sessions/{id}            End session
    GET    /api/v1/sessions/{id}/state      Get game state
    POST   /api/v1/sessions/{id}/actions    Apply one engine action
    POST   /api/v1/sessions/{id}/choices    Answer the pending interaction

A rejected action is a normal 200 response with applied=false and the
unchanged state; only unknown sessions and malformed requests are errors.
"""

from typing import Optional, Union
import logging
import os

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..engine_core.rules import GameRules
from ..session import SessionManager, SetupProgressStore
from .service import APIService
from .schemas import (
    # Request models
    ActionRequest,
    ChoiceRequest,
    CreateSessionRequest,
    # Response models
    ActionResponse,
    ChoiceResponse,
    EndSessionResponse,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    SessionListResponse,
    SessionResponse,
    # Enums
    ErrorCode,
)

logger = logging.getLogger(__name__)

# Environment configuration
ROSHAMBO_ENV = os.getenv("ROSHAMBO_ENV", "development")
ROSHAMBO_STATE_DIR = os.getenv("ROSHAMBO_STATE_DIR", None)
ROSHAMBO_BOARD_SIZE = int(os.getenv("ROSHAMBO_BOARD_SIZE", "64"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Roshambo Race API",
        description="""
Rock-Paper-Scissors board race engine.

## Flow

1. `POST /api/v1/sessions` (optionally with `player_count`)
2. Drive setup and play with `POST /actions`
3. When `current_interaction` is set, answer with `POST /choices`

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `VALIDATION_ERROR` | Request could not be turned into an action |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if service is None:
        session_manager = SessionManager(
            rules=GameRules(board_size=ROSHAMBO_BOARD_SIZE),
            store=SetupProgressStore(state_dir=ROSHAMBO_STATE_DIR),
        )
        service = APIService(session_manager=session_manager)
    api_service = service
    logger.info("Roshambo API starting (env=%s)", ROSHAMBO_ENV)

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(),
        )

    def session_not_found(session_id: str) -> JSONResponse:
        return make_error_response(
            ErrorCode.SESSION_NOT_FOUND,
            f"Session {session_id} not found",
            status_code=404,
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid parameters"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(
        body: Optional[CreateSessionRequest] = None,
    ) -> Union[SessionResponse, JSONResponse]:
        """
        Create a new game session.

        With `player_count` the players, board tokens and decks are
        created right away; otherwise start with a `set_player_count` action.
        """
        try:
            return api_service.create_session(body or CreateSessionRequest())
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the current status of a game session."""
        response = api_service.get_session(session_id)
        if response is None:
            return session_not_found(session_id)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: str = Query("user_ended", description="Reason for ending"),
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get the full game state",
    )
    async def get_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Get the complete game state snapshot."""
        response = api_service.get_state(session_id)
        if response is None:
            return session_not_found(session_id)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/actions",
        response_model=ActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Malformed action"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game"],
        summary="Apply one engine action",
    )
    async def apply_action(
        session_id: str,
        body: ActionRequest,
    ) -> Union[ActionResponse, JSONResponse]:
        """
        Apply one action.

        **Request Body:**
        ```json
        {"action_type": "move_player", "player_id": "...", "spaces": 4}
        ```
        """
        try:
            response = api_service.apply_action(session_id, body)
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e))
        if response is None:
            return session_not_found(session_id)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/choices",
        response_model=ChoiceResponse,
        responses={404: {"model": ErrorResponse, "description": "Session not found"}},
        tags=["Game"],
        summary="Answer the pending interaction",
    )
    async def choose(
        session_id: str,
        body: ChoiceRequest,
    ) -> Union[ChoiceResponse, JSONResponse]:
        """
        Pick one of the pending interaction's options.

        The follow-up the option calls for (drawing, giving a card,
        starting a duel) is applied in the same request. For a duel,
        `opponent_id` picks who to fight.
        """
        response = api_service.choose(session_id, body)
        if response is None:
            return session_not_found(session_id)
        return response

    # =========================================================================
    # System Endpoints
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="roshambo-engine",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Roshambo Race API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn roshambo.api.app:app
app = create_app()
