"""
FastAPI Application - REST API over the session manager.

Endpoints:
    GET    /api/v1/health                     Liveness and version
    GET    /api/v1/games/types                Registered variants
    POST   /api/v1/games                      Create a game
    GET    /api/v1/games/{id}                 Get game state
    DELETE /api/v1/games/{id}                 End a game
    POST   /api/v1/games/{id}/players         Seat a human player
    POST   /api/v1/games/{id}/bots            Seat a bot
    POST   /api/v1/games/{id}/start           Start the game
    POST   /api/v1/games/{id}/moves           Submit a move
    POST   /api/v1/games/{id}/bot-turn        Let bot seats play
    POST   /api/v1/games/{id}/timeout         Play a timeout move for a player

Errors use ErrorResponse: 404 unknown game, 409 invalid state,
422 rejected move, unknown game type or bot misconfiguration.
"""

from typing import Optional


def create_app(manager=None, settings=None):
    """
    Create the FastAPI application.

    Args:
        manager: Optional GameSessionManager (creates one if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Request
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .. import __version__
    from ..bots import get_available_difficulties
    from ..config import Settings
    from ..engine_core.move import Move
    from ..errors import (
        TurnplayError,
        GameNotFoundError,
        InvalidStateError,
        MoveRejectedError,
        UnknownGameTypeError,
        BotConfigurationError,
    )
    from ..games.registry import get_game_metadata, list_game_types
    from ..session import GameSessionManager
    from .schemas import (
        # Request models
        CreateGameRequest,
        JoinGameRequest,
        AddBotRequest,
        MoveRequest,
        TimeoutRequest,
        # Response models
        ErrorResponse,
        HealthResponse,
        GameTypesResponse,
        GameTypeInfo,
        GameStateResponse,
        TimeoutResponse,
        EndGameResponse,
        # Enums
        ErrorCode,
    )

    settings = settings or Settings.from_env()
    manager = manager or GameSessionManager(settings=settings)

    app = FastAPI(
        title="Turnplay API",
        description="Turn-based multiplayer games with bot opponents and turn timeouts.",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.manager = manager
    app.state.settings = settings

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_codes = {
        GameNotFoundError: 404,
        InvalidStateError: 409,
        MoveRejectedError: 422,
        UnknownGameTypeError: 422,
        BotConfigurationError: 422,
    }

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
            ).model_dump(mode="json"),
        )

    @app.exception_handler(TurnplayError)
    async def handle_turnplay_error(request: Request, exc: TurnplayError) -> JSONResponse:
        status_code = next(
            (code for cls, code in status_codes.items() if isinstance(exc, cls)), 400
        )
        body = exc.to_dict()
        known = {code.value for code in ErrorCode}
        error_code = body["error_code"] if body["error_code"] in known else ErrorCode.INTERNAL_ERROR
        return make_error_response(ErrorCode(error_code), body["error"], status_code, body["details"])

    errors = {
        404: {"model": ErrorResponse, "description": "Game not found"},
        409: {"model": ErrorResponse, "description": "Invalid state"},
        422: {"model": ErrorResponse, "description": "Rejected request"},
    }

    # =========================================================================
    # Meta
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Meta"])
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__, environment=settings.env)

    @app.get(
        "/api/v1/games/types",
        response_model=GameTypesResponse,
        tags=["Meta"],
        summary="List registered game types",
    )
    async def game_types() -> GameTypesResponse:
        infos = []
        for game_type in list_game_types():
            meta = get_game_metadata(game_type)
            infos.append(GameTypeInfo(
                **meta.to_dict(),
                difficulties=get_available_difficulties(game_type),
            ))
        return GameTypesResponse(game_types=infos)

    # =========================================================================
    # Lobby
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameStateResponse,
        status_code=201,
        responses=errors,
        tags=["Games"],
        summary="Create a new game",
    )
    async def create_game(request: CreateGameRequest):
        try:
            state = await manager.create_game(
                request.game_type, request.game_id, **request.engine_options()
            )
        except (TypeError, ValueError) as e:
            # Option not accepted by this variant (e.g. mode for tic_tac_toe)
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e), status_code=422)
        return GameStateResponse.from_state(state)

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameStateResponse,
        responses=errors,
        tags=["Games"],
        summary="Get game state",
    )
    async def get_game(game_id: str) -> GameStateResponse:
        return GameStateResponse.from_state(await manager.get_state(game_id))

    @app.delete(
        "/api/v1/games/{game_id}",
        response_model=EndGameResponse,
        tags=["Games"],
        summary="End a game",
    )
    async def end_game(game_id: str) -> EndGameResponse:
        success = await manager.end_game(game_id)
        return EndGameResponse(success=success, game_id=game_id)

    @app.post(
        "/api/v1/games/{game_id}/players",
        response_model=GameStateResponse,
        responses=errors,
        tags=["Lobby"],
        summary="Seat a human player",
    )
    async def join_game(game_id: str, request: JoinGameRequest) -> GameStateResponse:
        state = await manager.add_player(game_id, request.player_id, request.name)
        return GameStateResponse.from_state(state)

    @app.post(
        "/api/v1/games/{game_id}/bots",
        response_model=GameStateResponse,
        responses=errors,
        tags=["Lobby"],
        summary="Seat a bot",
    )
    async def add_bot(game_id: str, request: AddBotRequest) -> GameStateResponse:
        state = await manager.add_bot(game_id, request.difficulty.value, request.name)
        return GameStateResponse.from_state(state)

    @app.post(
        "/api/v1/games/{game_id}/start",
        response_model=GameStateResponse,
        responses=errors,
        tags=["Lobby"],
        summary="Start the game",
    )
    async def start_game(game_id: str) -> GameStateResponse:
        return GameStateResponse.from_state(await manager.start_game(game_id))

    # =========================================================================
    # Game Loop
    # =========================================================================

    @app.post(
        "/api/v1/games/{game_id}/moves",
        response_model=GameStateResponse,
        responses=errors,
        tags=["Game Loop"],
        summary="Submit a move",
    )
    async def submit_move(game_id: str, request: MoveRequest) -> GameStateResponse:
        move = Move(player_id=request.player_id, type=request.type, data=request.data)
        return GameStateResponse.from_state(await manager.submit_move(game_id, move))

    @app.post(
        "/api/v1/games/{game_id}/bot-turn",
        response_model=GameStateResponse,
        responses=errors,
        tags=["Game Loop"],
        summary="Let every bot that may move play",
    )
    async def bot_turn(game_id: str) -> GameStateResponse:
        return GameStateResponse.from_state(await manager.run_bot_turns(game_id))

    @app.post(
        "/api/v1/games/{game_id}/timeout",
        response_model=TimeoutResponse,
        responses=errors,
        tags=["Game Loop"],
        summary="Play a default move for a player who ran out of time",
    )
    async def timeout(game_id: str, request: TimeoutRequest) -> TimeoutResponse:
        applied = await manager.submit_timeout_move(game_id, request.player_id)
        state = await manager.get_state(game_id)
        return TimeoutResponse(
            game_id=game_id,
            player_id=request.player_id,
            applied=applied,
            state=GameStateResponse.from_state(state),
        )

    return app
