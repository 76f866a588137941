# Area: HTTP
"""
match_orchestrator.http_app — HTTP surface
==========================================

FastAPI application exposing the orchestrator as JSON over HTTP.

Request bodies are pydantic models with camelCase aliases. Domain
errors render as {"error": code, ...details} with their mapped status;
malformed bodies become 400 invalid_request; anything else is a 500
internal_error with a generic message.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Literal, Optional

from fastapi import FastAPI, Query, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ._shared.clock import to_iso
from ._shared.logging_config import log_domain_error, log_unexpected_error
from .errors import MatchOrchestratorError
from .orchestrator import MatchOrchestrator

logger = logging.getLogger("match_orchestrator.http")

SERVICE_NAME = "match-orchestrator"
SERVICE_SUMMARY = "Room lifecycle, skill-based matchmaking, and competitive ladders"

ROUTES: List[Dict[str, str]] = [
    {"method": "POST", "path": "/rooms", "description": "Create a lobby room"},
    {"method": "POST", "path": "/rooms/{roomId}/join", "description": "Join a room"},
    {"method": "POST", "path": "/rooms/{roomId}/ready", "description": "Toggle participant readiness"},
    {"method": "POST", "path": "/rooms/{roomId}/countdown", "description": "Start or reset the countdown"},
    {"method": "GET", "path": "/rooms", "description": "List all rooms"},
    {"method": "GET", "path": "/rooms/{roomId}", "description": "Inspect a room"},
    {"method": "GET", "path": "/puzzles", "description": "List puzzle catalog entries"},
    {"method": "GET", "path": "/puzzles/{puzzleId}", "description": "Inspect a puzzle catalog entry"},
    {"method": "POST", "path": "/matchmaking/enqueue", "description": "Enter a matchmaking queue"},
    {"method": "POST", "path": "/matchmaking/tickets/{ticketId}/cancel", "description": "Cancel a searching ticket"},
    {"method": "GET", "path": "/matchmaking/snapshot", "description": "Queue state across all modes"},
    {"method": "GET", "path": "/competitive/dashboard", "description": "Profile, ticket, and queue data for a handle"},
    {"method": "POST", "path": "/competitive/matches/{roomId}/result", "description": "Apply a match result"},
    {"method": "GET", "path": "/analytics/events", "description": "Buffered analytics events"},
]


# ══════════════════════════════════════════════════════════════
# REQUEST BODIES
# ══════════════════════════════════════════════════════════════


class _CamelBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateRoomRequest(_CamelBody):
    host_handle: Optional[str] = None
    mode: Optional[str] = None
    puzzle_id: Optional[str] = None
    host_user_id: Optional[str] = None


class JoinRoomRequest(_CamelBody):
    handle: Optional[str] = None
    role: Optional[str] = None
    user_id: Optional[str] = None


class ReadyRequest(_CamelBody):
    participant_id: Optional[str] = None
    ready: Optional[bool] = None


class CountdownRequest(_CamelBody):
    action: Optional[str] = None


class EnqueueRequest(_CamelBody):
    handle: Optional[str] = None
    mode: Optional[str] = None
    party_handles: List[str] = Field(default_factory=list)


class MatchResultRequest(_CamelBody):
    winner_handle: Optional[str] = None
    loser_handle: Optional[str] = None
    mode: Optional[str] = None
    puzzle_tier: Optional[Literal["standard", "advanced", "elite"]] = None
    referee_confidence: Optional[float] = Field(default=None, ge=0, le=1)
    time_remaining_seconds: Optional[float] = None
    duration_seconds: Optional[float] = None
    puzzle_id: Optional[str] = None


# ══════════════════════════════════════════════════════════════
# APPLICATION
# ══════════════════════════════════════════════════════════════


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(MatchOrchestratorError)
    async def domain_error(request: Request, exc: MatchOrchestratorError) -> JSONResponse:
        log_domain_error(exc, request.url.path)
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning(f"Invalid request body on {request.url.path}")
        return JSONResponse(
            status_code=400,
            content={"error": "invalid_request", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception) -> JSONResponse:
        log_unexpected_error(exc, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "internal_error", "message": "Unexpected server error"},
        )


def create_app(
    orchestrator: Optional[MatchOrchestrator] = None,
    config: Optional[Dict[str, Any]] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        orchestrator: State owner (a fresh one by default)
        config: Service config; reads region and enable_cors

    Returns:
        Configured FastAPI app with the orchestrator on app.state
    """
    config = config or {}
    orchestrator = orchestrator or MatchOrchestrator()
    region = config.get("region", "local")

    app = FastAPI(title=SERVICE_NAME, description=SERVICE_SUMMARY)
    app.state.orchestrator = orchestrator
    app.state.config = config

    if config.get("enable_cors", True):
        app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)",
            extra={"status_code": response.status_code},
        )
        return response

    _install_error_handlers(app)

    # ── Service harness ──────────────────────────────────────

    @app.get("/")
    def banner() -> Dict[str, Any]:
        return {"message": f"{SERVICE_NAME} ready", "summary": SERVICE_SUMMARY}

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {
            "service": SERVICE_NAME,
            "status": "ok",
            "region": region,
            "timestamp": to_iso(time.time()),
            "details": {"routeCount": len(ROUTES)},
        }

    @app.get("/routes")
    def routes() -> List[Dict[str, str]]:
        return [{**route, "handledBy": SERVICE_NAME} for route in ROUTES]

    # ── Rooms ────────────────────────────────────────────────

    @app.post("/rooms", status_code=201)
    def create_room(body: Optional[CreateRoomRequest] = None) -> Dict[str, Any]:
        body = body or CreateRoomRequest()
        return orchestrator.create_room(
            host_handle=body.host_handle,
            mode=body.mode,
            puzzle_id=body.puzzle_id,
            host_user_id=body.host_user_id,
        )

    @app.post("/rooms/{room_id}/join")
    def join_room(
        room_id: str, response: Response, body: Optional[JoinRoomRequest] = None
    ) -> Dict[str, Any]:
        body = body or JoinRoomRequest()
        room, joined = orchestrator.join_room(
            room_id, body.handle, role=body.role, user_id=body.user_id
        )
        response.status_code = 201 if joined else 200
        return room

    @app.post("/rooms/{room_id}/ready")
    def toggle_ready(room_id: str, body: Optional[ReadyRequest] = None) -> Dict[str, Any]:
        body = body or ReadyRequest()
        return orchestrator.toggle_ready(room_id, body.participant_id, body.ready)

    @app.post("/rooms/{room_id}/countdown")
    def countdown(room_id: str, body: Optional[CountdownRequest] = None) -> Dict[str, Any]:
        body = body or CountdownRequest()
        return orchestrator.countdown(room_id, body.action)

    @app.get("/rooms")
    def list_rooms() -> Dict[str, Any]:
        return {"rooms": orchestrator.list_rooms()}

    @app.get("/rooms/{room_id}")
    def get_room(room_id: str) -> Dict[str, Any]:
        return orchestrator.get_room(room_id)

    # ── Puzzles ──────────────────────────────────────────────

    @app.get("/puzzles")
    def list_puzzles() -> Dict[str, Any]:
        return {"puzzles": orchestrator.list_puzzles()}

    @app.get("/puzzles/{puzzle_id}")
    def get_puzzle(puzzle_id: str) -> Dict[str, Any]:
        return orchestrator.get_puzzle(puzzle_id)

    # ── Matchmaking ──────────────────────────────────────────

    @app.post("/matchmaking/enqueue", status_code=201)
    def enqueue(body: Optional[EnqueueRequest] = None) -> Dict[str, Any]:
        body = body or EnqueueRequest()
        return orchestrator.enqueue(body.handle, body.mode, body.party_handles)

    @app.post("/matchmaking/tickets/{ticket_id}/cancel")
    def cancel_ticket(ticket_id: str) -> Dict[str, Any]:
        return orchestrator.cancel_ticket(ticket_id)

    @app.get("/matchmaking/snapshot")
    def snapshot() -> Dict[str, Any]:
        return orchestrator.snapshot()

    @app.get("/competitive/dashboard")
    def dashboard(handle: Optional[str] = Query(default=None)) -> Dict[str, Any]:
        return orchestrator.dashboard(handle)

    @app.post("/competitive/matches/{room_id}/result")
    def match_result(room_id: str, body: Optional[MatchResultRequest] = None) -> Dict[str, Any]:
        body = body or MatchResultRequest()
        return orchestrator.apply_match_result(
            room_id,
            body.winner_handle,
            body.loser_handle,
            mode=body.mode,
            puzzle_tier=body.puzzle_tier,
            referee_confidence=body.referee_confidence,
            time_remaining_seconds=body.time_remaining_seconds,
            duration_seconds=body.duration_seconds,
            puzzle_id=body.puzzle_id,
        )

    # ── Observability ────────────────────────────────────────

    @app.get("/analytics/events")
    def analytics_events(event_type: Optional[str] = Query(default=None, alias="type")) -> Dict[str, Any]:
        return {"events": orchestrator.analytics_events(event_type)}

    return app
