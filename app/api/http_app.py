from __future__ import annotations

from contextlib import asynccontextmanager
from collections.abc import Awaitable, Callable
import logging
from typing import Any

from fastapi import Body, Cookie, Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from app.api.handlers.announcements import (
    create_announcement_handler,
    delete_announcement_handler,
    list_announcements_handler,
    update_announcement_handler,
)
from app.api.handlers.deps import ApiDeps
from app.api.handlers.rubric import list_rubric_handler, update_rubric_handler
from app.api.handlers.scores import (
    get_board_handler,
    get_team_score_handler,
    save_score_handler,
    update_team_status_handler,
)
from app.api.handlers.sessions import (
    SESSION_COOKIE_MAX_AGE_SECONDS,
    SESSION_COOKIE_NAME,
    SESSION_HEADER_NAME,
    create_session_handler,
    join_session_handler,
    resolve_session_key,
)
from app.api.handlers.settings import get_settings_handler, update_settings_handler
from app.api.handlers.teams import create_team_handler, delete_team_handler, list_teams_handler, update_team_handler
from app.api.schemas import (
    AnnouncementRequest,
    AnnouncementResponse,
    BoardResponse,
    ErrorResponse,
    EventSettingsResponse,
    HealthResponse,
    ReadyResponse,
    RubricCategoryResponse,
    SessionResponse,
    SuccessResponse,
    TeamRequest,
    TeamResponse,
    TeamScoreResponse,
    TeamStatusRequest,
    TeamStatusResponse,
    UpdateAnnouncementRequest,
    UpdateRubricRequest,
    UpdateSettingsRequest,
)
from app.domain.error_taxonomy import client_messages, http_status_for, resolve_error_code
from app.domain.errors import DomainError

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def _error_response(status_code: int, errors: list[str]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(errors=errors).model_dump())


def _set_session_cookie(response: Response, session_key: str) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        session_key,
        max_age=SESSION_COOKIE_MAX_AGE_SECONDS,
        httponly=False,
        samesite="lax",
        path="/",
    )


def build_app(
    role: str,
    run_id: str,
    api_deps: ApiDeps | None = None,
    on_startup: Callable[[], Awaitable[None]] | None = None,
    on_shutdown: Callable[[], Awaitable[None]] | None = None,
) -> FastAPI:
    logger = logging.getLogger("runtime")
    api_logger = logging.getLogger("api")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        del app
        logger.info(
            "role started",
            extra={"role": role, "service": role, "run_id": run_id},
        )

        if on_startup is not None:
            await on_startup()

        yield

        if on_shutdown is not None:
            await on_shutdown()

        logger.info(
            "role stopped",
            extra={"role": role, "service": role, "run_id": run_id},
        )

    app = FastAPI(title="vibetracker", version="0.1.0", lifespan=lifespan)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        code = resolve_error_code(exc)
        status_code = http_status_for(code)
        if status_code >= 500:
            api_logger.error(
                "request failed",
                exc_info=exc,
                extra={"error_code": code, "method": request.method, "path": request.url.path},
            )
        return _error_response(status_code, client_messages(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        del request
        errors = []
        for item in exc.errors():
            location = ".".join(str(part) for part in item.get("loc", ()) if part != "body")
            errors.append(f"{location}: {item.get('msg', 'invalid value')}" if location else item.get("msg", ""))
        return _error_response(400, errors or ["Invalid request"])

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        api_logger.error(
            "unhandled error",
            exc_info=exc,
            extra={"error_code": "internal_error", "method": request.method, "path": request.url.path},
        )
        return _error_response(500, client_messages(exc))

    def _deps() -> ApiDeps:
        if api_deps is None:
            raise HTTPException(status_code=503, detail="api dependencies are not available")
        return api_deps

    async def session_key_dependency(
        header_key: str | None = Header(default=None, alias=SESSION_HEADER_NAME),
        cookie_key: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    ) -> str:
        return await resolve_session_key(header_key=header_key, cookie_key=cookie_key, api_deps=_deps())

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", role=role, mode="api")

    @app.get("/ready", response_model=ReadyResponse, tags=["System"])
    async def ready() -> ReadyResponse:
        store_name = type(api_deps.store).__name__ if api_deps is not None else "unavailable"
        return ReadyResponse(status="ready", role=role, mode="api", store=store_name)

    @app.post(
        "/api/sessions",
        status_code=201,
        response_model=SessionResponse,
        responses=ERROR_RESPONSES,
        tags=["Sessions"],
    )
    async def create_session(response: Response) -> SessionResponse:
        session = await create_session_handler(api_deps=_deps())
        _set_session_cookie(response, session.session_key)
        return session

    @app.get("/api/sessions/{key}", response_model=SessionResponse, responses=ERROR_RESPONSES, tags=["Sessions"])
    async def join_session(key: str, response: Response) -> SessionResponse:
        session = await join_session_handler(raw_key=key, api_deps=_deps())
        _set_session_cookie(response, session.session_key)
        return session

    @app.get("/api/settings", response_model=EventSettingsResponse, responses=ERROR_RESPONSES, tags=["Settings"])
    async def get_settings(session_key: str = Depends(session_key_dependency)) -> EventSettingsResponse:
        return await get_settings_handler(session_key=session_key, api_deps=_deps())

    @app.put("/api/settings", response_model=EventSettingsResponse, responses=ERROR_RESPONSES, tags=["Settings"])
    async def update_settings(
        request: UpdateSettingsRequest,
        session_key: str = Depends(session_key_dependency),
    ) -> EventSettingsResponse:
        return await update_settings_handler(session_key=session_key, request=request, api_deps=_deps())

    @app.get("/api/teams", response_model=list[TeamResponse], responses=ERROR_RESPONSES, tags=["Teams"])
    async def list_teams(session_key: str = Depends(session_key_dependency)) -> list[TeamResponse]:
        return await list_teams_handler(session_key=session_key, api_deps=_deps())

    @app.post(
        "/api/teams",
        status_code=201,
        response_model=TeamResponse,
        responses=ERROR_RESPONSES,
        tags=["Teams"],
    )
    async def create_team(request: TeamRequest, session_key: str = Depends(session_key_dependency)) -> TeamResponse:
        return await create_team_handler(session_key=session_key, request=request, api_deps=_deps())

    @app.put("/api/teams/{team_id}", response_model=TeamResponse, responses=ERROR_RESPONSES, tags=["Teams"])
    async def update_team(
        team_id: str,
        request: TeamRequest,
        session_key: str = Depends(session_key_dependency),
    ) -> TeamResponse:
        return await update_team_handler(session_key=session_key, team_id=team_id, request=request, api_deps=_deps())

    @app.delete("/api/teams/{team_id}", response_model=SuccessResponse, responses=ERROR_RESPONSES, tags=["Teams"])
    async def delete_team(team_id: str, session_key: str = Depends(session_key_dependency)) -> SuccessResponse:
        return await delete_team_handler(session_key=session_key, team_id=team_id, api_deps=_deps())

    @app.get(
        "/api/rubric",
        response_model=list[RubricCategoryResponse],
        responses=ERROR_RESPONSES,
        tags=["Rubric"],
    )
    async def list_rubric(session_key: str = Depends(session_key_dependency)) -> list[RubricCategoryResponse]:
        return await list_rubric_handler(session_key=session_key, api_deps=_deps())

    @app.put(
        "/api/rubric",
        response_model=list[RubricCategoryResponse],
        responses=ERROR_RESPONSES,
        tags=["Rubric"],
    )
    async def update_rubric(
        request: UpdateRubricRequest,
        session_key: str = Depends(session_key_dependency),
    ) -> list[RubricCategoryResponse]:
        return await update_rubric_handler(session_key=session_key, request=request, api_deps=_deps())

    @app.get("/api/scores", response_model=BoardResponse, responses=ERROR_RESPONSES, tags=["Scores"])
    async def get_board(session_key: str = Depends(session_key_dependency)) -> BoardResponse:
        return await get_board_handler(session_key=session_key, api_deps=_deps())

    @app.get("/api/scores/{team_id}", response_model=TeamScoreResponse, responses=ERROR_RESPONSES, tags=["Scores"])
    async def get_team_score(team_id: str, session_key: str = Depends(session_key_dependency)) -> TeamScoreResponse:
        return await get_team_score_handler(session_key=session_key, team_id=team_id, api_deps=_deps())

    @app.put("/api/scores/{team_id}", response_model=TeamScoreResponse, responses=ERROR_RESPONSES, tags=["Scores"])
    async def save_score(
        team_id: str,
        payload: dict[str, Any] = Body(default={}),  # noqa: B008
        session_key: str = Depends(session_key_dependency),
    ) -> TeamScoreResponse:
        return await save_score_handler(session_key=session_key, team_id=team_id, payload=payload, api_deps=_deps())

    @app.patch(
        "/api/scores/{team_id}/status",
        response_model=TeamStatusResponse,
        responses=ERROR_RESPONSES,
        tags=["Scores"],
    )
    async def update_team_status(
        team_id: str,
        request: TeamStatusRequest,
        session_key: str = Depends(session_key_dependency),
    ) -> TeamStatusResponse:
        return await update_team_status_handler(
            session_key=session_key,
            team_id=team_id,
            request=request,
            api_deps=_deps(),
        )

    @app.get(
        "/api/announcements",
        response_model=list[AnnouncementResponse],
        responses=ERROR_RESPONSES,
        tags=["Announcements"],
    )
    async def list_announcements(
        published: bool | None = Query(default=None),
        session_key: str = Depends(session_key_dependency),
    ) -> list[AnnouncementResponse]:
        return await list_announcements_handler(session_key=session_key, published=published, api_deps=_deps())

    @app.post(
        "/api/announcements",
        status_code=201,
        response_model=AnnouncementResponse,
        responses=ERROR_RESPONSES,
        tags=["Announcements"],
    )
    async def create_announcement(
        request: AnnouncementRequest,
        session_key: str = Depends(session_key_dependency),
    ) -> AnnouncementResponse:
        return await create_announcement_handler(session_key=session_key, request=request, api_deps=_deps())

    @app.put(
        "/api/announcements/{announcement_id}",
        response_model=AnnouncementResponse,
        responses=ERROR_RESPONSES,
        tags=["Announcements"],
    )
    async def update_announcement(
        announcement_id: str,
        request: UpdateAnnouncementRequest,
        session_key: str = Depends(session_key_dependency),
    ) -> AnnouncementResponse:
        return await update_announcement_handler(
            session_key=session_key,
            announcement_id=announcement_id,
            request=request,
            api_deps=_deps(),
        )

    @app.delete(
        "/api/announcements/{announcement_id}",
        response_model=SuccessResponse,
        responses=ERROR_RESPONSES,
        tags=["Announcements"],
    )
    async def delete_announcement(
        announcement_id: str,
        session_key: str = Depends(session_key_dependency),
    ) -> SuccessResponse:
        return await delete_announcement_handler(
            session_key=session_key,
            announcement_id=announcement_id,
            api_deps=_deps(),
        )

    return app
