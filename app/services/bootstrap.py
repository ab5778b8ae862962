from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from app.api.handlers.deps import ApiDeps
from app.domain.contracts import SessionedStore
from app.domain.use_cases.scoreboard import ScoreBoardService
from app.repositories.postgres import AsyncpgPoolManager, PostgresSessionedStore
from app.repositories.stub import InMemorySessionedStore
from app.settings import RuntimeSettings, runtime_settings_from_env


@dataclass
class RuntimeContainer:
    settings: RuntimeSettings
    store: SessionedStore
    scoreboard: ScoreBoardService
    api_deps: ApiDeps
    on_startup: Callable[[], Awaitable[None]] | None
    on_shutdown: Callable[[], Awaitable[None]] | None


def build_runtime_container(settings: RuntimeSettings | None = None) -> RuntimeContainer:
    settings = settings if settings is not None else runtime_settings_from_env()
    on_startup: Callable[[], Awaitable[None]] | None = None
    on_shutdown: Callable[[], Awaitable[None]] | None = None
    store: SessionedStore
    if settings.database_url:
        pool_manager = AsyncpgPoolManager(dsn=settings.database_url)
        store = PostgresSessionedStore(pool_manager=pool_manager)
        on_startup = pool_manager.startup
        on_shutdown = pool_manager.shutdown
    else:
        store = InMemorySessionedStore()
    scoreboard = ScoreBoardService(store=store)
    api_deps = ApiDeps(store=store, scoreboard=scoreboard, settings=settings)

    return RuntimeContainer(
        settings=settings,
        store=store,
        scoreboard=scoreboard,
        api_deps=api_deps,
        on_startup=on_startup,
        on_shutdown=on_shutdown,
    )
