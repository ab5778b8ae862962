from __future__ import annotations

from dataclasses import dataclass

from app.domain.contracts import SessionedStore
from app.domain.use_cases.scoreboard import ScoreBoardService
from app.settings import RuntimeSettings


@dataclass(frozen=True)
class ApiDeps:
    store: SessionedStore
    scoreboard: ScoreBoardService
    settings: RuntimeSettings
