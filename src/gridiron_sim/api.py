from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock
from typing import Any, Callable

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .errors import CorruptState, GridironError, InvalidPhaseTransition
from .season import SeasonController

_log = logging.getLogger("gridiron.api")


class SetupSelection(BaseModel):
    offense_style: str | None = None
    defense_style: str | None = None
    difficulty: str | None = None


class PurchaseSelection(BaseModel):
    upgrade_id: int
    target_player_id: int | None = None


class ScoutSelection(BaseModel):
    report: str


class TacticsChoice(BaseModel):
    offensive_tactic: str | None = None
    defensive_tactic: str | None = None


class SimService:
    def __init__(self, data_root: Path | None = None, seed: int | None = None) -> None:
        self.data_root = data_root or Path(__file__).resolve().parents[2]
        self.state_path = self.data_root / "season_state.json"
        self.last_load_error: str = ""
        self._seed = seed
        self.controller = self._load_controller()
        self._lock = Lock()

    def _load_controller(self) -> SeasonController:
        if not self.state_path.exists():
            return SeasonController(seed=self._seed)
        try:
            return SeasonController.load(self.state_path)
        except CorruptState as exc:
            self.last_load_error = exc.message
            _log.warning("Starting a fresh season; saved state rejected: %s", exc.message)
            return SeasonController(seed=self._seed)

    def _save(self) -> None:
        try:
            self.controller.save(self.state_path)
        except OSError as exc:
            _log.warning("Could not save season state (%s)", exc)

    def state(self) -> dict[str, Any]:
        snapshot = self.controller.snapshot()
        snapshot["last_load_error"] = self.last_load_error
        return snapshot

    def run(self, action: Callable[[SeasonController], object]) -> dict[str, Any]:
        try:
            action(self.controller)
        except InvalidPhaseTransition as exc:
            raise HTTPException(status_code=409, detail=exc.to_dict()) from exc
        except GridironError as exc:
            raise HTTPException(status_code=400, detail=exc.to_dict()) from exc
        self._save()
        return self.state()

    def reset(self) -> dict[str, Any]:
        self.controller = SeasonController(seed=self._seed)
        self.last_load_error = ""
        self._save()
        return self.state()

    def standings(self) -> dict[str, Any]:
        return {
            "week": self.controller.current_week,
            "divisions": {
                division: [
                    {
                        "team": rec.team_name,
                        "record": rec.record,
                        "pf": rec.points_for,
                        "pa": rec.points_against,
                        "streak": rec.streak,
                    }
                    for rec in records
                ]
                for division, records in self.controller.get_division_standings().items()
            },
        }


service = SimService()
app = FastAPI(title="Gridiron Autobattler API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/state")
def state() -> dict[str, Any]:
    with service._lock:
        return service.state()


@app.get("/api/standings")
def standings() -> dict[str, Any]:
    with service._lock:
        return service.standings()


@app.post("/api/setup")
def setup(payload: SetupSelection) -> dict[str, Any]:
    with service._lock:
        return service.run(
            lambda c: c.configure(
                offense_style=payload.offense_style,
                defense_style=payload.defense_style,
                difficulty=payload.difficulty,
            )
        )


@app.post("/api/begin")
def begin() -> dict[str, Any]:
    with service._lock:
        return service.run(lambda c: c.begin_season())


@app.post("/api/purchase")
def purchase(payload: PurchaseSelection) -> dict[str, Any]:
    with service._lock:
        return service.run(lambda c: c.purchase_upgrade(payload.upgrade_id, payload.target_player_id))


@app.post("/api/refresh")
def refresh() -> dict[str, Any]:
    with service._lock:
        return service.run(lambda c: c.refresh_offers())


@app.post("/api/scout")
def scout(payload: ScoutSelection) -> dict[str, Any]:
    with service._lock:
        return service.run(lambda c: c.scout(payload.report))


@app.post("/api/tactics/open")
def open_tactics() -> dict[str, Any]:
    with service._lock:
        return service.run(lambda c: c.proceed_to_tactics())


@app.post("/api/tactics")
def select_tactics(payload: TacticsChoice) -> dict[str, Any]:
    with service._lock:
        return service.run(lambda c: c.select_tactics(payload.offensive_tactic, payload.defensive_tactic))


@app.post("/api/tactics/back")
def back_to_training() -> dict[str, Any]:
    with service._lock:
        return service.run(lambda c: c.back_to_management())


@app.post("/api/match/start")
def start_match() -> dict[str, Any]:
    with service._lock:
        return service.run(lambda c: c.start_match())


@app.post("/api/match/finish")
def finish_match() -> dict[str, Any]:
    with service._lock:
        return service.run(lambda c: c.finish_match())


@app.post("/api/continue")
def continue_season() -> dict[str, Any]:
    with service._lock:
        return service.run(lambda c: c.continue_season())


@app.post("/api/end-season")
def end_season() -> dict[str, Any]:
    with service._lock:
        return service.run(lambda c: c.end_season())


@app.post("/api/new-run")
def new_run() -> dict[str, Any]:
    with service._lock:
        return service.run(lambda c: c.new_run())


@app.post("/api/reset")
def reset() -> dict[str, Any]:
    with service._lock:
        return service.reset()
