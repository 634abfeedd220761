from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from .errors import InsufficientFunds
from .models import Team, Upgrade

_log = logging.getLogger("gridiron.economy")


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    kind: str
    amount: int
    balance_after: int
    week: int
    memo: str = ""


@dataclass(slots=True)
class EconomyLedger:
    balance: int = 0
    entries: list[LedgerEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.balance < 0:
            raise ValueError("Training point balance cannot start negative.")

    def can_afford(self, cost: int) -> bool:
        return 0 <= cost <= self.balance

    def _record(self, kind: str, amount: int, week: int, memo: str) -> None:
        self.entries.append(LedgerEntry(kind=kind, amount=amount, balance_after=self.balance, week=week, memo=memo))

    def debit(self, cost: int, memo: str = "", week: int = 0) -> int:
        if cost < 0:
            raise ValueError("Debit amount must be non-negative.")
        if not self.can_afford(cost):
            raise InsufficientFunds(cost, self.balance)
        self.balance -= cost
        self._record("debit", cost, week, memo)
        return self.balance

    def credit(self, amount: int, memo: str = "", week: int = 0) -> int:
        if amount < 0:
            raise ValueError("Credit amount must be non-negative.")
        self.balance += amount
        self._record("credit", amount, week, memo)
        return self.balance

    @contextmanager
    def _transaction(self, team: Team) -> Iterator[None]:
        # Snapshot everything a purchase can touch; restore it if any step fails.
        balance = self.balance
        entry_count = len(self.entries)
        team_trail = len(team.applied_upgrades)
        player_trails = {p.player_id: len(p.applied_upgrades) for p in team.all_players()}
        try:
            yield
        except Exception:
            self.balance = balance
            del self.entries[entry_count:]
            del team.applied_upgrades[team_trail:]
            for player in team.all_players():
                del player.applied_upgrades[player_trails.get(player.player_id, 0):]
            team.training_points = balance
            raise

    def purchase(self, upgrade: Upgrade, team: Team, target_player_id: int | None = None, week: int = 1) -> int:
        if not self.can_afford(upgrade.cost):
            raise InsufficientFunds(upgrade.cost, self.balance)
        with self._transaction(team):
            team.apply_upgrade(upgrade, target_player_id, week=week)
            self.debit(upgrade.cost, memo=upgrade.name, week=week)
            team.training_points = self.balance
        _log.info("Purchased %s for %d TP (balance %d)", upgrade.name, upgrade.cost, self.balance)
        return self.balance
