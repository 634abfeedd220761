from __future__ import annotations

import logging
import random

from .config import OFFER_SET_SIZE, REFRESH_COST
from .economy import EconomyLedger
from .errors import UpgradeNotOffered
from .models import Position, Stat, Team, Upgrade, UpgradeEffect

_log = logging.getLogger("gridiron.catalog")

UPGRADE_POOL: tuple[Upgrade, ...] = (
    Upgrade(1, "Team Speed Training", 15, "team", "offense", UpgradeEffect(Stat.SPEED, 2), "+2 Speed to all offensive players"),
    Upgrade(2, "Defensive Coordination", 20, "team", "defense", UpgradeEffect(Stat.TACKLING, 3), "+3 Tackling to all defensive players"),
    Upgrade(3, "Conditioning Program", 25, "team", "both", UpgradeEffect(Stat.STAMINA, 5), "+5 Stamina to all players"),
    Upgrade(
        4, "Elite QB Training", 45, "player", "offense",
        UpgradeEffect(Stat.PASSING, 8, (Position.QB,)), "+8 Passing accuracy for QB",
    ),
    Upgrade(
        5, "Pass Rush Specialist", 40, "player", "defense",
        UpgradeEffect(Stat.PASS_RUSH, 10, (Position.DE, Position.DT)), "+10 Pass rush for selected DE/DT",
    ),
    Upgrade(
        6, "Receiver Route Package", 35, "player", "offense",
        UpgradeEffect(Stat.ROUTE, 7, (Position.WR, Position.TE)), "+7 Route running for selected WR/TE",
    ),
    Upgrade(7, "Offensive Line Camp", 30, "team", "offense", UpgradeEffect(Stat.BLOCKING, 3), "+3 Blocking to all blockers"),
    Upgrade(8, "Ball Hawk Drills", 30, "team", "defense", UpgradeEffect(Stat.COVERAGE, 3), "+3 Coverage to all defenders in coverage"),
    Upgrade(9, "Weight Room Overhaul", 35, "team", "both", UpgradeEffect(Stat.STRENGTH, 3), "+3 Strength to all linemen"),
    Upgrade(
        10, "Power Running Clinic", 35, "player", "offense",
        UpgradeEffect(Stat.RUSHING, 8, (Position.RB, Position.FB)), "+8 Rushing for selected RB/FB",
    ),
    Upgrade(
        11, "Run Fit Film Study", 30, "player", "defense",
        UpgradeEffect(Stat.RUN_STOP, 6, (Position.DT, Position.LB)), "+6 Run stopping for selected DT/LB",
    ),
    Upgrade(
        12, "Lockdown Coverage Camp", 40, "player", "defense",
        UpgradeEffect(Stat.COVERAGE, 8, (Position.CB, Position.S)), "+8 Coverage for selected CB/S",
    ),
    Upgrade(
        13, "Leadership Retreat", 20, "player", "offense",
        UpgradeEffect(Stat.LEADERSHIP, 10, (Position.QB,)), "+10 Leadership for QB",
    ),
    Upgrade(
        14, "Sure Hands Program", 25, "player", "offense",
        UpgradeEffect(Stat.HANDS, 6, (Position.TE,)), "+6 Hands for selected TE",
    ),
)


def get_upgrade(upgrade_id: int) -> Upgrade | None:
    for upgrade in UPGRADE_POOL:
        if upgrade.upgrade_id == upgrade_id:
            return upgrade
    return None


class UpgradeCatalog:
    """Weekly shop: a small offer set drawn from the full upgrade pool.

    Offers are sampled without replacement inside one offer set. Buying an
    upgrade removes it from the current offer only; it stays in the pool and
    can come back on a later refresh. Each draw is seeded from
    ``(seed, run_number, week, refresh_count)`` so a saved season replays the
    same shop without storing generator state.
    """

    def __init__(
        self,
        seed: int | str = 0,
        run_number: int = 1,
        pool: tuple[Upgrade, ...] = UPGRADE_POOL,
        offer_size: int = OFFER_SET_SIZE,
        refresh_cost: int = REFRESH_COST,
    ) -> None:
        self.seed = seed
        self.run_number = run_number
        self.pool = pool
        self.offer_size = max(1, offer_size)
        self.refresh_cost = refresh_cost
        self.refresh_count = 0
        self.offers: list[Upgrade] = []

    def get_available(self) -> list[Upgrade]:
        return list(self.offers)

    def find_offer(self, upgrade_id: int) -> Upgrade | None:
        for upgrade in self.offers:
            if upgrade.upgrade_id == upgrade_id:
                return upgrade
        return None

    def _sample(self, week: int) -> list[Upgrade]:
        rng = random.Random(f"shop:{self.seed}:{self.run_number}:{week}:{self.refresh_count}")
        size = min(self.offer_size, len(self.pool))
        return rng.sample(list(self.pool), size)

    def restock(self, week: int) -> list[Upgrade]:
        self.refresh_count += 1
        self.offers = self._sample(week)
        _log.debug("Restocked week %d offers: %s", week, [u.name for u in self.offers])
        return self.get_available()

    def refresh(self, ledger: EconomyLedger, week: int, team: Team | None = None) -> list[Upgrade]:
        ledger.debit(self.refresh_cost, memo="Refresh available training", week=week)
        if team is not None:
            team.training_points = ledger.balance
        offers = self.restock(week)
        _log.info("Refreshed offers for %d TP (balance %d)", self.refresh_cost, ledger.balance)
        return offers

    def purchase(
        self,
        upgrade_id: int,
        ledger: EconomyLedger,
        team: Team,
        target_player_id: int | None = None,
        week: int = 1,
    ) -> int:
        upgrade = self.find_offer(upgrade_id)
        if upgrade is None:
            raise UpgradeNotOffered(f"Upgrade {upgrade_id} is not in this week's offers.")
        balance = ledger.purchase(upgrade, team, target_player_id, week=week)
        self.offers.remove(upgrade)
        return balance
