import pytest

from gridiron_sim.app import build_default_team
from gridiron_sim.catalog import UPGRADE_POOL, UpgradeCatalog, get_upgrade
from gridiron_sim.config import OFFER_SET_SIZE, REFRESH_COST
from gridiron_sim.economy import EconomyLedger
from gridiron_sim.errors import InsufficientFunds, UpgradeNotOffered


def test_pool_keeps_wireframe_costs() -> None:
    costs = {u.name: u.cost for u in UPGRADE_POOL}
    assert costs["Team Speed Training"] == 15
    assert costs["Elite QB Training"] == 45
    assert costs["Pass Rush Specialist"] == 40
    assert len({u.upgrade_id for u in UPGRADE_POOL}) == len(UPGRADE_POOL)


def test_restock_is_bounded_and_without_replacement() -> None:
    catalog = UpgradeCatalog(seed=11, run_number=1)
    offers = catalog.restock(week=1)
    assert len(offers) == OFFER_SET_SIZE
    assert len({u.upgrade_id for u in offers}) == OFFER_SET_SIZE


def test_same_seed_same_offers() -> None:
    first = UpgradeCatalog(seed=5, run_number=2).restock(week=4)
    second = UpgradeCatalog(seed=5, run_number=2).restock(week=4)
    assert first == second


def test_refresh_debits_and_replaces_offers() -> None:
    catalog = UpgradeCatalog(seed=3, run_number=1)
    catalog.restock(week=1)
    ledger = EconomyLedger(balance=50)
    team = build_default_team(training_points=50)

    offers = catalog.refresh(ledger, week=1, team=team)
    assert ledger.balance == 50 - REFRESH_COST
    assert team.training_points == ledger.balance
    assert len(offers) == OFFER_SET_SIZE
    assert catalog.refresh_count == 2


def test_refresh_without_funds_changes_nothing() -> None:
    catalog = UpgradeCatalog(seed=3, run_number=1)
    before = catalog.restock(week=1)
    ledger = EconomyLedger(balance=REFRESH_COST - 1)
    with pytest.raises(InsufficientFunds):
        catalog.refresh(ledger, week=1)
    assert catalog.get_available() == before
    assert catalog.refresh_count == 1
    assert ledger.balance == REFRESH_COST - 1


def test_purchase_removes_offer_but_keeps_pool() -> None:
    catalog = UpgradeCatalog(seed=1, run_number=1)
    catalog.offers = [get_upgrade(1), get_upgrade(4)]
    ledger = EconomyLedger(balance=100)
    team = build_default_team(training_points=100)

    balance = catalog.purchase(1, ledger, team, week=1)
    assert balance == 85
    assert [u.upgrade_id for u in catalog.get_available()] == [4]
    assert get_upgrade(1) in catalog.pool

    with pytest.raises(UpgradeNotOffered):
        catalog.purchase(1, ledger, team, week=1)
    assert ledger.balance == 85


def test_failed_purchase_keeps_offer() -> None:
    catalog = UpgradeCatalog(seed=1, run_number=1)
    catalog.offers = [get_upgrade(4)]
    ledger = EconomyLedger(balance=20)
    team = build_default_team(training_points=20)
    with pytest.raises(InsufficientFunds):
        catalog.purchase(4, ledger, team, target_player_id=1, week=1)
    assert [u.upgrade_id for u in catalog.get_available()] == [4]


def test_small_pool_offers_everything() -> None:
    pool = (get_upgrade(1), get_upgrade(2))
    catalog = UpgradeCatalog(seed=1, run_number=1, pool=pool)
    assert sorted(u.upgrade_id for u in catalog.restock(week=1)) == [1, 2]
