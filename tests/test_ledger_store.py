"""Mini README: Tests covering the in-memory deposit ledger.

Structure:
    * alignment and aggregate index behaviour of append_deposit.
    * edit_entry_time keeps contributor and aggregate labels identical.
    * rename/delete semantics and the participants listing.
"""

from __future__ import annotations

import math

import pytest

from depositboard.errors import DuplicateKeyError, InvalidAmountError, NotFoundError
from depositboard.ledger import LedgerStore, coerce_amount


def test_append_deposit_grows_series_in_lockstep() -> None:
    """Each append adds exactly one label and one value to the aggregate."""

    ledger = LedgerStore()
    for position, amount in enumerate([10, 20.5, "7", 3]):
        index = ledger.append_deposit(amount, f"0{position + 1}/10/2026 10:00:00")
        aggregate = ledger.aggregate
        assert index == position
        assert len(aggregate.labels) == len(aggregate.values) == position + 1

    assert ledger.aggregate.values == [10.0, 20.5, 7.0, 3.0]
    assert ledger.list_contributors() == []


def test_contributor_deposits_accumulate() -> None:
    """Two deposits for Ana produce one participant row totalling 80."""

    ledger = LedgerStore()
    ledger.append_deposit(50, "01/10/2026 09:00:00", "Ana")
    ledger.append_deposit(30, "02/10/2026 09:00:00", "Ana")

    summaries = ledger.list_contributors()
    assert len(summaries) == 1
    assert summaries[0].name == "Ana"
    assert summaries[0].deposit_count == 2
    assert summaries[0].total == pytest.approx(80.0)
    assert sum(ledger.aggregate.values) == pytest.approx(80.0)
    assert len(ledger.aggregate.values) == 2


@pytest.mark.parametrize("amount", ["abc", None, float("nan"), math.inf, "-inf", True])
def test_append_deposit_rejects_invalid_amounts(amount: object) -> None:
    ledger = LedgerStore()

    with pytest.raises(InvalidAmountError):
        ledger.append_deposit(amount, "01/10/2026 09:00:00", "Ana")

    assert ledger.aggregate.values == []
    assert ledger.contributor_names() == []


def test_coerce_amount_accepts_numeric_strings() -> None:
    assert coerce_amount(" 12.5 ") == pytest.approx(12.5)
    assert coerce_amount(4) == 4.0


def test_edit_entry_time_updates_both_series() -> None:
    """The aggregate label at the recorded index follows the contributor edit."""

    ledger = LedgerStore()
    ledger.append_deposit(5, "01/10/2026 08:00:00")
    ledger.append_deposit(10, "01/10/2026 09:00:00", "Bia")
    ledger.append_deposit(15, "01/10/2026 10:00:00", "Ana")
    ledger.append_deposit(20, "01/10/2026 11:00:00", "Bia")

    previous = ledger.edit_entry_time("Bia", 1, "02/10/2026 12:00:00")

    assert previous == "01/10/2026 11:00:00"
    bia = ledger.contributor("Bia")
    assert bia.labels == ["01/10/2026 09:00:00", "02/10/2026 12:00:00"]
    assert bia.entries[1].time == "02/10/2026 12:00:00"
    assert bia.values == [10.0, 20.0]
    assert ledger.aggregate.labels == [
        "01/10/2026 08:00:00",
        "01/10/2026 09:00:00",
        "01/10/2026 10:00:00",
        "02/10/2026 12:00:00",
    ]


@pytest.mark.parametrize("name, index", [("Nobody", 0), ("Ana", 1), ("Ana", -1)])
def test_edit_entry_time_rejects_unknown_targets(name: str, index: int) -> None:
    ledger = LedgerStore()
    ledger.append_deposit(5, "01/10/2026 08:00:00", "Ana")

    with pytest.raises(NotFoundError):
        ledger.edit_entry_time(name, index, "03/10/2026 08:00:00")


def test_rename_keeps_entries_editable() -> None:
    """Renamed contributors keep their entry cross-references."""

    ledger = LedgerStore()
    ledger.append_deposit(5, "01/10/2026 08:00:00", "Ana")
    ledger.append_deposit(6, "01/10/2026 09:00:00", "Ana")

    ledger.rename_contributor("Ana", "Ana Paula")
    ledger.edit_entry_time("Ana Paula", 0, "05/10/2026 08:00:00")

    assert "Ana" not in ledger.contributor_names()
    assert ledger.contributor("Ana Paula").labels[0] == "05/10/2026 08:00:00"
    assert ledger.aggregate.labels[0] == "05/10/2026 08:00:00"


def test_rename_rejects_missing_and_duplicate_names() -> None:
    ledger = LedgerStore()
    ledger.append_deposit(5, "01/10/2026 08:00:00", "Ana")
    ledger.append_deposit(5, "01/10/2026 08:00:00", "Bia")

    with pytest.raises(NotFoundError):
        ledger.rename_contributor("Carla", "Dora")
    with pytest.raises(DuplicateKeyError):
        ledger.rename_contributor("Ana", "Bia")


def test_delete_contributor_keeps_aggregate() -> None:
    ledger = LedgerStore()
    ledger.append_deposit(50, "01/10/2026 08:00:00", "Ana")
    ledger.append_deposit(25, "01/10/2026 09:00:00", "Bia")
    ledger.append_deposit(5, "01/10/2026 10:00:00")

    ledger.delete_contributor("Ana")

    assert [summary.name for summary in ledger.list_contributors()] == ["Bia"]
    assert ledger.aggregate.total() == pytest.approx(80.0)
    with pytest.raises(NotFoundError):
        ledger.delete_contributor("Ana")


def test_find_contributor_uses_sanitised_identifier() -> None:
    ledger = LedgerStore()
    ledger.append_deposit(1, "01/10/2026 08:00:00", "João Paulo")

    assert ledger.find_contributor("joao_paulo") == "João Paulo"
    assert ledger.list_contributors()[0].id == "joao_paulo"
    with pytest.raises(NotFoundError):
        ledger.find_contributor("joao")


def test_list_entries_reports_indexes() -> None:
    ledger = LedgerStore()
    ledger.append_deposit(1, "01/10/2026 08:00:00", "Ana")
    ledger.append_deposit(2, "01/10/2026 09:00:00", "Ana")

    assert ledger.list_entries("Ana") == [
        {"index": 0, "time": "01/10/2026 08:00:00", "value": 1.0},
        {"index": 1, "time": "01/10/2026 09:00:00", "value": 2.0},
    ]
    with pytest.raises(NotFoundError):
        ledger.list_entries("Bia")


def test_returned_series_are_copies() -> None:
    ledger = LedgerStore()
    ledger.append_deposit(1, "01/10/2026 08:00:00", "Ana")

    ledger.aggregate.values.append(99.0)
    ledger.contributor("Ana").labels.clear()

    assert ledger.aggregate.values == [1.0]
    assert ledger.contributor("Ana").labels == ["01/10/2026 08:00:00"]


@pytest.mark.parametrize("new_name", ["ANA", "Aná", "ana"])
def test_rename_rejects_identifier_collision(new_name: str) -> None:
    """Two contributors may never end up sharing a route identifier."""

    ledger = LedgerStore()
    ledger.append_deposit(10, "01/10/2026 08:00:00", "Ana")
    ledger.append_deposit(5, "01/10/2026 09:00:00", "Bia")

    with pytest.raises(DuplicateKeyError):
        ledger.rename_contributor("Bia", new_name)

    assert [summary.id for summary in ledger.list_contributors()] == ["ana", "bia"]


def test_rename_to_respelling_of_own_identifier() -> None:
    ledger = LedgerStore()
    ledger.append_deposit(10, "01/10/2026 08:00:00", "Ana")
    ledger.append_deposit(5, "01/10/2026 09:00:00", "Bia")

    ledger.rename_contributor("Ana", "Aná")

    assert ledger.find_contributor("ana") == "Aná"
    assert sorted(summary.id for summary in ledger.list_contributors()) == ["ana", "bia"]
