"""Unit tests for month aggregation and dashboard summaries"""

import pytest
from datetime import date
from decimal import Decimal
from installment_ledger.domain.aggregation import (
    installments_due_in_month,
    monthly_total,
    summarize_by_card,
    summarize_by_user,
    summarize_totals,
)
from installment_ledger.domain.models import Card, User


@pytest.fixture
def purchases(make_purchase):
    return [
        make_purchase("1200.00", 12, date(2024, 1, 1), user_id="alice", card_id="gold", id="phone"),
        make_purchase("100.00", 3, date(2024, 2, 5), user_id="alice", card_id="blue", id="shoes"),
        make_purchase("250.00", 1, date(2024, 3, 20), user_id="bob", card_id="gold", id="groceries"),
        make_purchase("80.00", 2, date(2024, 3, 1), user_id="carol", card_id="old", id="lamp"),
    ]


@pytest.fixture
def users():
    return [
        User(id="alice", name="Alice"),
        User(id="bob", name="Bob"),
        User(id="carol", name="Carol", is_active=False),
        User(id="dave", name="Dave"),
    ]


@pytest.fixture
def cards():
    return [
        Card(id="gold", name="Gold"),
        Card(id="blue", name="Blue"),
        Card(id="old", name="Old", is_active=False),
    ]


def test_monthly_total(purchases):
    """Test due totals per month across installment and single purchases"""
    alice = [p for p in purchases if p.user_id == "alice"]

    assert monthly_total(alice, "2024-01") == Decimal("100.00")
    assert monthly_total(alice, "2024-02") == Decimal("133.33")
    assert monthly_total(alice, "2024-04") == Decimal("133.34")
    assert monthly_total(purchases, "2024-03") == Decimal("423.33")
    assert monthly_total([], "2024-03") == Decimal("0")


def test_installments_due_in_month_order_and_index(purchases):
    """Test lines follow input order and carry installment numbers"""
    lines = installments_due_in_month(purchases, "2024-03")

    assert [(l.purchase_id, l.installment_number, l.total_installments) for l in lines] == [
        ("phone", 3, 12),
        ("shoes", 2, 3),
        ("groceries", 1, 1),
        ("lamp", 1, 2),
    ]
    assert sum(l.amount for l in lines) == monthly_total(purchases, "2024-03")


def test_installments_due_in_month_skips_finished_purchases(purchases):
    lines = installments_due_in_month(purchases, "2024-06")

    assert [l.purchase_id for l in lines] == ["phone"]


def test_summarize_by_user(users, purchases):
    """Test per-user figures, skipping inactive and debt-free users"""
    summaries = summarize_by_user(users, purchases, "2024-03")

    assert [s.party_id for s in summaries] == ["alice", "bob"]
    alice, bob = summaries

    assert alice.month_total == Decimal("133.33")
    assert alice.total_debt == Decimal("1066.67")  # 1000.00 + 66.67
    assert alice.remaining_installments == 12  # 10 + 2
    assert alice.total_spending == Decimal("1300.00")

    assert bob.month_total == Decimal("250.00")
    assert bob.total_debt == Decimal("250.00")
    assert bob.remaining_installments == 1


def test_summarize_by_user_card_filter(users, purchases):
    summaries = summarize_by_user(users, purchases, "2024-03", card_id="blue")

    assert len(summaries) == 1
    assert summaries[0].party_id == "alice"
    assert summaries[0].month_total == Decimal("33.33")
    assert summaries[0].total_spending == Decimal("100.00")


def test_summarize_by_card(cards, purchases):
    summaries = summarize_by_card(cards, purchases, "2024-03")

    assert [s.party_id for s in summaries] == ["gold", "blue"]
    assert summaries[0].month_total == Decimal("350.00")
    assert summaries[0].total_debt == Decimal("1250.00")
    assert summaries[1].month_total == Decimal("33.33")


def test_summarize_by_card_user_filter(cards, purchases):
    summaries = summarize_by_card(cards, purchases, "2024-03", user_id="bob")

    assert [(s.party_id, s.month_total) for s in summaries] == [("gold", Decimal("250.00"))]


def test_summaries_hide_settled_parties(users, purchases):
    """Test nothing is listed once every purchase is paid off"""
    assert summarize_by_user(users, purchases, "2025-06") == []


def test_summarize_totals(users, purchases):
    totals = summarize_totals(summarize_by_user(users, purchases, "2024-03"))

    assert totals.month_total == Decimal("383.33")
    assert totals.total_debt == Decimal("1316.67")
    assert totals.total_spending == Decimal("1550.00")


def test_summarize_totals_empty():
    totals = summarize_totals([])

    assert totals.month_total == Decimal("0")
    assert totals.total_debt == Decimal("0")
