# tests/test_ledger.py
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from taskmaster.models import AssignmentStatus
from taskmaster.services.ledger import (
    LedgerRuleViolation,
    WriterRating,
    aggregate_rating,
    build_chapters,
    chapter_progress,
    classify_deadline,
    compute_dashboard,
    derive_prices,
    group_by_deadline_day,
    move_status,
    rating_required,
    reassign_writer,
    round1,
    settle_payment,
    should_notify,
)

NOW = datetime(2025, 11, 12, 12, 0, 0)


def _assignment(**fields):
    values = {
        "id": "a1",
        "title": "Essay",
        "status": AssignmentStatus.IN_PROGRESS,
        "deadline": NOW + timedelta(days=3),
        "price": 0,
        "paid_amount": 0,
        "writer_id": None,
        "writer_price": 0,
        "writer_paid_amount": 0,
        "sunk_costs": 0,
        "is_dissertation": False,
    }
    values.update(fields)
    return SimpleNamespace(**values)


def test_derive_prices_from_word_count():
    assert derive_prices(2000, 2.5, 1.5) == {"price": 5000.0, "writer_price": 3000.0}


def test_derive_prices_is_idempotent():
    first = derive_prices(2000, 2.5, None)
    second = derive_prices(2000, 2.5, None)
    assert first == second == {"price": 5000.0}


def test_derive_prices_skips_incomplete_pairs():
    """Missing rates leave any manual price alone."""
    assert derive_prices(0, 2.5, 1.5) == {}
    assert derive_prices(2000, None, 0) == {}
    assert derive_prices(2000, 0, 1.5) == {"writer_price": 3000.0}


def test_settle_sets_paid_to_price():
    changes = settle_payment(_assignment(price=5000, paid_amount=2000))
    assert changes == {"paid_amount": 5000.0}


def test_settle_refuses_when_nothing_due():
    with pytest.raises(LedgerRuleViolation):
        settle_payment(_assignment(price=5000, paid_amount=5000))
    with pytest.raises(LedgerRuleViolation):
        settle_payment(_assignment(price=5000, paid_amount=6000))


def test_reassign_moves_paid_amount_to_sunk_costs():
    changes = reassign_writer(_assignment(writer_id="w1", writer_paid_amount=1000, writer_price=3000, sunk_costs=0))
    assert changes == {
        "sunk_costs": 1000.0,
        "writer_id": None,
        "writer_paid_amount": 0.0,
        "writer_price": 0.0,
        "writer_cost_per_word": 0.0,
    }


def test_repeated_reassignment_accumulates_sunk_costs():
    assignment = _assignment(writer_id="w1", writer_paid_amount=1000)
    for next_writer, paid in (("w2", 400), ("w3", 250)):
        for key, value in reassign_writer(assignment).items():
            setattr(assignment, key, value)
        assignment.writer_id = next_writer
        assignment.writer_paid_amount = paid
    for key, value in reassign_writer(assignment).items():
        setattr(assignment, key, value)
    assert assignment.sunk_costs == 1650
    assert assignment.writer_id is None


def test_reassign_without_writer_is_refused():
    with pytest.raises(LedgerRuleViolation):
        reassign_writer(_assignment(writer_id=None))


def test_rating_converges_to_average():
    rating = aggregate_rating(None, 5, 5)
    rating = aggregate_rating(rating, 1, 1)
    assert rating == WriterRating(quality=3.0, punctuality=3.0, count=2)


def test_rating_rounds_to_one_decimal():
    rating = aggregate_rating(WriterRating(quality=4.8, punctuality=5.0, count=12), 4, 3)
    assert rating.count == 13
    assert rating.quality == 4.7
    assert rating.punctuality == 4.8


def test_rating_out_of_range_rejected():
    with pytest.raises(LedgerRuleViolation):
        aggregate_rating(None, 0, 5)
    with pytest.raises(LedgerRuleViolation):
        aggregate_rating(None, 5, 6)


def test_round1_rounds_half_up():
    assert round1(2.25) == 2.3
    assert round1(2.24) == 2.2


def test_rating_required_only_on_first_completion():
    assert rating_required(AssignmentStatus.REVIEW, AssignmentStatus.COMPLETED, "w1")
    assert not rating_required(AssignmentStatus.COMPLETED, AssignmentStatus.COMPLETED, "w1")
    assert not rating_required(AssignmentStatus.REVIEW, AssignmentStatus.COMPLETED, None)
    assert not rating_required(AssignmentStatus.PENDING, AssignmentStatus.IN_PROGRESS, "w1")
    assert rating_required("Under Review", "Completed", "w1")


def test_status_board_order():
    assert AssignmentStatus.PENDING.next() is AssignmentStatus.IN_PROGRESS
    assert AssignmentStatus.REVIEW.next() is AssignmentStatus.COMPLETED
    assert AssignmentStatus.COMPLETED.next() is None
    assert AssignmentStatus.PENDING.previous() is None
    assert AssignmentStatus.COMPLETED.previous() is AssignmentStatus.REVIEW
    assert AssignmentStatus.CANCELLED.next() is None


def test_move_status_refuses_past_the_ends():
    assert move_status(AssignmentStatus.IN_PROGRESS, "forward") is AssignmentStatus.REVIEW
    assert move_status(AssignmentStatus.IN_PROGRESS, "back") is AssignmentStatus.PENDING
    with pytest.raises(LedgerRuleViolation):
        move_status(AssignmentStatus.COMPLETED, "forward")
    with pytest.raises(LedgerRuleViolation):
        move_status(AssignmentStatus.CANCELLED, "back")


def test_build_chapters_generates_and_resizes():
    chapters = build_chapters(3)
    assert [c["title"] for c in chapters] == ["Chapter 1", "Chapter 2", "Chapter 3"]

    chapters[0]["is_completed"] = True
    grown = build_chapters(5, chapters)
    assert len(grown) == 5
    assert grown[0]["is_completed"] is True
    assert grown[4]["chapter_number"] == 5

    shrunk = build_chapters(2, grown)
    assert [c["chapter_number"] for c in shrunk] == [1, 2]
    assert chapter_progress(shrunk) == 50


def test_overdue_classification():
    yesterday = NOW - timedelta(days=1)
    assert classify_deadline(yesterday, AssignmentStatus.IN_PROGRESS, NOW).is_overdue
    assert not classify_deadline(yesterday, AssignmentStatus.COMPLETED, NOW).is_overdue
    assert classify_deadline(yesterday, AssignmentStatus.IN_PROGRESS, NOW).label == "Overdue"


def test_urgency_window():
    state = classify_deadline(NOW + timedelta(hours=4, minutes=10), AssignmentStatus.PENDING, NOW)
    assert state.hours_left == 5
    assert state.days_left == 1
    assert state.is_urgent
    assert state.label == "5h"

    later = classify_deadline(NOW + timedelta(days=2, hours=1), AssignmentStatus.PENDING, NOW)
    assert not later.is_urgent
    assert later.label == "3d"


def test_aware_deadlines_compare_in_utc():
    deadline = datetime(2025, 11, 12, 14, 0, tzinfo=timezone(timedelta(hours=5)))
    assert classify_deadline(deadline, AssignmentStatus.PENDING, NOW).is_overdue


def test_notification_window():
    assert should_notify(NOW + timedelta(hours=23), NOW)
    assert not should_notify(NOW + timedelta(hours=25), NOW)
    assert not should_notify(NOW - timedelta(hours=1), NOW)


def test_dashboard_pending_amount_scenario():
    assignments = [
        _assignment(price=5000, paid_amount=2000),
        _assignment(price=20000, paid_amount=5000, is_dissertation=True),
    ]
    stats = compute_dashboard(assignments, NOW)
    assert stats.pending_amount == 18000
    assert stats.total_pending == 2
    assert stats.active_dissertations == 1
    assert stats.status_distribution == {"In Progress": 2}


def test_dashboard_overpayment_reduces_total():
    assignments = [
        _assignment(price=1000, paid_amount=1500, writer_price=500, writer_paid_amount=700),
        _assignment(price=1000, paid_amount=0, writer_price=800, writer_paid_amount=0),
    ]
    stats = compute_dashboard(assignments, NOW)
    assert stats.pending_amount == 500
    assert stats.pending_writer_pay == 600


def test_dashboard_counts_and_upcoming():
    assignments = [
        _assignment(id="late", deadline=NOW - timedelta(days=1)),
        _assignment(id="done", status=AssignmentStatus.COMPLETED, deadline=NOW - timedelta(days=2)),
        _assignment(id="cancelled", status=AssignmentStatus.CANCELLED, deadline=NOW - timedelta(days=2)),
        _assignment(id="today", deadline=NOW + timedelta(hours=2), price=800, paid_amount=300),
        _assignment(id="soon", deadline=NOW + timedelta(days=1)),
    ]
    stats = compute_dashboard(assignments, NOW, upcoming_limit=2)
    assert stats.total_pending == 3
    # Cancelled work past its deadline still counts as overdue.
    assert stats.total_overdue == 2
    assert stats.due_today_amount == 500
    assert [a.id for a in stats.upcoming] == ["late", "today"]


def test_completed_past_deadline_label():
    state = classify_deadline(NOW - timedelta(hours=5), AssignmentStatus.COMPLETED, NOW)
    assert not state.is_overdue
    assert not state.is_urgent
    assert state.label == "Past"


def test_group_by_deadline_day_skips_completed():
    assignments = [
        _assignment(id="evening", deadline=datetime(2025, 11, 20, 18, 0)),
        _assignment(id="morning", deadline=datetime(2025, 11, 20, 9, 0)),
        _assignment(id="done", deadline=datetime(2025, 11, 20, 10, 0), status=AssignmentStatus.COMPLETED),
        _assignment(id="dropped", deadline=datetime(2025, 11, 3, 12, 0), status=AssignmentStatus.CANCELLED),
    ]
    grouped = group_by_deadline_day(assignments)
    assert list(grouped) == [date(2025, 11, 3), date(2025, 11, 20)]
    assert [a.id for a in grouped[date(2025, 11, 20)]] == ["morning", "evening"]
