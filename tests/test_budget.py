from datetime import datetime

import pytest

from expense_tracker import budget
from expense_tracker.errors import ValidationFailed
from conftest import add_expense, get_user, set_user_budget


@pytest.mark.parametrize(
    "spent, tier",
    [
        (0, None),
        (59.99, None),
        (60, "info"),
        (79.999, "info"),
        (80.0, "warning"),
        (99.99, "warning"),
        (100, "danger"),
        (250, "danger"),
    ],
)
def test_alert_tiers(spent, tier) -> None:
    status = budget.evaluate(100, spent)
    assert (status["alert"] or {}).get("type") == tier


def test_tier_uses_unrounded_utilization() -> None:
    status = budget.evaluate(100, 79.999)
    assert status["budgetUtilization"] == 80.0
    assert status["alert"]["type"] == "info"


def test_zero_budget_never_alerts() -> None:
    status = budget.evaluate(0, 10_000)
    assert status["budgetUtilization"] == 0
    assert status["alert"] is None
    assert status["remainingBudget"] == -10_000


def test_alert_messages() -> None:
    assert budget.pick_alert(150) == {
        "type": "danger",
        "message": "Budget exceeded! You have overspent this month.",
    }
    assert budget.pick_alert(80)["message"] == "Warning: You have used 80% of your monthly budget."
    assert budget.pick_alert(60)["message"] == "You have used 60% of your monthly budget."
    assert budget.pick_alert(59.9) is None


def test_overspend_scenario(app, user_client) -> None:
    uid = user_client.user_id
    set_user_budget(app, uid, 100)
    now = datetime.now()
    add_expense(app, uid, 100, "Food & Dining", datetime(now.year, now.month, 1))
    add_expense(app, uid, 50, "Transportation", datetime(now.year, now.month, 2))

    with app.app_context():
        status = budget.budget_status(get_user(uid))
    assert status["totalSpent"] == 150
    assert status["remainingBudget"] == -50
    assert status["budgetUtilization"] == 150.0
    assert status["alert"]["type"] == "danger"


def test_status_counts_whole_calendar_month(app, user_client) -> None:
    uid = user_client.user_id
    set_user_budget(app, uid, 200)
    add_expense(app, uid, 20, "Other", datetime(2024, 2, 29, 22, 0))
    add_expense(app, uid, 20, "Other", datetime(2024, 3, 1))
    with app.app_context():
        status = budget.budget_status(get_user(uid), now=datetime(2024, 2, 10))
    assert status["totalSpent"] == 20


@pytest.mark.parametrize("bad", [-10, float("nan"), float("inf"), "12", None, True])
def test_set_budget_rejects_bad_values(app, user_client, bad) -> None:
    uid = user_client.user_id
    set_user_budget(app, uid, 300)
    with app.app_context():
        with pytest.raises(ValidationFailed):
            budget.set_budget(get_user(uid), bad)
    with app.app_context():
        assert get_user(uid).monthly_budget == 300


def test_set_budget_persists(app, user_client) -> None:
    with app.app_context():
        assert budget.set_budget(get_user(user_client.user_id), 250.5) == 250.5
    with app.app_context():
        assert get_user(user_client.user_id).monthly_budget == 250.5
