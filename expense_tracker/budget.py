"""Monthly budget utilization and alerting."""

import logging
import math
from datetime import datetime
from typing import Dict, Optional

from . import ledger
from .analytics import round2
from .errors import ValidationFailed
from .windows import calendar_month_window

logger = logging.getLogger(__name__)

# Checked top-down, first match wins. Nothing is raised under 60%.
ALERT_TIERS = (
    (100, "danger", "Budget exceeded! You have overspent this month."),
    (80, "warning", "Warning: You have used 80% of your monthly budget."),
    (60, "info", "You have used 60% of your monthly budget."),
)


def utilization(monthly_budget: float, total_spent: float) -> float:
    if monthly_budget > 0:
        return total_spent / monthly_budget * 100
    return 0.0


def pick_alert(raw_utilization: float) -> Optional[Dict]:
    for threshold, tier, message in ALERT_TIERS:
        if raw_utilization >= threshold:
            return {"type": tier, "message": message}
    return None


def evaluate(monthly_budget: float, total_spent: float) -> Dict:
    monthly_budget = monthly_budget or 0.0
    raw = utilization(monthly_budget, total_spent)
    return {
        "monthlyBudget": monthly_budget,
        "totalSpent": round2(total_spent),
        "remainingBudget": round2(monthly_budget - total_spent),
        "budgetUtilization": round2(raw),
        # tier comes from the unrounded ratio
        "alert": pick_alert(raw),
    }


def budget_status(user, now: Optional[datetime] = None) -> Dict:
    start, end = calendar_month_window(now)
    spent = ledger.total_between(user.id, start, end)
    return evaluate(user.monthly_budget, spent)


def set_budget(user, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
        raise ValidationFailed.single("monthlyBudget", "Budget must be a positive number")
    stored = ledger.store_budget(user, float(value))
    logger.info("user %s set monthly budget to %.2f", user.id, stored)
    return stored
