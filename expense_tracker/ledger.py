"""Read and write helpers over the expense and user tables.

Analytics code never touches the session directly: it asks this module for a
pandas frame of one owner's expenses and works on that.
"""

from datetime import datetime
from typing import Optional

import pandas as pd

from .models import Expense, User, db

FRAME_COLUMNS = ["id", "category", "amount", "date"]


def expenses_frame(user_id: int, start: Optional[datetime] = None, end: Optional[datetime] = None) -> pd.DataFrame:
    """Owner's expenses with ``date`` in ``[start, end]`` (open where a bound is None)."""
    q = Expense.query.filter(Expense.user_id == user_id)
    if start is not None:
        q = q.filter(Expense.date >= start)
    if end is not None:
        q = q.filter(Expense.date <= end)
    rows = [
        {"id": e.id, "category": e.category, "amount": float(e.amount), "date": e.date}
        for e in q.order_by(Expense.id)
    ]
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df["date"] = pd.to_datetime(df["date"])
    return df


def recent_expenses(user_id: int, limit: int = 5):
    return (
        Expense.query.filter_by(user_id=user_id)
        .order_by(Expense.date.desc(), Expense.id.desc())
        .limit(limit)
        .all()
    )


def total_between(user_id: int, start: datetime, end: datetime) -> float:
    total = (
        db.session.query(db.func.coalesce(db.func.sum(Expense.amount), 0))
        .filter(Expense.user_id == user_id, Expense.date >= start, Expense.date <= end)
        .scalar()
    )
    return float(total)


def owned_expense(user_id: int, expense_id: int) -> Optional[Expense]:
    return Expense.query.filter_by(id=expense_id, user_id=user_id).first()


def store_budget(user: User, value: float) -> float:
    user.monthly_budget = value
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return user.monthly_budget
