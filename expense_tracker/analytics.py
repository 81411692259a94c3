"""Category, monthly and dashboard aggregates over one owner's expenses.

The ``*_from_frame`` style functions are pure and work on the frame produced by
:func:`expense_tracker.ledger.expenses_frame`; the owner-level functions do the
ledger read and hand the frame over.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional

import pandas as pd

from . import ledger
from .windows import (
    Window,
    period_window,
    start_of_month,
    start_of_year,
    today_window,
    trend_window,
)

MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

CENT = Decimal("0.01")


def round2(value) -> float:
    """Half-up rounding to cents on the decimal value."""
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def summarize_categories(frame: pd.DataFrame, period: str) -> Dict:
    if frame.empty:
        return {"period": period, "totalExpenses": 0, "categories": []}

    # first-seen order is kept for equal sums
    grouped = frame.groupby("category", sort=False)["amount"].agg(["sum", "count", "mean"])
    grouped = grouped.sort_values("sum", ascending=False, kind="stable")
    total = float(grouped["sum"].sum())

    categories = []
    for category, row in grouped.iterrows():
        categories.append({
            "category": category,
            "amount": round2(row["sum"]),
            "count": int(row["count"]),
            "avgAmount": round2(row["mean"]),
            "percentage": round2(row["sum"] / total * 100) if total > 0 else 0,
        })
    return {"period": period, "totalExpenses": round2(total), "categories": categories}


def summarize_months(frame: pd.DataFrame, months: int) -> Dict:
    if frame.empty:
        return {"months": months, "trends": []}

    keyed = frame.assign(year=frame["date"].dt.year, monthNum=frame["date"].dt.month)
    grouped = keyed.groupby(["year", "monthNum"])["amount"].agg(["sum", "count", "mean"])
    grouped = grouped.sort_index()

    trends = []
    for (year, month), row in grouped.iterrows():
        trends.append({
            "month": f"{MONTH_NAMES[int(month) - 1]} {int(year)}",
            "year": int(year),
            "monthNum": int(month),
            "amount": round2(row["sum"]),
            "count": int(row["count"]),
            "avgAmount": round2(row["mean"]),
        })
    return {"months": months, "trends": trends}


async def window_total(frame: pd.DataFrame, window: Optional[Window]) -> Dict:
    """Sum and count inside ``window``; ``None`` means all time."""
    if window is not None and not frame.empty:
        start, end = window
        frame = frame[(frame["date"] >= start) & (frame["date"] <= end)]
    await asyncio.sleep(0)
    if frame.empty:
        return {"amount": 0, "count": 0}
    return {"amount": round2(frame["amount"].sum()), "count": int(len(frame))}


async def window_totals(frame: pd.DataFrame, windows: Dict[str, Optional[Window]]) -> Dict[str, Dict]:
    """Compute every named window concurrently; one failure fails them all."""
    names = list(windows)
    results = await asyncio.gather(*(window_total(frame, windows[name]) for name in names))
    return dict(zip(names, results))


def run_coroutine(coro):
    """Run ``coro`` to completion whether or not an event loop is already running."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    # asyncio.run refuses to nest, so use a private loop on a worker thread
    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, coro).result()


def dashboard_windows(now: datetime) -> Dict[str, Optional[Window]]:
    return {
        "today": today_window(now),
        "thisMonth": (start_of_month(now), now),
        "thisYear": (start_of_year(now), now),
        "total": None,
    }


def category_breakdown(user_id: int, period: str = "month", now: Optional[datetime] = None) -> Dict:
    start, end = period_window(period, now)
    return summarize_categories(ledger.expenses_frame(user_id, start, end), period)


def monthly_trend(user_id: int, months: int = 6, now: Optional[datetime] = None) -> Dict:
    start, end = trend_window(months, now)
    return summarize_months(ledger.expenses_frame(user_id, start, end), months)


def dashboard_summary(user_id: int, now: Optional[datetime] = None, recent_limit: int = 5) -> Dict:
    now = now if now is not None else datetime.now()
    # all-time total needs every row, so the other windows are cut from the same read
    frame = ledger.expenses_frame(user_id)
    summary = run_coroutine(window_totals(frame, dashboard_windows(now)))
    summary["recentExpenses"] = [
        dict(e.to_dict(), amount=round2(e.amount))
        for e in ledger.recent_expenses(user_id, recent_limit)
    ]
    return summary
