"""Analytics and budget endpoints."""

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from . import analytics, budget
from .schemas import BudgetIn, TrendQuery, parse

analytics_bp = Blueprint("analytics", __name__, url_prefix="/api/analytics")
budget_bp = Blueprint("budget", __name__, url_prefix="/api/budget")


@analytics_bp.route("/category")
@login_required
def category():
    period = request.args.get("period", "month")
    return jsonify(analytics.category_breakdown(current_user.id, period))


@analytics_bp.route("/monthly")
@login_required
def monthly():
    args = {"months": request.args.get("months", current_app.config["DEFAULT_TREND_MONTHS"])}
    query = parse(TrendQuery, args)
    return jsonify(analytics.monthly_trend(current_user.id, query.months))


@analytics_bp.route("/dashboard")
@login_required
def dashboard():
    limit = current_app.config["RECENT_EXPENSES_LIMIT"]
    return jsonify(analytics.dashboard_summary(current_user.id, recent_limit=limit))


@budget_bp.route("", methods=["GET"])
@login_required
def get_budget():
    return jsonify(budget.budget_status(current_user))


@budget_bp.route("", methods=["PUT"])
@login_required
def update_budget():
    data = parse(BudgetIn, request.get_json(silent=True))
    stored = budget.set_budget(current_user, data.monthlyBudget)
    return jsonify({"message": "Budget updated successfully", "monthlyBudget": stored})
