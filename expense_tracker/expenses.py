import logging
import math

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from . import ledger
from .errors import ExpenseNotFound
from .models import CATEGORIES, Expense, db
from .schemas import ExpenseIn, ExpenseListQuery, parse

logger = logging.getLogger(__name__)

bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


def _owned_or_404(expense_id):
    expense = ledger.owned_expense(current_user.id, expense_id)
    if expense is None:
        raise ExpenseNotFound(expense_id)
    return expense


@bp.route("/categories")
@login_required
def categories():
    return jsonify({"categories": list(CATEGORIES)})


@bp.route("", methods=["GET"])
@login_required
def list_expenses():
    query = parse(ExpenseListQuery, request.args.to_dict())
    q = Expense.query.filter(Expense.user_id == current_user.id)
    if query.category and query.category != "all":
        q = q.filter(Expense.category == query.category)
    if query.startDate:
        q = q.filter(Expense.date >= query.startDate)
    if query.endDate:
        q = q.filter(Expense.date <= query.endDate)

    total = q.count()
    expenses = (
        q.order_by(Expense.date.desc(), Expense.id.desc())
        .offset((query.page - 1) * query.limit)
        .limit(query.limit)
        .all()
    )
    return jsonify({
        "expenses": [e.to_dict() for e in expenses],
        "totalPages": math.ceil(total / query.limit),
        "currentPage": query.page,
        "total": total,
    })


@bp.route("", methods=["POST"])
@login_required
def add_expense():
    data = parse(ExpenseIn, request.get_json(silent=True))
    e = Expense(
        user_id=current_user.id,
        amount=data.amount,
        category=data.category,
        description=data.description,
        date=data.date,
    )
    db.session.add(e)
    db.session.commit()
    logger.info("user %s added expense %s", current_user.id, e.id)
    return jsonify({"message": "Expense added successfully", "expense": e.to_dict()}), 201


@bp.route("/<int:expense_id>", methods=["GET"])
@login_required
def get_expense(expense_id):
    return jsonify({"expense": _owned_or_404(expense_id).to_dict()})


@bp.route("/<int:expense_id>", methods=["PUT"])
@login_required
def update_expense(expense_id):
    data = parse(ExpenseIn, request.get_json(silent=True))
    e = _owned_or_404(expense_id)
    e.amount = data.amount
    e.category = data.category
    e.description = data.description
    e.date = data.date
    db.session.commit()
    logger.info("user %s updated expense %s", current_user.id, e.id)
    return jsonify({"message": "Expense updated successfully", "expense": e.to_dict()})


@bp.route("/<int:expense_id>", methods=["DELETE"])
@login_required
def delete_expense(expense_id):
    e = _owned_or_404(expense_id)
    db.session.delete(e)
    db.session.commit()
    logger.info("user %s deleted expense %s", current_user.id, expense_id)
    return jsonify({"message": "Expense deleted successfully"})
