"""Request-level failures and the JSON error handlers that render them."""

import logging

from flask import jsonify
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .models import db

logger = logging.getLogger(__name__)


class ValidationFailed(Exception):
    """Input rejected before any computation ran."""

    def __init__(self, errors):
        super().__init__("validation failed")
        self.errors = errors

    @classmethod
    def from_pydantic(cls, exc: ValidationError):
        errors = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"]) or None
            errors.append({"field": field, "message": err["msg"]})
        return cls(errors)

    @classmethod
    def single(cls, field, message):
        return cls([{"field": field, "message": message}])


class ExpenseNotFound(Exception):
    pass


def register_error_handlers(app):
    @app.errorhandler(ValidationFailed)
    def handle_validation(exc):
        logger.debug("rejected input: %s", exc.errors)
        return jsonify({"errors": exc.errors}), 400

    @app.errorhandler(ExpenseNotFound)
    def handle_expense_not_found(exc):
        return jsonify({"message": "Expense not found"}), 404

    @app.errorhandler(SQLAlchemyError)
    def handle_store_failure(exc):
        db.session.rollback()
        logger.exception("datastore failure")
        return jsonify({"message": "Server error"}), 500

    @app.errorhandler(404)
    def handle_unknown_route(exc):
        return jsonify({"message": "Route not found"}), 404

    @app.errorhandler(HTTPException)
    def handle_http(exc):
        return jsonify({"message": exc.description}), exc.code
