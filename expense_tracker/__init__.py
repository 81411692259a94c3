"""Personal expense tracker API.

``create_app`` wires the Flask application: SQLAlchemy models, Flask-Login
sessions, the auth/expense/analytics/budget blueprints and JSON error
handlers.
"""

import logging

import click
from flask import Flask, jsonify

from .config import Config
from .models import Expense, User, db

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(app):
    level = app.config.get("LOG_LEVEL", "INFO")
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger(__name__)
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(level)
    app.logger.setLevel(level)


def register_commands(app):
    @app.cli.command("initdb")
    def initdb():
        db.create_all()
        click.echo("Database initialized.")

    @app.cli.command("inspect-db")
    def inspect_db():
        click.echo("Users in DB:")
        for user in User.query.all():
            click.echo(f"- {user.id} | {user.username} | budget {user.monthly_budget:.2f}")

        click.echo("\nExpenses in DB:")
        for e in Expense.query.order_by(Expense.date).all():
            click.echo(f"- {e.id} | {e.date:%Y-%m-%d} | {e.category} | {float(e.amount):.2f} | User {e.user_id}")


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    configure_logging(app)

    db.init_app(app)

    from .auth import bp as auth_bp, login_manager
    from .errors import register_error_handlers
    from .expenses import bp as expenses_bp
    from .views import analytics_bp, budget_bp

    login_manager.init_app(app)
    app.register_blueprint(auth_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(budget_bp)
    register_error_handlers(app)
    register_commands(app)

    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok"})

    return app
