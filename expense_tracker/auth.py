import logging

from flask import Blueprint, jsonify, request
from flask_login import LoginManager, current_user, login_required, login_user, logout_user

from .errors import ValidationFailed
from .models import User, db
from .schemas import Credentials, parse

logger = logging.getLogger(__name__)

login_manager = LoginManager()

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"message": "Authentication required"}), 401


@bp.route("/register", methods=["POST"])
def register():
    creds = parse(Credentials, request.get_json(silent=True))
    if User.query.filter_by(username=creds.username).first():
        raise ValidationFailed.single("username", "Username already exists")

    user = User(username=creds.username)
    user.set_password(creds.password)
    db.session.add(user)
    db.session.commit()
    login_user(user)
    logger.info("registered user %s", user.id)
    return jsonify({"message": "Registration successful", "user": user.to_dict()}), 201


@bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    user = User.query.filter_by(username=str(data.get("username", "")).strip()).first()
    if user and user.check_password(str(data.get("password", ""))):
        login_user(user)
        return jsonify({"message": "Login successful", "user": user.to_dict()})
    return jsonify({"message": "Invalid credentials"}), 401


@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"message": "Logged out"})


@bp.route("/me")
@login_required
def me():
    return jsonify({"user": current_user.to_dict()})
