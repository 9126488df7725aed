from flask import Blueprint, g, jsonify

from models import User, db
from routes.helpers import json_body
from services.auth_service import authenticate, issue_token, signup, token_required


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/signup", methods=["POST"])
def signup_user():
    data = json_body()
    user = signup(data.get("email"), data.get("password"), name=data.get("name"))
    return jsonify({"user": user.to_dict(), "token": issue_token(user)}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    user = authenticate(data.get("email"), data.get("password"))
    return jsonify({"user": user.to_dict(), "token": issue_token(user)})


@auth_bp.route("/me", methods=["GET"])
@token_required
def me():
    user = db.session.get(User, g.user_id)
    return jsonify({"user": user.to_dict()})
