from __future__ import annotations

from flask import Blueprint, jsonify

from blogapp.blueprints.api import request_data
from blogapp.blueprints.api.serializers import user_summary
from blogapp.decorators import current_identity, token_required
from blogapp.extensions import limiter
from blogapp.services import auth as auth_svc

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.post("/register")
@limiter.limit("5 per minute; 50 per hour")
def register():
    user = auth_svc.register(request_data())
    return jsonify({"message": "User registered successfully", "user": user_summary(user)}), 201


@bp.post("/login")
@limiter.limit("5 per minute; 20 per hour")
def login():
    user = auth_svc.authenticate(request_data())
    token = auth_svc.issue_access_token(user)
    return jsonify({"token": token, "user": user_summary(user)}), 200


@bp.get("/me")
@token_required
def me():
    return jsonify({"user": user_summary(current_identity())}), 200
