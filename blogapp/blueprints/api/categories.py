from __future__ import annotations

from flask import Blueprint, jsonify

from blogapp.blueprints.api import request_data
from blogapp.blueprints.api.serializers import category_to_dict
from blogapp.decorators import token_required
from blogapp.extensions import limiter
from blogapp.services import categories as category_svc

bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@bp.get("")
@limiter.limit("120 per minute")
def list_categories():
    return jsonify([category_to_dict(c) for c in category_svc.all_categories()]), 200


@bp.post("")
@limiter.limit("10 per minute; 150 per hour")
@token_required
def create_category():
    cat = category_svc.create_category(request_data())
    return jsonify(category_to_dict(cat)), 201
