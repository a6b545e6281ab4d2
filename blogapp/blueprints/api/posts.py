from __future__ import annotations

from flask import Blueprint, jsonify, request

from blogapp.blueprints.api import request_data
from blogapp.blueprints.api.serializers import comment_to_dict, post_to_dict
from blogapp.decorators import current_identity, token_required
from blogapp.extensions import limiter
from blogapp.services import posts as post_svc

bp = Blueprint("posts", __name__, url_prefix="/api/posts")

IMAGE_FIELD = post_svc.IMAGE_FIELD


@bp.get("")
@limiter.limit("120 per minute")
def list_posts():
    """Published posts, filtered by search/category/status and paginated."""
    page = post_svc.list_posts(request.args.to_dict(), viewer=current_identity())
    return jsonify(
        {
            "posts": [post_to_dict(p) for p in page.posts],
            "totalPages": page.total_pages,
            "currentPage": page.page,
            "totalPosts": page.total,
        }
    ), 200


@bp.get("/<string:post_id>")
@limiter.limit("120 per minute")
def get_post(post_id: str):
    post = post_svc.get_post(post_id, viewer=current_identity())
    return jsonify(post_to_dict(post, detail=True)), 200


@bp.post("")
@limiter.limit("10 per minute; 150 per hour")
@token_required
def create_post():
    post = post_svc.create_post(current_identity(), request_data(), request.files.get(IMAGE_FIELD))
    return jsonify(post_to_dict(post)), 201


@bp.put("/<string:post_id>")
@limiter.limit("10 per minute; 150 per hour")
@token_required
def update_post(post_id: str):
    post = post_svc.update_post(post_id, current_identity(), request_data(), request.files.get(IMAGE_FIELD))
    return jsonify(post_to_dict(post)), 200


@bp.delete("/<string:post_id>")
@limiter.limit("10 per minute; 150 per hour")
@token_required
def delete_post(post_id: str):
    post_svc.delete_post(post_id, current_identity())
    return jsonify({"message": "Post deleted successfully"}), 200


@bp.post("/<string:post_id>/comments")
@limiter.limit("20 per minute")
@token_required
def add_comment(post_id: str):
    comment = post_svc.add_comment(post_id, current_identity(), request_data())
    return jsonify(comment_to_dict(comment)), 201
