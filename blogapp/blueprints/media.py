from __future__ import annotations

from flask import Blueprint, current_app, send_from_directory

from blogapp.extensions import limiter

bp = Blueprint("media", __name__)


@bp.get("/uploads/<path:filename>")
@limiter.limit("300 per minute")
def uploaded_file(filename: str):
    resp = send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
    resp.headers["Cache-Control"] = "public, max-age=3600"
    return resp
