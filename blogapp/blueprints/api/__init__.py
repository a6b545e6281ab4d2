from __future__ import annotations

from typing import Any

from flask import request


def request_data() -> dict[str, Any]:
    """Body fields from a multipart/urlencoded form or a JSON object."""
    if request.form:
        return request.form.to_dict()
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
