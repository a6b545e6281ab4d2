"""Featured image checks and storage.

Uploaded bytes are never written as received: they are decoded with Pillow,
re-encoded (dropping EXIF/ICC and anything appended to the file) and stored
under a random name in the upload folder.
"""
from __future__ import annotations

import io
import os
import uuid
from typing import Tuple

from PIL import Image

ALLOWED_FORMATS = {"PNG", "JPEG", "WEBP"}
MAX_PIXELS = 20_000_000
DEFAULT_MAX_BYTES = 5 * 1024 * 1024
FEATURED_MAX_SIZE = (1600, 1200)

FORMAT_EXT = {
    "PNG": ".png",
    "JPEG": ".jpg",
    "WEBP": ".webp",
}

UPLOAD_URL_PREFIX = "/uploads/"


def _detect(data: bytes) -> tuple[str, int, int] | None:
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.verify()
        # verify() leaves the image unusable; reopen for size
        with Image.open(io.BytesIO(data)) as im:
            return (im.format or "").upper(), im.width, im.height
    except Exception:
        return None


def validate_image(data: bytes, max_bytes: int = DEFAULT_MAX_BYTES) -> Tuple[bool, str | None, dict]:
    """Check raw upload bytes. Returns (ok, error_code, info)."""
    if not data:
        return False, "empty_file", {}
    if len(data) > max_bytes:
        return False, "file_too_large", {"max_bytes": max_bytes}

    detected = _detect(data)
    if detected is None:
        return False, "invalid_image", {}
    fmt, width, height = detected

    if fmt not in ALLOWED_FORMATS:
        return False, "unsupported_format", {"format": fmt}
    if width * height > MAX_PIXELS:
        return False, "too_many_pixels", {"width": width, "height": height}

    return True, None, {"format": fmt, "width": width, "height": height}


def reencode_image(data: bytes, fmt: str, max_size: tuple[int, int] | None = None) -> bytes:
    """Decode and re-encode ``data`` in ``fmt``, shrinking it to fit ``max_size``."""
    with Image.open(io.BytesIO(data)) as im:
        if max_size and (im.width > max_size[0] or im.height > max_size[1]):
            im.thumbnail(max_size, Image.Resampling.LANCZOS)

        if fmt in ("JPEG", "WEBP") and im.mode != "RGB":
            if im.mode in ("RGBA", "LA"):
                flat = Image.new("RGB", im.size, (255, 255, 255))
                flat.paste(im, mask=im.split()[-1])
                im = flat
            else:
                im = im.convert("RGB")
        elif fmt == "PNG" and im.mode not in ("RGBA", "RGB", "LA", "L"):
            im = im.convert("RGBA")

        out = io.BytesIO()
        if fmt == "PNG":
            im.save(out, format=fmt, optimize=True)
        else:
            im.save(out, format=fmt, quality=85)
        return out.getvalue()


def save_validated_image(
    data: bytes,
    upload_dir: str,
    original_filename: str | None = None,
    max_bytes: int = DEFAULT_MAX_BYTES,
    max_size: tuple[int, int] | None = FEATURED_MAX_SIZE,
) -> tuple[bool, str | None, dict, str | None]:
    """Validate, re-encode and store image bytes under ``upload_dir``.

    Returns (ok, error_code, info, public_path) where public_path looks like
    ``/uploads/<random>.png``. Never raises; failures come back as error codes.
    The client-supplied filename is only recorded in ``info``.
    """
    ok, err, info = validate_image(data, max_bytes=max_bytes)
    if not ok:
        return False, err, info, None

    fmt = info["format"]
    try:
        encoded = reencode_image(data, fmt, max_size=max_size)
    except Exception as e:
        return False, "processing_error", {**info, "exception": type(e).__name__}, None

    filename = f"{uuid.uuid4().hex}{FORMAT_EXT[fmt]}"
    try:
        os.makedirs(upload_dir, exist_ok=True)
        with open(os.path.join(upload_dir, filename), "wb") as f:
            f.write(encoded)
    except OSError as e:
        return False, "write_failed", {**info, "exception": type(e).__name__}, None

    if original_filename:
        info = {**info, "original_filename": original_filename}
    return True, None, info, f"{UPLOAD_URL_PREFIX}{filename}"


def remove_uploaded_image(public_path: str | None, upload_dir: str) -> bool:
    """Delete a file previously returned by save_validated_image.

    Only bare filenames under ``upload_dir`` are touched. Returns True if a file was removed.
    """
    if not public_path or not public_path.startswith(UPLOAD_URL_PREFIX):
        return False
    name = public_path[len(UPLOAD_URL_PREFIX):]
    if not name or os.path.basename(name) != name or name.startswith("."):
        return False
    abs_path = os.path.join(upload_dir, name)
    if not os.path.isfile(abs_path):
        return False
    os.remove(abs_path)
    return True
