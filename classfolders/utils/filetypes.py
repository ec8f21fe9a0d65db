import random
import string
import time
from urllib.parse import urlparse

from werkzeug.utils import secure_filename

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}
VIDEO_EXTENSIONS = {"mp4", "mov", "avi", "mkv"}

_BASE36 = string.digits + string.ascii_lowercase


def _extension(filename: str):
    return filename.rsplit(".", 1)[1].lower() if "." in (filename or "") else ""


def detect_file_type(mimetype: str, filename: str) -> str:
    """Map an upload to one of pdf / mp4 / img from its MIME type and name."""
    mimetype = mimetype or ""
    ext = _extension(filename)
    if mimetype.startswith("image/") or ext in IMAGE_EXTENSIONS:
        return "img"
    if mimetype.startswith("video/") or ext in VIDEO_EXTENSIONS:
        return "mp4"
    return "pdf"


def make_storage_key(filename: str, now=None) -> str:
    """uploads/<epoch-ms>-<9 base36 chars>.<original extension>"""
    ms = int((now if now is not None else time.time()) * 1000)
    suffix = "".join(random.choices(_BASE36, k=9))
    ext = secure_filename((filename or "").rsplit(".", 1)[-1]) or "bin"
    return f"uploads/{ms}-{suffix}.{ext}"


def storage_key_from_url(url: str) -> str:
    """Last two path segments of a bucket URL, i.e. uploads/<name>."""
    path = urlparse(url).path
    return "/".join(path.rstrip("/").split("/")[-2:])


def preview_element(record) -> str:
    """Which element shows a file row inline: iframe, img or video."""
    if record.get("is_drive_link"):
        return "iframe"
    return {"img": "img", "mp4": "video"}.get(record.get("file_type"), "iframe")
