import re

DRIVE_ID_PATTERNS = (
    re.compile(r"/file/d/([a-zA-Z0-9_-]+)"),
    re.compile(r"id=([a-zA-Z0-9_-]+)"),
    re.compile(r"folders/([a-zA-Z0-9_-]+)"),
)


def extract_drive_file_id(url):
    """Return the Drive id from a sharing link, or None if no pattern matches."""
    for pattern in DRIVE_ID_PATTERNS:
        m = pattern.search(url or "")
        if m:
            return m.group(1)
    return None


def drive_preview_url(file_id):
    return f"https://drive.google.com/file/d/{file_id}/preview"
