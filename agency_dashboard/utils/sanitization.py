import re

_TAG_RE = re.compile(r"<[^>]*>")


def sanitize_string(v):
    """Strip HTML tags and surrounding whitespace from free-text input."""
    if not isinstance(v, str):
        return v
    return _TAG_RE.sub("", v).strip()


def is_image_data_url(v: str) -> bool:
    return isinstance(v, str) and v.startswith("data:image/")
