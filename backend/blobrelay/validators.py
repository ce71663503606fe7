from __future__ import annotations

import re

FINGERPRINT_LEN = 12

# Extensions accepted by the uploader; the public read path serves the same set.
ALLOWED_EXTENSIONS = frozenset(
    {
        ".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg",
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        ".txt", ".csv", ".json", ".xml", ".html", ".css", ".js",
        ".zip", ".rar", ".7z", ".tar", ".gz",
        ".mp4", ".mp3", ".wav", ".avi", ".mov",
        ".md", ".rtf",
    }
)

_EXT_ALTERNATION = "|".join(sorted(re.escape(e[1:]) for e in ALLOWED_EXTENSIONS))
BLOB_KEY_RE = re.compile(rf"^[a-f0-9]{{{FINGERPRINT_LEN}}}\.({_EXT_ALTERNATION})$")


def extension_of(filename: str) -> str:
    """Lowercased extension including the dot, or '' when there is none."""
    lower = (filename or "").lower()
    dot = lower.rfind(".")
    if dot < 0:
        return ""
    return lower[dot:]


def is_allowed_extension(ext: str) -> bool:
    return ext in ALLOWED_EXTENSIONS


def is_blob_key(name: str) -> bool:
    return isinstance(name, str) and BLOB_KEY_RE.fullmatch(name) is not None

