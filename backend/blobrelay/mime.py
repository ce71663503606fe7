from __future__ import annotations

DEFAULT_MIME = "application/octet-stream"

MIME_TYPES: dict[str, str] = {
    "jpg": "image/jpeg", "jpeg": "image/jpeg", "png": "image/png",
    "gif": "image/gif", "webp": "image/webp", "svg": "image/svg+xml",
    "bmp": "image/bmp", "ico": "image/x-icon", "tiff": "image/tiff", "tif": "image/tiff",
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "odt": "application/vnd.oasis.opendocument.text",
    "ods": "application/vnd.oasis.opendocument.spreadsheet",
    "odp": "application/vnd.oasis.opendocument.presentation",
    "txt": "text/plain", "csv": "text/csv", "json": "application/json",
    "xml": "application/xml", "html": "text/html", "css": "text/css", "js": "application/javascript",
    "yaml": "text/yaml", "yml": "text/yaml", "toml": "application/toml",
    "zip": "application/zip", "rar": "application/x-rar-compressed", "7z": "application/x-7z-compressed",
    "tar": "application/x-tar", "gz": "application/gzip", "bz2": "application/x-bzip2",
    "mp4": "video/mp4", "mp3": "audio/mpeg", "wav": "audio/wav",
    "avi": "video/x-msvideo", "mov": "video/quicktime", "mkv": "video/x-matroska",
    "flac": "audio/flac", "ogg": "audio/ogg",
    "md": "text/markdown", "rtf": "application/rtf", "tex": "application/x-tex", "log": "text/plain",
}


def mime_for(filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return MIME_TYPES.get(ext, DEFAULT_MIME)
