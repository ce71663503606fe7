from .url_guard import GuardVerdict, check_url, is_allowed, normalize_host, parse_candidate

__all__ = ["GuardVerdict", "check_url", "is_allowed", "normalize_host", "parse_candidate"]
