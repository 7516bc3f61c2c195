from __future__ import annotations

from typing import Any, Dict

_SENSITIVE_KEYS = {
    "email",
    "phone",
    "authorization",
    "access_token",
    "api_key",
    "apikey",
    "password",
    "secret",
    "token",
}

REDACTED = "[REDACTED]"


def _is_sensitive(key: str) -> bool:
    key_lower = key.lower()
    return key_lower in _SENSITIVE_KEYS or key_lower.endswith(("_token", "_secret", "_password"))


def redact_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: (REDACTED if _is_sensitive(str(key)) else redact_value(val)) for key, val in value.items()}
    if isinstance(value, list):
        return [redact_value(item) for item in value]
    return value


def redact_args(args: Dict[str, Any], enabled: bool = True) -> Dict[str, Any]:
    """
    Mask sensitive tool arguments (nested dicts included) before logging.

    Whether to redact comes from RuntimeConfig.redact_tool_args.
    """

    if not enabled:
        return dict(args)
    return redact_value(dict(args))
