"""
Environment value helpers.
"""

from __future__ import annotations

import os


def sanitize_env_value(raw: str | None, fallback: str = "") -> str:
    value = (raw if raw is not None else fallback).strip()
    if len(value) >= 2 and ((value[0] == '"' and value[-1] == '"') or (value[0] == "'" and value[-1] == "'")):
        value = value[1:-1]
    # Netlify/Vercel dashboards sometimes leak literal escaped newlines.
    value = value.replace("\\n", "").replace("\\r", "").strip()
    return value or fallback


def env_int(name: str, default: int) -> int:
    """Read an integer env var, falling back to ``default`` when unset or malformed."""
    raw = sanitize_env_value(os.getenv(name))
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default
