# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-09
# Updated: 2026-10-12
# Description: settings.py
# -----------------------------------------------------------------------------
import os


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_float(name: str, default: float) -> float:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return float(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be a float, got {v!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name, "")
    if v == "":
        return default
    v = v.lower()
    if v in ("1", "true", "t", "yes", "y", "on"):
        return True
    if v in ("0", "false", "f", "no", "n", "off"):
        return False
    raise RuntimeError(f"Env var {name} must be a boolean, got {v!r}")


# -----------------------------------------------------------------------------
# API defaults (env-controlled)
# -----------------------------------------------------------------------------
# Number of cases returned by the plain listing endpoint
CASE_LIST_LIMIT = _env_int("HRCM_CASE_LIST_LIMIT", 10)

# Upper bound accepted for ?top_k= on the related endpoint
MAX_TOP_K = _env_int("HRCM_MAX_TOP_K", 50)


# -----------------------------------------------------------------------------
# Sanity checks
# -----------------------------------------------------------------------------
if CASE_LIST_LIMIT < 1:
    raise RuntimeError("CASE_LIST_LIMIT must be >= 1")

if MAX_TOP_K < 1:
    raise RuntimeError("MAX_TOP_K must be >= 1")
