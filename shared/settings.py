"""Runtime settings shared by the CLI processor and the HTTP service."""
import os

# 5*10e6 in the legacy tool, i.e. fifty million decompressed bytes.
BYTE_CEILING = 50_000_000

# Values are emitted at this many nested arrays: 1 = elements of the outer array.
ARRAY_ELEMENT_DEPTH = 1

PROGRESS_EVERY = 100_000

BYTE_CEILING_ENV = "GALAXY_BYTE_CEILING"


def byte_ceiling_from_env(default: int = BYTE_CEILING) -> int:
    """Return the byte ceiling, honouring GALAXY_BYTE_CEILING when set."""
    raw = os.environ.get(BYTE_CEILING_ENV, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{BYTE_CEILING_ENV} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{BYTE_CEILING_ENV} must be positive, got {value}")
    return value


def in_container() -> bool:
    return "IN_CONTAINER" in os.environ
