"""Library flags read from environment variables."""

import os


def _env_bool(name: str, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    return os.getenv(name, str(default)).strip().lower() in ("true", "1", "yes")


# Include converted values in DEBUG logs instead of a mask
TRACE_VALUES = _env_bool("READENV_TRACE_VALUES", False)

VALUE_MASK = "***"
