import logging
import os
import time

from ts_annotate.errors import ConfigurationError

DEFAULT_TZ = "UTC"

# Smallest buffer tried when probing an output format.
MIN_TIME_BUFSZ = 256
_DEFAULT_MAX_TIME_BUFSZ = 4096

_DEFAULT_LOG_LEVEL = "WARNING"


def value_or_default(default: str, env_var: str) -> str:
    """Return the value from the environment variable or the default."""
    value = os.environ.get(env_var)
    if not value:
        return default
    return value


def max_time_bufsz() -> int:
    """Ceiling for the output format buffer (TS_ANNOTATE_MAX_TIME_BUFSZ)."""
    raw = value_or_default(str(_DEFAULT_MAX_TIME_BUFSZ), "TS_ANNOTATE_MAX_TIME_BUFSZ")
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(
            f"TS_ANNOTATE_MAX_TIME_BUFSZ must be an integer, got {raw!r}"
        )
    if value < MIN_TIME_BUFSZ:
        raise ConfigurationError(
            f"TS_ANNOTATE_MAX_TIME_BUFSZ must be at least {MIN_TIME_BUFSZ}, got {value}"
        )
    return value


def log_level(verbose: bool = False) -> int:
    """Logging level from -v or TS_ANNOTATE_LOG_LEVEL."""
    if verbose:
        return logging.DEBUG
    name = value_or_default(_DEFAULT_LOG_LEVEL, "TS_ANNOTATE_LOG_LEVEL").upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ConfigurationError(f"TS_ANNOTATE_LOG_LEVEL is not a log level: {name}")
    return level


def apply_timezone() -> str:
    """Default TZ to UTC when unset or empty and apply it to the process."""
    tz = value_or_default(DEFAULT_TZ, "TZ")
    os.environ["TZ"] = tz
    time.tzset()
    return tz
