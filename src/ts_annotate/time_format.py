"""
Output time formats.

User formats are strftime formats with one extension: the placeholders
``%.S``, ``%.s`` and ``%.T`` mean "that directive followed by
microseconds". In relative mode microseconds are meaningless for a
rounded duration, so the placeholders collapse to their base directive.
Otherwise they expand to the directive plus a ``.000000`` marker that is
overwritten with the real sub-second value after strftime has run.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum

from ts_annotate.config import MIN_TIME_BUFSZ, max_time_bufsz
from ts_annotate.errors import TimeFormatError

logger: logging.Logger = logging.getLogger(__name__)

MICROSECOND_SPECIFIERS = ("S", "s", "T")
MICROSECOND_MARKER = ".000000"


class SanitiseOp(Enum):
    COLLAPSE = "COLLAPSE"
    EXPAND = "EXPAND"


@dataclass(frozen=True)
class SanitisedFormat:
    format: str
    n_microsecond_specifiers: int


def microsecond_placeholder_at(fmt: str, pos: int) -> str | None:
    """Return the directive letter if a %.X placeholder starts at pos."""
    if (
        pos + 2 < len(fmt)
        and fmt[pos] == "%"
        and fmt[pos + 1] == "."
        and fmt[pos + 2] in MICROSECOND_SPECIFIERS
    ):
        return fmt[pos + 2]
    return None


def count_microsecond_specifiers(fmt: str) -> int:
    count = 0
    i = 0
    while i < len(fmt):
        if microsecond_placeholder_at(fmt, i) is not None:
            count += 1
            i += 3
        else:
            i += 1
    return count


def sanitise_time_format(fmt: str, op: SanitiseOp) -> SanitisedFormat:
    """Rewrite microsecond placeholders in fmt for strftime."""
    out: list[str] = []
    count = 0
    i = 0
    while i < len(fmt):
        spec = microsecond_placeholder_at(fmt, i)
        if spec is None:
            out.append(fmt[i])
            i += 1
            continue
        count += 1
        out.append("%" + spec)
        if op is SanitiseOp.EXPAND:
            out.append(MICROSECOND_MARKER)
        i += 3
    return SanitisedFormat(format="".join(out), n_microsecond_specifiers=count)


def _strftime(fmt: str, tm: time.struct_time) -> str:
    try:
        return time.strftime(fmt, tm)
    except (ValueError, UnicodeError) as e:
        raise TimeFormatError(f"strftime: invalid format {fmt!r}: {e}") from e


@dataclass(frozen=True)
class FormatBuffer:
    """Output size budget for one validated strftime format.

    bufsz counts the trailing NUL the way a C buffer would, so rendered
    text must be strictly shorter than bufsz bytes.
    """

    format: str
    bufsz: int

    def fits(self, text: str) -> bool:
        return len(text.encode("utf-8")) < self.bufsz

    def render(self, tm: time.struct_time) -> str:
        text = _strftime(self.format, tm)
        if not self.fits(text):
            logger.debug(f"Rendered timestamp exceeds {self.bufsz} bytes, dropped")
            return ""
        return text


def validate_time_format(fmt: str, max_bufsz: int | None = None) -> FormatBuffer:
    """Probe increasing buffer sizes until fmt renders.

    Starts at MIN_TIME_BUFSZ and doubles up to max_bufsz. An empty
    rendering is legitimate.

    Raises:
        TimeFormatError: If fmt is invalid or its output needs more than
            max_bufsz bytes
    """
    if max_bufsz is None:
        max_bufsz = max_time_bufsz()
    probe = _strftime(fmt, time.gmtime(0))
    needed = len(probe.encode("utf-8")) + 1

    bufsz = MIN_TIME_BUFSZ
    while bufsz < needed and bufsz < max_bufsz:
        bufsz = bufsz * 2 if bufsz < max_bufsz // 2 else max_bufsz
    if bufsz < needed:
        raise TimeFormatError(
            f"strftime: format output needs {needed} bytes, more than the maximum of {max_bufsz}"
        )
    logger.debug(f"Format {fmt!r} validated with buffer size {bufsz}")
    return FormatBuffer(format=fmt, bufsz=bufsz)


def fill_microseconds(text: str, nanoseconds: int, n_specifiers: int) -> str:
    """Overwrite the first n_specifiers microsecond markers in text."""
    if not text or n_specifiers == 0:
        return text
    micros = f".{nanoseconds // 1000:06d}"
    return text.replace(MICROSECOND_MARKER, micros, n_specifiers)
