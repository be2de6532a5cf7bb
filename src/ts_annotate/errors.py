"""Exception hierarchy for ts-annotate."""


class TsError(Exception):
    """Base exception for fatal ts-annotate errors."""


class ConfigurationError(TsError):
    """Raised when options or environment settings are invalid."""


class PatternCompileError(TsError):
    """Raised when a registered timestamp pattern fails to compile."""

    def __init__(self, index: int, regex: str, reason: str, offset: int | None) -> None:
        super().__init__(
            f"regex compilation error for pattern#{index}: '{regex}', "
            f"error='{reason}', offset={offset}"
        )
        self.index = index
        self.regex = regex
        self.reason = reason
        self.offset = offset


class TimeFormatError(TsError):
    """Raised when an output time format cannot be rendered."""


class ClockError(TsError):
    """Raised when the system clocks are unusable."""
