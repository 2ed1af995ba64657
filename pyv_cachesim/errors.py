from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a cache level or simulator configuration is invalid."""

    def __init__(self, message: str, level: str | None = None, field: str | None = None):
        self.level = level
        self.field = field
        prefix = ""
        if level is not None:
            prefix = f"[{level}] "
        if field is not None:
            prefix += f"{field}: "
        super().__init__(f"{prefix}{message}")


class TraceFormatError(ValueError):
    """Raised by the trace reader for a line it cannot turn into an address."""

    def __init__(self, message: str, path: str = "<trace>", line_no: int = 0):
        self.path = path
        self.line_no = line_no
        super().__init__(f"{path}:{line_no}: {message}")


class InvariantViolation(RuntimeError):
    """Internal bookkeeping went out of range. Indicates a bug, not bad input."""
