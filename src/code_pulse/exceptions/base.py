"""Base exception for Code Pulse."""

from typing import Any, Dict, Mapping, Optional


class CodePulseError(Exception):
    """Base exception for all Code Pulse errors.

    ``details`` values are stored as strings so every error renders and
    serializes the same way, whatever the caller passed in.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, str] = {k: str(v) for k, v in (details or {}).items()}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Machine-readable form, used for ``--json`` error output."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": dict(self.details),
        }
