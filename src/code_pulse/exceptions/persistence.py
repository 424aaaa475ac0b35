"""Persistence exceptions raised at the snapshot storage boundary."""

from pathlib import Path
from typing import Union

from .base import CodePulseError


class PersistenceError(CodePulseError):
    """Raised when a snapshot cannot be loaded or saved."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(
            f"Snapshot storage failed: {path}",
            details={"path": path, "reason": reason},
        )
        self.path = Path(path)
        self.reason = reason
