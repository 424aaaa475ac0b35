"""JSON file persistence for tracking snapshots.

The scheduler only talks to the SnapshotStore protocol in tracking.scheduler;
JsonSnapshotStore is the file-backed implementation used by the CLI. The file
holds::

    {
      "daily_totals": [{"date": "2026-10-16", "total_coding_minutes": 42.5, ...}],
      "file_records": {"/src/app.ts": {"identity": "/src/app.ts", ...}}
    }
"""

from __future__ import annotations

import json
import os
import tempfile
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Union

from ..exceptions import PersistenceError
from ..logging_config import get_logger
from ..tracking.models import Snapshot

logger = get_logger(__name__)


class JsonSnapshotStore:
    """Stores one Snapshot as a JSON document on disk.

    A missing file loads as an empty snapshot. Writes go through a temporary
    file in the same directory and replace the target in one step.

    Args:
        path: Location of the JSON file
        clock: Time source used to date retention cut-offs
    """

    def __init__(self, path: Union[str, Path], clock: Callable[[], float] = time.time) -> None:
        self.path = Path(path)
        self._clock = clock

    def load_snapshot(self) -> Snapshot:
        """Read the stored snapshot.

        Raises:
            PersistenceError: If the file exists but cannot be read or decoded
        """
        if not self.path.exists():
            logger.debug(f"No snapshot file at {self.path}")
            return Snapshot()

        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
            snapshot = Snapshot.from_dict(raw)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise PersistenceError(self.path, str(e)) from e

        logger.debug(
            f"Loaded snapshot: {len(snapshot.daily_totals)} days, "
            f"{len(snapshot.file_records)} files from {self.path}"
        )
        return snapshot

    def save_snapshot(self, snapshot: Snapshot) -> None:
        """Write ``snapshot``, replacing the stored one.

        Raises:
            PersistenceError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(snapshot.to_dict(), f, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(self.path, str(e)) from e

        logger.info(
            f"Saved snapshot with {len(snapshot.daily_totals)} days and "
            f"{len(snapshot.file_records)} files to {self.path}"
        )

    def prune_old_metrics(self, retention_days: int = 90) -> int:
        """Drop daily totals dated before ``today - retention_days``.

        Returns:
            Number of daily entries removed
        """
        snapshot = self.load_snapshot()
        today = datetime.fromtimestamp(self._clock(), tz=timezone.utc).date()
        cutoff = (today - timedelta(days=retention_days)).isoformat()

        kept = [t for t in snapshot.daily_totals if t.date >= cutoff]
        removed = len(snapshot.daily_totals) - len(kept)
        self.save_snapshot(Snapshot(daily_totals=kept, file_records=snapshot.file_records))

        logger.info(f"Pruned {removed} daily entries older than {cutoff}")
        return removed
