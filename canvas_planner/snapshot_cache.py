import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from typing import Iterable, List

from .models.assignment import Assignment

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class SnapshotCacheError(ValueError):
    """Raised when the cache file cannot be trusted as a snapshot."""


class SnapshotCache:
    """
    Stores the last assignment snapshot seen by the daily update.

    The file is read and written whole. Anything that is not a snapshot of
    the current schema version is rejected instead of partially parsed.
    """

    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[Assignment]:
        if not os.path.exists(self.path):
            logger.info(f"No snapshot at {self.path}, starting empty")
            return []

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotCacheError(f"Snapshot {self.path} is not valid JSON: {e}")

        if not isinstance(document, dict) or document.get('version') != SCHEMA_VERSION:
            found = document.get('version') if isinstance(document, dict) else None
            raise SnapshotCacheError(
                f"Snapshot {self.path} has schema version {found!r}, expected {SCHEMA_VERSION}"
            )

        entries = document.get('assignments')
        if not isinstance(entries, list):
            raise SnapshotCacheError(f"Snapshot {self.path} has no assignment list")

        try:
            assignments = [Assignment.from_dict(entry) for entry in entries]
        except (KeyError, TypeError) as e:
            raise SnapshotCacheError(f"Snapshot {self.path} has a malformed assignment: {e}")

        logger.debug(f"Loaded {len(assignments)} assignments from {self.path}")
        return assignments

    def save(self, assignments: Iterable[Assignment]) -> None:
        document = {
            'version': SCHEMA_VERSION,
            'saved_at': datetime.now(timezone.utc).isoformat(),
            'assignments': [assignment.to_dict() for assignment in assignments],
        }
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.snapshot-', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.info(f"Saved {len(document['assignments'])} assignments to {self.path}")
