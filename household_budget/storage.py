"""Key-value record store for the persisted ledger.

Each key maps to one JSON file in the store directory.  Reads are
forgiving: a missing, unreadable or corrupt record yields a fresh ledger
built from ``INITIAL_STORAGE``, and keys absent from an older record are
defaulted.  Writes are best effort: I/O and serialization failures are
logged and reported through the return value, never raised, so the
in-memory ledger keeps serving reads.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

from .config import STORAGE_KEY, STORE_DIR
from .exceptions import StaleLedgerError
from .ledger import Ledger
from .lib.common.file_operations import ensure_directory, safe_filename

logger = logging.getLogger(__name__)


class LedgerStore:
    """Handles ledger record storage operations."""

    def __init__(self, store_dir: Optional[Path] = None):
        """Initialize the record store.

        Args:
            store_dir: Optional custom directory for record files.
                       Defaults to STORE_DIR from config.
        """
        self.store_dir = Path(store_dir) if store_dir else STORE_DIR
        ensure_directory(self.store_dir)

    def get_path(self, key: str = STORAGE_KEY) -> Path:
        """Get the file path for a record key."""
        return self.store_dir / f"{safe_filename(key, default='ledger')}.json"

    def read(self, key: str = STORAGE_KEY) -> Optional[Dict[str, Any]]:
        """Return the raw stored record, or ``None`` when absent or unreadable."""
        target = self.get_path(key)
        if not target.exists():
            return None
        try:
            with target.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to read ledger record %s: %s", target, e)
            return None
        if not isinstance(data, dict):
            logger.error("Ignoring ledger record %s: expected an object", target)
            return None
        return data

    def load(self, key: str = STORAGE_KEY) -> Ledger:
        """Load the ledger stored under ``key``.

        A record that parses as JSON but does not describe a ledger is
        copied aside to ``<key>.json.corrupt`` and replaced by a fresh
        ledger carrying the stored revision, so the next save still
        passes the stale-write check.

        Returns:
            The stored ledger with absent keys defaulted, or a fresh ledger
            when nothing usable is stored
        """
        data = self.read(key)
        if data is None:
            return Ledger()
        try:
            return Ledger.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Ledger record %s is malformed, starting fresh: %s", key, e)
            self._keep_copy(self.get_path(key))
            revision = data.get('revision', 0)
            if not isinstance(revision, int) or isinstance(revision, bool):
                revision = 0
            return Ledger(revision=revision)

    @staticmethod
    def _keep_copy(target: Path) -> None:
        backup = target.with_suffix('.json.corrupt')
        try:
            shutil.copyfile(target, backup)
        except OSError as e:
            logger.error("Could not keep a copy of %s: %s", target, e)
        else:
            logger.warning("Kept the unreadable record as %s", backup)

    def save(self, ledger: Ledger, key: str = STORAGE_KEY) -> bool:
        """Write the ledger under ``key``.

        Returns:
            True when the record was written, False when the write failed

        Raises:
            StaleLedgerError: If the stored record has a newer revision
        """
        stored = self.read(key)
        if stored is not None:
            stored_revision = stored.get('revision', 0)
            if isinstance(stored_revision, int) and stored_revision > ledger.revision:
                raise StaleLedgerError(
                    f"Refusing to overwrite revision {stored_revision} with revision {ledger.revision}"
                )

        target = self.get_path(key)
        tmp = target.with_suffix('.json.tmp')
        try:
            payload = json.dumps(ledger.to_dict(), indent=2, sort_keys=True, ensure_ascii=False)
            ensure_directory(target.parent)
            with tmp.open('w', encoding='utf-8') as handle:
                handle.write(payload)
            os.replace(tmp, target)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write ledger record %s: %s", target, e)
            with contextlib.suppress(OSError):
                tmp.unlink()
            return False
        logger.debug("Saved ledger revision %d to %s", ledger.revision, target)
        return True

    def delete(self, key: str = STORAGE_KEY) -> None:
        """Delete a stored record; missing records are ignored.

        Raises:
            OSError: If the file exists but cannot be deleted
        """
        target = self.get_path(key)
        if not target.exists():
            return
        try:
            target.unlink()
        except OSError as e:
            raise OSError(f"Failed to delete ledger record {target}: {e}") from e
