"""Per-user document storage for ledger collections."""

import copy
import json
import threading
from contextlib import contextmanager
from typing import Dict, List

COLLECTIONS = ("accounts", "categories", "transactions")


class LedgerStore:
    """Get-all / replace-all storage of a user's collections.

    Each (user, collection) pair is one JSON array in the ``ledger_documents``
    table. Reads are served from an in-memory cache that is only refreshed
    after a successful commit, so a failed write never leaks into later reads.

    Args:
        db_manager: Database manager providing ``connect()`` and ``transaction()``.
    """

    def __init__(self, db_manager):
        self.db_manager = db_manager
        self._cache: Dict[tuple, list] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def load_all(self, user_id: str, collection: str) -> List[dict]:
        """Load every item of a collection.

        Args:
            user_id: Owner of the collection.
            collection: One of ``accounts``, ``categories``, ``transactions``.

        Returns:
            A deep copy of the stored document; an empty list if nothing is
            stored. Legacy documents are returned in their stored shape and
            normalized by the caller.
        """
        _check_collection(collection)
        key = (user_id, collection)
        if key not in self._cache:
            with self.db_manager.connect() as conn:
                row = conn.execute(
                    "SELECT payload FROM ledger_documents WHERE user_id = ? AND collection = ?",
                    (user_id, collection),
                ).fetchone()
            # A commit that landed after the SELECT has already cached newer data
            self._cache.setdefault(key, json.loads(row[0]) if row else [])
        return copy.deepcopy(self._cache[key])

    def save_all(self, user_id: str, collection: str, items: List[dict]) -> None:
        """Replace a collection. Durable when the call returns."""
        self.save_many(user_id, {collection: items})

    def save_many(self, user_id: str, documents: Dict[str, List[dict]]) -> None:
        """Replace several collections in a single database transaction.

        Args:
            user_id: Owner of the collections.
            documents: Mapping of collection name to its complete new contents.

        Raises:
            ValueError: If a collection name is unknown.
            sqlite3.Error: If the write fails; nothing is changed in that case.
        """
        for collection in documents:
            _check_collection(collection)

        with self.db_manager.transaction() as conn:
            for collection, items in documents.items():
                conn.execute(
                    """
                    INSERT INTO ledger_documents (user_id, collection, payload, updated_at)
                    VALUES (?, ?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT (user_id, collection)
                    DO UPDATE SET payload = excluded.payload, updated_at = excluded.updated_at
                    """,
                    (user_id, collection, json.dumps(items)),
                )

        for collection, items in documents.items():
            self._cache[(user_id, collection)] = copy.deepcopy(items)

    def clear_cache(self) -> None:
        """Drop all cached documents."""
        self._cache.clear()

    @contextmanager
    def lock(self, user_id: str):
        """Serialize mutations of one user's collections."""
        with self._locks_guard:
            user_lock = self._locks.setdefault(user_id, threading.RLock())
        with user_lock:
            yield


def _check_collection(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}")
