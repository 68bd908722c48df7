"""
Store abstraction for Firebase Realtime Database and an in-memory test implementation.

Paths are slash-separated, e.g. ``clientes/u1``. Collections are the first
path segment and hold records keyed by their id.
"""

from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Dict, Optional, Protocol

import firebase_admin
from firebase_admin import credentials
from firebase_admin import db as firebase_db

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "cadastro"


class DbClient(Protocol):
    """Interface for the hierarchical key-value store."""

    def get(self, path: str) -> Optional[Any]:
        ...

    def set(self, path: str, value: Any) -> None:
        ...

    def create_if_absent(self, path: str, value: Any) -> bool:
        """Write ``value`` only if nothing exists at ``path``; return True on write."""
        ...

    def delete(self, path: str) -> None:
        ...

    def list_all(self, collection: str) -> list[dict]:
        ...

    def find_by_field(self, collection: str, field: str, value: Any) -> list[dict]:
        ...


def _split(path: str) -> list[str]:
    return [segment for segment in path.strip("/").split("/") if segment]


def _children(value: Any) -> list[dict]:
    """Child records of a Firebase node, which arrives as a dict or a sparse list."""
    if not value:
        return []
    if isinstance(value, dict):
        return list(value.values())
    # Numeric keys come back as a list with None in the gaps.
    return [child for child in value if child is not None]


class InMemoryDbClient:
    """Simple in-memory store for development and tests."""

    def __init__(self):
        self.data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def _node(self, segments: list[str]) -> Optional[Any]:
        node: Any = self.data
        for segment in segments:
            if not isinstance(node, dict) or segment not in node:
                return None
            node = node[segment]
        return node

    def get(self, path: str) -> Optional[Any]:
        with self._lock:
            return copy.deepcopy(self._node(_split(path)))

    def _set_unlocked(self, segments: list[str], value: Any) -> None:
        node = self.data
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[segments[-1]] = copy.deepcopy(value)

    def set(self, path: str, value: Any) -> None:
        segments = _split(path)
        if not segments:
            raise ValueError("Cannot overwrite the store root")
        with self._lock:
            self._set_unlocked(segments, value)

    def create_if_absent(self, path: str, value: Any) -> bool:
        segments = _split(path)
        if not segments:
            raise ValueError("Cannot overwrite the store root")
        with self._lock:
            if self._node(segments) is not None:
                return False
            self._set_unlocked(segments, value)
            return True

    def delete(self, path: str) -> None:
        segments = _split(path)
        if not segments:
            raise ValueError("Cannot delete the store root")
        with self._lock:
            parent = self._node(segments[:-1])
            if isinstance(parent, dict):
                parent.pop(segments[-1], None)

    def list_all(self, collection: str) -> list[dict]:
        children = self.get(collection)
        if not isinstance(children, dict):
            return []
        return list(children.values())

    def find_by_field(self, collection: str, field: str, value: Any) -> list[dict]:
        return [
            child
            for child in self.list_all(collection)
            if isinstance(child, dict) and child.get(field) == value
        ]

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.data.clear()


class _AlreadyExists(Exception):
    pass


class FirebaseDbClient:
    """
    Firebase Realtime Database implementation backed by firebase-admin.

    Equality queries use ``order_by_child`` and need an ``.indexOn`` rule for
    the queried field (see database.rules.json).
    """

    def __init__(
        self,
        database_url: str,
        credentials_path: Optional[str] = None,
        app_name: str = FIREBASE_APP_NAME,
    ):
        if not database_url:
            raise ValueError("FIREBASE_DATABASE_URL is required for FirebaseDbClient")
        try:
            self.app = firebase_admin.get_app(app_name)
        except ValueError:
            cred = (
                credentials.Certificate(credentials_path)
                if credentials_path
                else credentials.ApplicationDefault()
            )
            self.app = firebase_admin.initialize_app(
                cred, {"databaseURL": database_url}, name=app_name
            )
            logger.info("Connected to Firebase Realtime Database at %s", database_url)

    def _ref(self, path: str):
        return firebase_db.reference(path, app=self.app)

    def get(self, path: str) -> Optional[Any]:
        return self._ref(path).get()

    def set(self, path: str, value: Any) -> None:
        self._ref(path).set(value)

    def create_if_absent(self, path: str, value: Any) -> bool:
        def _update(current):
            if current is not None:
                raise _AlreadyExists(path)
            return value

        try:
            self._ref(path).transaction(_update)
        except _AlreadyExists:
            return False
        return True

    def delete(self, path: str) -> None:
        self._ref(path).delete()

    def list_all(self, collection: str) -> list[dict]:
        return _children(self._ref(collection).get())

    def find_by_field(self, collection: str, field: str, value: Any) -> list[dict]:
        results = self._ref(collection).order_by_child(field).equal_to(value).get()
        return _children(results)
