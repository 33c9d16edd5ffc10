from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from flask import session as flask_session


class SessionRepository(Protocol):
    """Where a login/check-in session is persisted between requests."""

    def get(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def set(self, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class FlaskSessionRepository(SessionRepository):
    """Stores one namespaced entry in the signed Flask cookie session.

    Resolves ``flask.session`` at call time, so a single instance serves every request.
    """

    def __init__(self, key: str, *, permanent: bool = False):
        self._key = key
        self._permanent = permanent

    def get(self) -> Optional[Dict[str, Any]]:
        data = flask_session.get(self._key)
        return dict(data) if isinstance(data, dict) else None

    def set(self, data: Dict[str, Any]) -> None:
        flask_session.permanent = self._permanent
        flask_session[self._key] = dict(data)

    def clear(self) -> None:
        flask_session.pop(self._key, None)


class InMemorySessionRepository(SessionRepository):
    """Single-slot session store for scripts and tests."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data = dict(data) if data else None

    def get(self) -> Optional[Dict[str, Any]]:
        return dict(self._data) if self._data else None

    def set(self, data: Dict[str, Any]) -> None:
        self._data = dict(data)

    def clear(self) -> None:
        self._data = None
