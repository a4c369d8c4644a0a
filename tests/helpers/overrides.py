from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import FastAPI

Dependency = Callable[..., Any]
_MISSING = object()


class DependencyOverrides:
    """Sets `app.dependency_overrides` entries and restores the previous state on reset."""

    def __init__(self, app: FastAPI) -> None:
        self._app = app
        self._saved: dict[Dependency, Any] = {}

    def set(self, dependency: Dependency, override: Dependency) -> None:
        overrides = self._app.dependency_overrides
        self._saved.setdefault(dependency, overrides.get(dependency, _MISSING))
        overrides[dependency] = override

    def reset(self) -> None:
        overrides = self._app.dependency_overrides
        for dependency, previous in self._saved.items():
            if previous is _MISSING:
                overrides.pop(dependency, None)
            else:
                overrides[dependency] = previous
        self._saved.clear()
