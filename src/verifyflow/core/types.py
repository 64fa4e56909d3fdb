"""Type aliases used across verifyflow."""

from __future__ import annotations

from typing import Any, Callable

JsonDict = dict[str, Any]
EventHandler = Callable[[str, JsonDict], None]
