from __future__ import annotations

from .base import Dialect
from .registry import register


class CommonDialect(Dialect):
    """Portable SQL with the base defaults: ``"`` quotes, ``?`` markers, no vendor extensions."""

    name = "common"


register(CommonDialect())
