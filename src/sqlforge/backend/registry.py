"""
Dialects by name.

Every dialect module registers one instance at import. A dialect is found
under its ``name`` and under each of its ``aliases`` (``pg`` and
``postgresql`` for postgres, say); matching ignores case. ``available``
lists canonical names only.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List

if TYPE_CHECKING:
    from .base import Dialect

logger = logging.getLogger(__name__)

_REGISTRY: Dict[str, "Dialect"] = {}
# alias -> canonical name
_ALIASES: Dict[str, str] = {}


def _lookup_keys(dialect: "Dialect") -> List[str]:
    name = getattr(dialect, "name", None)
    if not name or not isinstance(name, str):
        raise ValueError("Dialect must define a non-empty .name")
    aliases = [a.lower() for a in getattr(dialect, "aliases", ()) if a]
    return [name.lower()] + [a for a in aliases if a != name.lower()]


def register(dialect: "Dialect") -> "Dialect":
    """
    Make ``dialect`` available by name and alias, replacing any earlier
    dialect of the same name. A name or alias already held by a different
    dialect is a ValueError.
    """
    key, *aliases = _lookup_keys(dialect)
    if key in _ALIASES:
        raise ValueError(f"Dialect name '{key}' is already an alias of '{_ALIASES[key]}'")
    for alias in aliases:
        owner = alias if alias in _REGISTRY else _ALIASES.get(alias)
        if owner is not None and owner != key:
            raise ValueError(f"Alias '{alias}' of '{key}' is already taken by '{owner}'")

    # drop aliases left behind by a replaced instance
    for alias in [a for a, owner in _ALIASES.items() if owner == key]:
        del _ALIASES[alias]
    _REGISTRY[key] = dialect
    for alias in aliases:
        _ALIASES[alias] = key
    logger.debug("registered dialect %s (%s) aliases=%s", key, type(dialect).__name__, aliases)
    return dialect


def resolve(name: str) -> str:
    """Canonical registered name for ``name`` or one of its aliases."""
    k = (name or "").lower()
    k = _ALIASES.get(k, k)
    if k not in _REGISTRY:
        known = ", ".join(sorted(_REGISTRY.keys()))
        raise KeyError(f"Unknown dialect '{name}'. Available: {known}")
    return k


def get(name: str) -> "Dialect":
    return _REGISTRY[resolve(name)]


def available() -> Dict[str, "Dialect"]:
    return dict(_REGISTRY)


def aliases() -> Dict[str, str]:
    return dict(_ALIASES)
