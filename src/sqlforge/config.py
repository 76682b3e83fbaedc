"""
Render configuration.

Loads YAML/JSON files that pick the default dialect, the rendering mode
and per-dialect options, and returns typed config objects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderConfig:
    """How ``emit`` renders statements."""

    default_dialect: str = "postgres"
    inline_values: bool = False
    annotate: bool = False  # prefix the SQL with a ``-- sqlforge:{...}`` header
    dialect_options: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> RenderConfig:
        options = d.get("dialect_options") or {}
        if not isinstance(options, dict) or not all(isinstance(v, dict) for v in options.values()):
            raise ValueError("dialect_options must map dialect names to option mappings")
        return cls(
            default_dialect=str(d.get("default_dialect", "postgres")).lower(),
            inline_values=bool(d.get("inline_values", False)),
            annotate=bool(d.get("annotate", False)),
            dialect_options={str(k).lower(): dict(v) for k, v in options.items()},
        )

    def options_for(self, dialect_name: str) -> Dict[str, Any]:
        return dict(self.dialect_options.get(dialect_name.lower(), {}))


def load_render_config(path: str) -> RenderConfig:
    """
    Load a render configuration from a YAML or JSON file.

    The file must contain a mapping. Recognised keys are default_dialect,
    inline_values, annotate and dialect_options, e.g.::

        default_dialect: mysql
        dialect_options:
          mysql:
            default_string_length: 191
    """
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    obj = yaml.safe_load(text)
    if not isinstance(obj, dict):
        raise ValueError(f"Render config must be a YAML/JSON object, got {type(obj).__name__}")
    config = RenderConfig.from_dict(obj)
    logger.info("loaded render config from %s (default dialect %s)", p, config.default_dialect)
    return config
