from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from ..config import RenderConfig
from ..statement import Statement
from .base import RenderResult
from .registry import get as get_dialect

logger = logging.getLogger(__name__)


def _sqlforge_header_comment(result: RenderResult, extra: Optional[Dict[str, Any]] = None) -> str:
    meta = dict(result.metadata)
    meta["param_count"] = len(result.values)
    if extra:
        meta.update(extra)
    # single-line JSON so the header survives statement logs
    meta_json = json.dumps(meta, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return f"-- sqlforge:{meta_json}"


def emit(
    statement: Statement,
    dialect_name: Optional[str] = None,
    config: Optional[RenderConfig] = None,
) -> RenderResult:
    """
    Render ``statement`` with a registered dialect.

    The dialect is ``dialect_name`` or else the config's default. Options
    under ``config.dialect_options[name]`` configure a fresh dialect
    instance; ``inline_values`` switches to literal rendering and
    ``annotate`` prefixes the SQL with a metadata comment.
    """
    cfg = config or RenderConfig()
    name = dialect_name or cfg.default_dialect
    dialect = get_dialect(name)
    # options may be keyed by the canonical name or by the alias used here
    options = {**cfg.options_for(dialect.name), **cfg.options_for(name)}
    if options:
        dialect = dialect.configure(**options)
    rendered = dialect.render(statement, inline=cfg.inline_values)
    logger.debug(
        "rendered %s with %s (%d params)",
        rendered.metadata["statement"],
        dialect.name,
        len(rendered.values),
    )
    if not cfg.annotate:
        return rendered
    header = _sqlforge_header_comment(rendered)
    return RenderResult(sql=header + "\n" + rendered.sql, values=rendered.values, metadata=rendered.metadata)
