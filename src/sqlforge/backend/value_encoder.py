"""
Inline literal formatting.

Every ``Value`` kind has one literal form per dialect. Dialects select the
string escape style with ``string_escape`` and override the ``*_literal``
hooks for bytes, booleans, arrays and the other forms that differ.
"""

from __future__ import annotations

import datetime as dt
import json
import math
import struct
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, NoReturn, Optional

from ..errors import ValueTypeMismatchError
from ..value import Value, ValueKind

if TYPE_CHECKING:
    from .writer import SqlWriter


class StringEscape(str, Enum):
    BACKSLASH = "backslash"  # MySQL: \' \\ \n ...
    POSTGRES = "postgres"  # '' plus E'...' backslash escapes for control characters
    DOUBLE_QUOTE = "double_quote"  # '' only


_BACKSLASH_ESCAPES: Dict[str, str] = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\0": "\\0",
    "\b": "\\b",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\x1a": "\\Z",
}
_BACKSLASH_UNESCAPES = {v[1]: k for k, v in _BACKSLASH_ESCAPES.items()}

# Characters that switch a Postgres literal to the E'...' form.
_PG_ESCAPES: Dict[str, str] = {
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}
_PG_UNESCAPES = {v[1]: k for k, v in _PG_ESCAPES.items()}


def format_double(f: float) -> str:
    """Shortest round-trip digits, positional notation, no trailing ``.0``."""
    if math.isnan(f):
        return "NaN"
    if math.isinf(f):
        return "inf" if f > 0 else "-inf"
    text = format(Decimal(repr(f)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_float(f: float) -> str:
    """Like ``format_double`` using the shortest digits that survive a 32-bit round trip."""
    if math.isnan(f) or math.isinf(f):
        return format_double(f)
    (single,) = struct.unpack("f", struct.pack("f", f))
    for digits in range(1, 18):
        text = f"{single:.{digits}g}"
        if struct.unpack("f", struct.pack("f", float(text)))[0] == single:
            return format_double(float(text))
    return format_double(single)


def format_time(t: dt.time) -> str:
    out = f"{t.hour:02d}:{t.minute:02d}:{t.second:02d}"
    if t.microsecond:
        out += f".{t.microsecond:06d}"
    return out


def format_offset(offset: Optional[dt.timedelta]) -> str:
    seconds = int((offset or dt.timedelta(0)).total_seconds())
    sign = "-" if seconds < 0 else "+"
    seconds = abs(seconds)
    return f"{sign}{seconds // 3600:02d}:{seconds % 3600 // 60:02d}"


class ValueEncoder:
    string_escape = StringEscape.BACKSLASH
    offset_separator = " "

    name: str

    def unsupported(self, feature: str, remediation: Optional[str] = None) -> NoReturn:
        raise NotImplementedError

    # -- strings --------------------------------------------------------------

    def escape_string(self, s: str) -> str:
        if self.string_escape is StringEscape.BACKSLASH:
            return "".join(_BACKSLASH_ESCAPES.get(ch, ch) for ch in s)
        if self.string_escape is StringEscape.POSTGRES:
            return "".join("''" if ch == "'" else _PG_ESCAPES.get(ch, ch) for ch in s)
        return s.replace("'", "''")

    def unescape_string(self, s: str) -> str:
        if self.string_escape is StringEscape.DOUBLE_QUOTE:
            return s.replace("''", "'")
        table = _BACKSLASH_UNESCAPES if self.string_escape is StringEscape.BACKSLASH else _PG_UNESCAPES
        out = []
        i = 0
        while i < len(s):
            ch = s[i]
            if ch == "\\" and i + 1 < len(s):
                out.append(table.get(s[i + 1], s[i + 1]))
                i += 2
            elif ch == "'" and s[i + 1 : i + 2] == "'":
                out.append("'")
                i += 2
            else:
                out.append(ch)
                i += 1
        return "".join(out)

    def quote_string(self, s: str) -> str:
        escaped = self.escape_string(s)
        if self.string_escape is StringEscape.POSTGRES and any(ch in _PG_ESCAPES for ch in s):
            return f"E'{escaped}'"
        return f"'{escaped}'"

    # -- literal hooks --------------------------------------------------------

    def bool_literal(self, b: bool) -> str:
        return "TRUE" if b else "FALSE"

    def bytes_literal(self, b: bytes) -> str:
        return f"X'{b.hex().upper()}'"

    def date_time_literal(self, v: dt.datetime, with_offset: bool) -> str:
        text = f"{v.date().isoformat()} {format_time(v.time())}"
        if with_offset:
            text += self.offset_separator + format_offset(v.utcoffset())
        return self.quote_string(text)

    def json_literal(self, obj: Any) -> str:
        return self.quote_string(json.dumps(obj, separators=(",", ":"), ensure_ascii=False))

    def array_items(self, v: Value) -> List[str]:
        """Inline literals for the elements of a non-NULL array value."""
        if v.element_type is None:
            raise ValueTypeMismatchError("An array value needs its element type")
        kind = v.element_type.element_kind
        return [self.value_to_string(Value(kind, item)) for item in v.payload]

    def array_literal(self, v: Value) -> str:
        self.unsupported("array values", remediation="Store the items in a child table or as JSON")

    def vector_literal(self, v: Value) -> str:
        self.unsupported("vector values")

    def range_literal(self, v: Value) -> str:
        self.unsupported("range values")

    def check_bindable(self, v: Value) -> None:
        """Reject kinds the dialect cannot bind, even as parameters."""
        if v.kind is ValueKind.ARRAY:
            self.array_literal(v)
        elif v.kind is ValueKind.VECTOR:
            self.vector_literal(v)
        elif v.kind is ValueKind.RANGE:
            self.range_literal(v)

    # -- dispatch -------------------------------------------------------------

    def value_to_string(self, v: Value) -> str:
        kind = v.kind
        if v.is_null:
            if kind in (ValueKind.ARRAY, ValueKind.VECTOR, ValueKind.RANGE):
                self.check_bindable(v)
            return "NULL"
        p = v.payload
        if kind is ValueKind.BOOL:
            return self.bool_literal(p)
        if kind.is_integer:
            return str(p)
        if kind is ValueKind.FLOAT:
            return format_float(p)
        if kind is ValueKind.DOUBLE:
            return format_double(p)
        if kind in (ValueKind.CHAR, ValueKind.STRING, ValueKind.ENUM, ValueKind.MAC_ADDRESS):
            return self.quote_string(p)
        if kind is ValueKind.BYTES:
            return self.bytes_literal(p)
        if kind is ValueKind.JSON:
            return self.json_literal(p)
        if kind is ValueKind.DATE:
            return self.quote_string(p.isoformat())
        if kind is ValueKind.TIME:
            return self.quote_string(format_time(p))
        if kind is ValueKind.DATE_TIME:
            return self.date_time_literal(p, with_offset=False)
        if kind in (ValueKind.DATE_TIME_UTC, ValueKind.DATE_TIME_LOCAL, ValueKind.DATE_TIME_WITH_TZ):
            return self.date_time_literal(p, with_offset=True)
        if kind in (ValueKind.UUID, ValueKind.IP_NETWORK):
            return self.quote_string(str(p))
        if kind in (ValueKind.DECIMAL, ValueKind.BIG_DECIMAL):
            return format(p, "f")
        if kind is ValueKind.ARRAY:
            return self.array_literal(v)
        if kind is ValueKind.VECTOR:
            return self.vector_literal(v)
        if kind is ValueKind.RANGE:
            return self.range_literal(v)
        raise TypeError(f"Unhandled value kind {kind!r}")

    def prepare_value(self, v: Value, sql: "SqlWriter") -> None:
        """Inline literal or positional marker, depending on the writer mode."""
        if sql.inline:
            sql.write(self.value_to_string(v))
        else:
            self.check_bindable(v)
            sql.push_param(v, self.positional_marker)

    def positional_marker(self, n: int) -> str:
        raise NotImplementedError
