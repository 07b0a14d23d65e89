"""Line protocol encoding.

    measurement[,tag_key=tag_value...] field_key=field_value[,...] [timestamp]

See https://docs.influxdata.com/influxdb/v1/write_protocols/line_protocol_reference/
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from .fields import FieldBool, FieldFloat, FieldInt, FieldString, LineField
from .models import Key, Measurement, Point
from .precision import WritePrecision
from .timestamp import scale_to

_MEASUREMENT_SPECIALS = (",", " ")
_KEY_SPECIALS = (",", "=", " ")
_STRING_SPECIALS = ("\\", '"')


def _escape(value: str, characters: Tuple[str, ...]) -> str:
    escaped = value
    for char in characters:
        escaped = escaped.replace(char, f"\\{char}")
    return escaped


def escape_measurement(value: str) -> str:
    return _escape(value, _MEASUREMENT_SPECIALS)


def escape_key(value: str) -> str:
    """Escape a tag key, tag value or field key."""
    return _escape(value, _KEY_SPECIALS)


def escape_string_field(value: str) -> str:
    return _escape(value, _STRING_SPECIALS)


def encode_field(value: LineField) -> str:
    if isinstance(value, FieldInt):
        return f"{value.value}i"
    if isinstance(value, FieldFloat):
        return repr(value.value)
    if isinstance(value, FieldString):
        return f'"{escape_string_field(value.value)}"'
    if isinstance(value, FieldBool):
        return "true" if value.value else "false"
    raise TypeError(f"Cannot encode {value!r} in line protocol")


def encode_line(point: Point, precision: WritePrecision = WritePrecision.NANOSECOND) -> str:
    """Encode one point. The timestamp is expressed in units of ``precision``."""
    head = escape_measurement(point.measurement.name)
    for key in sorted(point.tags):
        head += f",{escape_key(key.name)}={escape_key(point.tags[key].name)}"
    fields = ",".join(
        f"{escape_key(key.name)}={encode_field(value)}" for key, value in point.fields.items()
    )
    line = f"{head} {fields}"
    if point.time is not None:
        line += f" {scale_to(precision, point.time)}"
    return line


def encode_lines(
    points: Iterable[Point], precision: WritePrecision = WritePrecision.NANOSECOND
) -> str:
    return "\n".join(encode_line(p, precision) for p in points)


# -------------------- Parsing --------------------

def parse_lines(text: str) -> List[Point]:
    """Parse newline separated points, skipping blank lines and comments."""
    points = []
    for line in _split_lines(text):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        points.append(parse_line(stripped))
    return points


def parse_line(line: str) -> Point:
    """Parse a single line. ``Point.time`` is the raw integer, if present."""
    head = _split_unescaped(line, " ", maxsplit=1)
    if len(head) != 2:
        raise ValueError(f"Malformed line: {line!r}")
    sections = head[:1] + _split_unescaped(head[1], " ", respect_quotes=True)
    if len(sections) not in (2, 3) or not sections[0] or not sections[1]:
        raise ValueError(f"Malformed line: {line!r}")

    series = _split_unescaped(sections[0], ",")
    measurement = Measurement(_unescape(series[0], _MEASUREMENT_SPECIALS))
    tags: Dict[Key, Key] = {}
    for pair in series[1:]:
        key, value = _split_pair(pair, line)
        tags[Key(_unescape(key, _KEY_SPECIALS))] = Key(_unescape(value, _KEY_SPECIALS))

    fields: Dict[Key, LineField] = {}
    for pair in _split_unescaped(sections[1], ",", respect_quotes=True):
        key, raw = _split_pair(pair, line)
        fields[Key(_unescape(key, _KEY_SPECIALS))] = _parse_field_value(raw, line)

    time: Optional[int] = None
    if len(sections) == 3:
        try:
            time = int(sections[2])
        except ValueError:
            raise ValueError(f"Malformed timestamp in line: {line!r}") from None
    return Point(measurement=measurement, fields=fields, tags=tags, time=time)


def _parse_field_value(raw: str, line: str) -> LineField:
    if len(raw) >= 2 and raw[0] == '"' and raw[-1] == '"':
        return FieldString(_unescape(raw[1:-1], _STRING_SPECIALS))
    if raw in ("t", "T", "true", "True", "TRUE"):
        return FieldBool(True)
    if raw in ("f", "F", "false", "False", "FALSE"):
        return FieldBool(False)
    try:
        if raw.endswith("i"):
            return FieldInt(int(raw[:-1]))
        return FieldFloat(float(raw))
    except ValueError:
        raise ValueError(f"Malformed field value {raw!r} in line: {line!r}") from None


def _split_pair(pair: str, line: str) -> Tuple[str, str]:
    parts = _split_unescaped(pair, "=", maxsplit=1, respect_quotes=True)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError(f"Malformed key=value {pair!r} in line: {line!r}")
    return parts[0], parts[1]


def _split_unescaped(
    text: str, sep: str, maxsplit: int = -1, respect_quotes: bool = False
) -> List[str]:
    parts: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text):
            current.append(text[i : i + 2])
            i += 2
            continue
        # string field values open with a quote right after "="
        if respect_quotes and char == '"' and (in_quotes or (i > 0 and text[i - 1] == "=")):
            in_quotes = not in_quotes
        if char == sep and not in_quotes and (maxsplit < 0 or len(parts) < maxsplit):
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1
    parts.append("".join(current))
    return parts


def _split_lines(text: str) -> List[str]:
    return _split_unescaped(text, "\n", respect_quotes=True)


def _unescape(value: str, characters: Tuple[str, ...]) -> str:
    """Undo ``_escape``. A backslash before any other character is literal."""
    out: List[str] = []
    i = 0
    while i < len(value):
        if value[i] == "\\" and i + 1 < len(value) and value[i + 1] in characters:
            out.append(value[i + 1])
            i += 2
        else:
            out.append(value[i])
            i += 1
    return "".join(out)
