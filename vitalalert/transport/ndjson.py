from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Optional

from vitalalert.domain.models import Reading, VitalType, coerce_value, make_reading


def _str_to_dt(s: str) -> datetime:
    """
    Convert an ISO-8601 datetime string to a datetime object.

    Parameters
    ----------
    s
        Datetime string in ISO format (e.g., "2026-01-01T10:00:00").

    Returns
    -------
    datetime
        Parsed datetime instance.

    Raises
    ------
    ValueError
        If the input is not a valid ISO formatted datetime string.
    """
    return datetime.fromisoformat(s)


def decode_reading(obj: Dict[str, Any]) -> Reading:
    """
    Decode a message dictionary into a reading variant.

    Expected shape::

        {"vital_type": "SPO2", "timestamp": "2026-01-01T10:00:00", "value": 93, "id": "optional"}

    Parameters
    ----------
    obj
        JSON-decoded dictionary.

    Returns
    -------
    Reading
        Variant selected by ``vital_type``. A missing or malformed ``value``
        becomes None so the reading is kept but contributes no severity.

    Raises
    ------
    KeyError
        If ``vital_type`` or ``timestamp`` is missing.
    ValueError
        If ``vital_type`` is unknown or the timestamp is malformed.
    """
    try:
        vital_type = VitalType(str(obj["vital_type"]).upper())
    except ValueError:
        raise ValueError(f"Unknown vital type: {obj['vital_type']}") from None

    reading_id = obj.get("id")
    return make_reading(
        vital_type,
        coerce_value(obj.get("value")),
        _str_to_dt(str(obj["timestamp"])),
        reading_id=None if reading_id is None else str(reading_id),
    )


def iter_json_objects(text: str) -> Iterator[Dict[str, Any]]:
    """
    Yield one or more JSON objects found in a string.

    This function is robust against inputs where multiple JSON objects are
    accidentally concatenated without delimiters, e.g.::

        '{"a": 1}{"b": 2}'

    Only dictionary objects are yielded (non-dict JSON like lists/strings are ignored).

    Parameters
    ----------
    text
        Input string potentially containing one or more JSON objects.

    Yields
    ------
    dict
        Parsed JSON objects (dictionaries) found in the input.
    """
    s = text.strip()
    if not s:
        return

    dec = json.JSONDecoder()
    i = 0
    n = len(s)

    while i < n:
        while i < n and s[i].isspace():
            i += 1
        if i >= n:
            break

        obj, end = dec.raw_decode(s, i)
        if isinstance(obj, dict):
            yield obj
        i = end


def decode_lines(lines: Iterable[str]) -> List[Reading]:
    """
    Decode every reading found in an NDJSON stream.

    Parameters
    ----------
    lines
        Lines of text; blank lines are skipped.

    Returns
    -------
    list of Reading
        Readings in stream order.

    Raises
    ------
    ValueError
        If a line contains invalid JSON or an undecodable reading.
    """
    readings: List[Reading] = []
    for line in lines:
        for obj in iter_json_objects(line):
            readings.append(decode_reading(obj))
    return readings
