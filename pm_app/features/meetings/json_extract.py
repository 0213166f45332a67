"""Find the first well-formed JSON value inside free-form model output.

The completion service is treated as untrusted text: replies may wrap the
JSON in prose or code fences, or contain stray brackets before it. We scan
each candidate opening bracket and let ``json.JSONDecoder.raw_decode`` decide
where a value ends. No repair or guessing; if nothing decodes, ``ParseError``.
"""

from __future__ import annotations

import json
from typing import Any

from pm_app.core.errors import ParseError

_OPENERS = {list: "[", dict: "{"}
_decoder = json.JSONDecoder()


def extract_json_value(text: str | None, expected: type = dict) -> Any:
    if expected not in _OPENERS:
        raise ValueError(f"expected must be list or dict, got {expected!r}")
    if not text:
        raise ParseError("Empty completion")
    opener = _OPENERS[expected]
    idx = text.find(opener)
    while idx != -1:
        try:
            value, _end = _decoder.raw_decode(text, idx)
        except json.JSONDecodeError:
            value = None
        else:
            if isinstance(value, expected):
                return value
        idx = text.find(opener, idx + 1)
    raise ParseError(f"No JSON {expected.__name__} found in completion")
