"""
Decode issue rows embedded in free text (issue bodies, pasted exports).
"""
import json
import re
from typing import Any


class IngestError(RuntimeError):
    """Raw rows could not be acquired or decoded."""


_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences such as ```json ... ``` around a payload."""
    return _FENCE.sub('', text or '').strip()


def extract_records(body: str) -> Any:
    """Decode the JSON payload inside body.

    The result is returned as decoded; checking that it is a list of rows is
    left to dashboard.build_snapshot.
    """
    try:
        return json.loads(strip_code_fences(body))
    except (TypeError, ValueError) as ex:
        raise IngestError(f"Failed to parse JSON from issue body: {ex}") from ex


def load_records_file(path: str) -> Any:
    """Read a local JSON export (fenced or bare)."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except OSError as ex:
        raise IngestError(f"Failed to read {path}: {ex}") from ex
    return extract_records(text)
