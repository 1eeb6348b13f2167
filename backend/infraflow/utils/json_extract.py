# backend/infraflow/utils/json_extract.py
import json
import re
from typing import Any, Dict, Optional


_CODE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def _try_load(text: str) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(text)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Extract the first JSON object from LLM output.

    Strategy:
    1. Direct json.loads (fast path)
    2. Fenced ```json block
    3. Outermost {...} span

    Returns None when nothing parses.
    """
    if not text or not isinstance(text, str):
        return None

    data = _try_load(text.strip())
    if data is not None:
        return data

    block = _CODE_BLOCK.search(text)
    if block:
        data = _try_load(block.group(1).strip())
        if data is not None:
            return data

    match = _OBJECT.search(text)
    if match:
        return _try_load(match.group(0))
    return None
