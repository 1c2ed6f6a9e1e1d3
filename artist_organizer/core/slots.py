"""Text helpers for storing one JSON document across playlist descriptions.

Slot 0 is named after the base name itself; slot i > 0 is "<base>_<i+1>".
The suffix is therefore one ahead of the index and "<base>_1" never exists.
"""
import re
from typing import List, Optional

# Applied in order; "&amp;" is undone after the quote forms so "&amp;quot;" becomes "&quot;".
_ENTITIES = (
    ("&quot;", '"'),
    ("&#34;", '"'),
    ("&amp;", "&"),
    ("&#38;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&#39;", "'"),
    ("&apos;", "'"),
)


def slot_name(index: int, base: str) -> str:
    if index < 0:
        raise ValueError(f"slot index must be >= 0, got {index}")
    return base if index == 0 else f"{base}_{index + 1}"


def parse_slot_index(name: str, base: str) -> Optional[int]:
    """Inverse of slot_name. Anything slot_name would not produce returns None."""
    if name == base:
        return 0
    match = re.fullmatch(re.escape(base) + r"_([1-9][0-9]*)", name)
    if not match:
        return None
    suffix = int(match.group(1))
    if suffix < 2:
        return None
    return suffix - 1


def chunk_text(text: str, size: int) -> List[str]:
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [text[i:i + size] for i in range(0, len(text), size)]


def unescape_entities(text: str) -> str:
    """Undo the HTML escaping Spotify applies to descriptions."""
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def extract_first_object(text: str) -> Optional[str]:
    """Shortest brace-balanced span starting at the first "{", or None.

    Braces inside JSON strings are counted too; a category name containing
    "}" can end the span early.
    """
    start = text.find("{")
    if start < 0:
        return None
    depth = 0
    for pos in range(start, len(text)):
        char = text[pos]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:pos + 1]
    return None
