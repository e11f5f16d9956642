"""Heuristic extraction of source code from free-form model replies."""

import re
from typing import Optional

FENCE = "```"

_ANY_FENCE = re.compile(r"```\w*[^\S\n]*\n?(.*?)```", re.DOTALL)
_CLASS_DECL = re.compile(r"^[ \t]*class\s+([A-Za-z_]\w*)\s*[(:]", re.MULTILINE)
_DEF_DECL = re.compile(r"^[ \t]*(?:async\s+)?def\s+([A-Za-z_]\w*)\s*\(", re.MULTILINE)


def _tagged_fence(language: str) -> re.Pattern:
    return re.compile(
        FENCE + re.escape(language) + r"\b[^\S\n]*\n?(.*?)" + FENCE,
        re.DOTALL | re.IGNORECASE,
    )


def _non_blank(blocks: list[str]) -> list[str]:
    return [block.strip() for block in blocks if block.strip()]


def extract_code_blocks(text: str, language: str = "python") -> list[str]:
    """Return the code blocks of a reply, fence markers removed.

    Falls back from fences tagged ``language`` to fences with any tag, and
    finally to the whole trimmed text as a single block.
    """
    blocks = _non_blank(_tagged_fence(language).findall(text))
    if blocks:
        return blocks

    blocks = _non_blank(_ANY_FENCE.findall(text))
    if blocks:
        return blocks

    return [text.strip()]


def extract_class_name(text: str, default: Optional[str] = None) -> Optional[str]:
    """Name of the first class declared in ``text``."""
    match = _CLASS_DECL.search(text)
    return match.group(1) if match else default


def extract_method_names(text: str) -> list[str]:
    """Names of the functions and methods declared in ``text``, in order."""
    methods: list[str] = []
    for name in _DEF_DECL.findall(text):
        if name not in methods:
            methods.append(name)
    return methods
