"""Decoding of Anthropic response envelopes and best-effort JSON replies.

The Messages API returns an envelope whose ``content`` is a list of typed
blocks. Tests, proxies and older SDKs hand back other shapes, so the envelope
is decoded once at the boundary into one of three variants:

- ``TextBlocks``: the envelope carries a ``content`` sequence
- ``BareString``: the envelope is already the reply text
- ``UnknownEnvelope``: anything else, kept for serialization
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Union

import structlog

from ..errors import ResponseParseError

logger = structlog.get_logger()

T = TypeVar("T")

EXTRACTION_FAILED = "Error: Could not extract text from AI response"


@dataclass(frozen=True)
class TextBlocks:
    blocks: list


@dataclass(frozen=True)
class BareString:
    text: str


@dataclass(frozen=True)
class UnknownEnvelope:
    raw: Any


Envelope = Union[TextBlocks, BareString, UnknownEnvelope]


def _field(obj: Any, name: str) -> Any:
    """Read a field from either a mapping or an SDK object."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def decode_envelope(response: Any) -> Envelope:
    """Classify a raw API response."""
    if isinstance(response, str):
        return BareString(response)

    content = _field(response, "content")
    if isinstance(content, (list, tuple)):
        return TextBlocks(list(content))

    return UnknownEnvelope(response)


def _serialize(raw: Any) -> str:
    if hasattr(raw, "model_dump_json"):
        dumped = raw.model_dump_json()
        if isinstance(dumped, str):
            return dumped
    return json.dumps(raw, default=str)


def extract_text(response: Any) -> str:
    """Pull the reply text out of an API response.

    Prefers the first block typed ``text``, then the first block carrying any
    text, then a bare string, then the serialized envelope. Never raises.
    """
    try:
        envelope = decode_envelope(response)

        if isinstance(envelope, BareString):
            return envelope.text

        if isinstance(envelope, TextBlocks):
            for block in envelope.blocks:
                text = _field(block, "text")
                if _field(block, "type") == "text" and isinstance(text, str) and text:
                    return text

            if envelope.blocks:
                text = _field(envelope.blocks[0], "text")
                if isinstance(text, str) and text:
                    return text

        return _serialize(response)

    except Exception as e:
        logger.error("Error extracting text from response", error=str(e))
        return EXTRACTION_FAILED


def parse_json(content: str) -> Any:
    """Parse JSON from a model reply, handling markdown code fences.

    The whole reply is tried first, so fences inside JSON strings survive.

    Raises:
        ResponseParseError: If no JSON document can be decoded
    """
    try:
        return json.loads(content.strip())
    except (json.JSONDecodeError, AttributeError):
        pass

    try:
        if "```json" in content:
            content = content.split("```json")[1].split("```")[0]
        elif "```" in content:
            parts = content.split("```")
            if len(parts) >= 2:
                content = parts[1]

        return json.loads(content.strip())

    except (json.JSONDecodeError, IndexError, AttributeError) as e:
        raise ResponseParseError(f"Invalid JSON in response: {e}", details=content) from e


def decode_or_default(
    text: str,
    decoder: Callable[[str], T],
    default: Callable[[str], T],
) -> T:
    """Strictly decode ``text``; on failure build the documented default from it.

    ``decoder`` signals a shape mismatch with ResponseParseError, ValueError,
    TypeError or KeyError.
    """
    try:
        return decoder(text)
    except (ResponseParseError, ValueError, TypeError, KeyError) as e:
        logger.warning(
            "Failed to decode model response",
            error=str(e),
            content_preview=text[:200] if text else None,
        )
        return default(text)
