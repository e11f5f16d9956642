"""Reply decoding shared by the agents."""

from .code_blocks import extract_class_name, extract_code_blocks, extract_method_names
from .response import (
    EXTRACTION_FAILED,
    BareString,
    TextBlocks,
    UnknownEnvelope,
    decode_envelope,
    decode_or_default,
    extract_text,
    parse_json,
)

__all__ = [
    "EXTRACTION_FAILED",
    "BareString",
    "TextBlocks",
    "UnknownEnvelope",
    "decode_envelope",
    "decode_or_default",
    "extract_text",
    "parse_json",
    "extract_code_blocks",
    "extract_class_name",
    "extract_method_names",
]
