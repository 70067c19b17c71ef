"""Frontmatter delimiter splitting and YAML decoding"""

from typing import Optional

import yaml

from fmfix.core.errors import DecodeError, UnclosedFrontmatterError
from fmfix.core.models import Frontmatter
from fmfix.core.utils.plain_yaml import PlainLoader


DELIMITER = "---\n"


def parse_raw(text: str, strict: bool = False) -> tuple[Optional[str], str]:
    """Split text into (metadata_block, body).

    Frontmatter only starts at offset 0. The block ends at the next
    occurrence of the delimiter anywhere after the opening one; an
    unclosed block means no frontmatter unless strict is set.
    """
    if not text.startswith(DELIMITER):
        return None, text

    start = len(DELIMITER)
    close = text.find(DELIMITER, start)
    if close < 0:
        if strict:
            raise UnclosedFrontmatterError("frontmatter opened on line 1 but never closed")
        return None, text

    return text[start:close], text[close + len(DELIMITER):]


def decode(block: Optional[str]) -> Optional[Frontmatter]:
    """Decode a metadata block. None passes through; an empty document is an error."""
    if block is None:
        return None
    try:
        if yaml.compose(block, Loader=PlainLoader) is None:
            raise DecodeError("frontmatter block is empty")
        value = yaml.load(block, Loader=PlainLoader)
    except yaml.YAMLError as e:
        raise DecodeError(f"invalid YAML frontmatter: {e}") from e
    return Frontmatter(value=value)
