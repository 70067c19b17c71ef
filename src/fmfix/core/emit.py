"""YAML serialization and document reassembly"""

from typing import Any, Optional

import yaml

from fmfix.core.models import Frontmatter
from fmfix.core.parse import DELIMITER
from fmfix.core.utils.plain_yaml import PlainDumper


DOCUMENT_END = "...\n"


def encode(value: Any) -> str:
    """Serialize a structured value as block-style YAML, keeping mapping order."""
    text = yaml.dump(
        value,
        Dumper=PlainDumper,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=float("inf"),
    )
    # top-level plain scalars get an explicit end marker
    if text.endswith("\n" + DOCUMENT_END):
        text = text[:-len(DOCUMENT_END)]
    return text


def reassemble(frontmatter: Optional[Frontmatter], body: str) -> str:
    """Rebuild document text; without frontmatter the body is returned verbatim."""
    if frontmatter is None:
        return body
    return f"{DELIMITER}{encode(frontmatter.value)}{DELIMITER}{body}"
