"""Data models passed between the parse, engine and emit steps"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel


class Frontmatter(BaseModel):
    """A decoded frontmatter block. `value` may itself be None (YAML null)."""
    value: Any = None


@dataclass(frozen=True)
class FixedDocument:
    """Engine output for one document: final frontmatter plus the untouched body."""
    frontmatter: Optional[Frontmatter]   # None drops the block from output
    body:        str
