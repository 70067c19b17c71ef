"""Application configuration: settings schema and fmfix.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "fmfix.yaml"


class Settings(BaseModel):
    app_name:   str  = "fmfix"
    key_order:  str  = Field(default="preserve", pattern="^(preserve|sort)$",
                             description="Mapping key order on write: keep original order or sort")
    unclosed_frontmatter: str = Field(default="body", pattern="^(body|error)$",
                                      description="Unclosed leading '---': treat as body text or fail")
    max_memory: int  = Field(default=0, ge=0, description="Lua heap limit in bytes; 0 = unlimited")
    dry_run:    bool = Field(default=False, description="Print results instead of rewriting files")
    verbose:    bool = Field(default=False, description="Report each processed file")

    @property
    def strict(self) -> bool:
        return self.unclosed_frontmatter == "error"


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from fmfix.yaml, then FMFIX_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"FMFIX_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValueError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
