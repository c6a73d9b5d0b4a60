#!/usr/bin/env python3

import json
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from docport.models import SymbolKind

CONFIG_FILE_NAME = "docport_config.json"


class CommentStyle(str, Enum):
    ANY = "any"  # every comment may document a declaration
    DOC = "doc"  # only /** */, /*! */, /// and //!


class DocFormat(str, Enum):
    VERBATIM = "verbatim"
    MARKDOWN = "markdown"


class DocPortConfig(BaseModel):
    """Configuration for importing C documentation into Rust sources."""

    # C declarations that may donate documentation
    symbol_kinds: frozenset[SymbolKind] = Field(
        default_factory=lambda: frozenset({SymbolKind.FUNCTION})
    )

    # Annotation spelling: #[<alias_attribute>(<alias_key> = "name")]
    alias_attribute: str = Field(default="doc", min_length=1)
    alias_key: str = Field(default="alias", min_length=1)

    # Comment binding
    max_blank_lines: int = Field(default=1, ge=0)
    comment_style: CommentStyle = CommentStyle.ANY

    # Rendering
    doc_format: DocFormat = DocFormat.VERBATIM

    model_config = {"frozen": True}

    def with_kinds(self, kinds: list[str] | tuple[str, ...]) -> "DocPortConfig":
        """Return a copy indexing only ``kinds``."""
        if not kinds:
            return self
        return self.model_copy(
            update={"symbol_kinds": frozenset(SymbolKind(kind) for kind in kinds)}
        )

    @classmethod
    def load_from_file(cls, config_path: Path) -> "DocPortConfig":
        """Load configuration from a JSON file."""
        args = json.loads(config_path.read_text())
        return cls.model_validate(args)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a JSON file."""
        data = self.model_dump(mode="json")
        data["symbol_kinds"] = sorted(data["symbol_kinds"])
        config_path.write_text(json.dumps(data, indent=2))

    @classmethod
    def find_config(cls, start_path: Path) -> Optional["DocPortConfig"]:
        """Find configuration by searching up the directory tree."""
        current = start_path.resolve()
        while True:
            config_file = current / CONFIG_FILE_NAME
            if config_file.exists():
                return cls.load_from_file(config_file)
            if current == current.parent:
                return None
            current = current.parent
