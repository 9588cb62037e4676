"""Template records and the directory loader for markdown/JSON templates."""

import json
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import TemplateParseError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "other"
_TEMPLATE_KEYS = ("name", "description", "category", "content", "outputFileName")

_FRONT_MATTER_RE = re.compile(r"^---\r?\n([\s\S]*?)\r?\n---\r?\n([\s\S]*)$")


@dataclass(frozen=True)
class Template:
    """A named, categorized prompt with the file name used when materialized."""

    name: str
    description: str = ""
    category: str = DEFAULT_CATEGORY
    content: str = ""
    output_file_name: str = ""

    def __post_init__(self) -> None:
        if not self.output_file_name:
            object.__setattr__(self, "output_file_name", f"{self.name}-prompt.md")

    @classmethod
    def from_meta(cls, meta: dict[str, str], body: str) -> "Template":
        """Create a Template from parsed front matter and its body."""
        name = meta.get("name", "")
        if not name:
            raise TemplateParseError("front matter has no 'name'")

        return cls(
            name=name,
            description=meta.get("description") or "",
            category=meta.get("category") or DEFAULT_CATEGORY,
            content=body.strip(),
            output_file_name=meta.get("outputFileName") or "",
        )

    @classmethod
    def from_dict(cls, data: Any) -> "Template":
        """
        Create a Template from a decoded JSON document.

        Missing fields get the same defaults as front matter templates.

        Raises:
            TemplateParseError: If data is not an object, has no name, or has
                a field that is not a string.
        """
        if not isinstance(data, dict):
            raise TemplateParseError(f"expected a JSON object, got {type(data).__name__}")

        for key in _TEMPLATE_KEYS:
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise TemplateParseError(f"'{key}' must be a string, got {type(value).__name__}")

        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise TemplateParseError("template has no 'name'")

        return cls(
            name=name,
            description=data.get("description") or "",
            category=data.get("category") or DEFAULT_CATEGORY,
            content=data.get("content") or "",
            output_file_name=data.get("outputFileName") or "",
        )

    def to_dict(self) -> dict[str, str]:
        """Convert to the JSON template shape."""
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "content": self.content,
            "outputFileName": self.output_file_name,
        }


@dataclass(frozen=True)
class TemplateWithRepo:
    """A Template tagged with the repository it was loaded from."""

    template: Template
    repo_name: str

    @property
    def name(self) -> str:
        return self.template.name

    @property
    def description(self) -> str:
        return self.template.description

    @property
    def category(self) -> str:
        return self.template.category

    @property
    def content(self) -> str:
        return self.template.content

    @property
    def output_file_name(self) -> str:
        return self.template.output_file_name


def parse_front_matter(text: str) -> tuple[dict[str, str], str]:
    """
    Split a markdown document into front matter metadata and body.

    Returns:
        A (meta, body) tuple. If the text has no well-formed front matter
        block, meta is empty and body is the whole text.
    """
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        return {}, text

    meta: dict[str, str] = {}
    for line in match.group(1).split("\n"):
        key, sep, value = line.partition(":")
        # A leading colon means there is no key.
        if not sep or not key:
            continue
        meta[key.strip()] = value.strip()

    return meta, match.group(2)


def parse_template_file(filepath: Path) -> Template | None:
    """
    Parse a single template file.

    Returns None for files that are not templates (wrong extension or
    README.md).

    Raises:
        TemplateParseError: If the file is a template candidate but invalid.
        OSError: If the file cannot be read.
    """
    filename = filepath.name

    if filename.endswith(".md") and filename != "README.md":
        meta, body = parse_front_matter(filepath.read_text(encoding="utf-8"))
        return Template.from_meta(meta, body)

    if filename.endswith(".json"):
        try:
            data = json.loads(filepath.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise TemplateParseError(f"invalid JSON: {e}") from e
        return Template.from_dict(data)

    return None


def load_templates_from_dir(directory: str | Path) -> list[Template]:
    """
    Load all templates directly inside a directory.

    Subdirectories are not searched. Files that fail to parse are skipped.
    Templates are returned in directory-listing order.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []

    templates: list[Template] = []
    for filename in os.listdir(directory):
        filepath = directory / filename
        if not filepath.is_file():
            continue

        try:
            template = parse_template_file(filepath)
        except (TemplateParseError, OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping template %s: %s", filepath, e)
            continue

        if template is not None:
            templates.append(template)

    return templates
