"""
Base code generator.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from sql2orm.core.types import TableSchema


def string_literal(value: str) -> str:
    """Render text as a double-quoted Python string literal."""
    return json.dumps(value, ensure_ascii=False)


def docstring_text(text: str) -> str:
    """Escape free text for use inside a triple-quoted docstring."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def comment_text(text: str) -> str:
    """Collapse free text onto one line for use in a ``#`` comment."""
    return " ".join(line.strip() for line in text.splitlines()).strip()


@dataclass(frozen=True)
class GeneratedFile:
    """
    One generated module.

    Attributes:
        path: File path relative to the output directory
        content: Canonical source text
        module_name: Python module name the file is meant to be imported as
    """

    path: str
    content: str
    module_name: str

    def write(self, base_dir: Path | str) -> Path:
        """Write the file (UTF-8) below base_dir, creating directories."""
        target = Path(base_dir) / self.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.content, encoding="utf-8")
        return target


@dataclass
class GenerationResult:
    """
    Generated files plus non-fatal findings about the input.

    Warnings describe output that is valid Python but that the target ORM
    may refuse at import time (e.g. a table without a primary key).
    """

    files: list[GeneratedFile] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def write_all(self, base_dir: Path | str) -> list[Path]:
        """Write every file below base_dir and return the written paths."""
        return [generated.write(base_dir) for generated in self.files]


class CodeGenerator(ABC):
    """
    Abstract base class for code generators.

    Code generators take a table schema and a target package name and
    produce Python source code.
    """

    def __init__(self, schema: TableSchema, package_name: str) -> None:
        """
        Initialize the generator.

        Args:
            schema: Table schema to generate code for
            package_name: Package the generated module belongs to
        """
        self.schema = schema
        self.package_name = package_name

    @abstractmethod
    def generate(self) -> GenerationResult:
        """
        Generate source code.

        Returns:
            GenerationResult containing generated files and any warnings
        """
        ...

    def _format_docstring(self, text: str, indent: int = 4) -> str:
        """Format escaped text as a docstring with proper indentation."""
        lines = docstring_text(text.strip()).split("\n")
        if len(lines) == 1:
            return f'"""{lines[0]}"""'
        else:
            prefix = " " * indent
            formatted = ['"""']
            formatted.extend(lines)
            formatted.append('"""')
            return "\n".join(prefix + line if i > 0 else line for i, line in enumerate(formatted))
