"""
Model code generator.

Generates a SQLAlchemy declarative model module from a TableSchema.
"""

from sql2orm.codegen.formatting import canonicalize
from sql2orm.codegen.generator import (
    CodeGenerator,
    GeneratedFile,
    GenerationResult,
    comment_text,
    string_literal,
)
from sql2orm.codegen.mapper import SERIALIZATION_KEY, TypeMapper
from sql2orm.codegen.naming import NamingPolicy
from sql2orm.core.errors import SynthesisError
from sql2orm.core.types import FieldSchema, TableSchema


class ModelCodeGenerator(CodeGenerator):
    """
    Generates a typed SQLAlchemy model module for one table.

    The module holds a declarative base whose ``to_dict()`` serializes
    columns under their ``info["json"]`` names, the model class with one
    ``mapped_column`` per column in schema order, a ``table_name()``
    accessor, and a module-level singleton instance.

    Example output:
        class OrderModel(Base):
            '''OrderModel orders'''

            __tablename__ = "ny_order"

            Id: Mapped[int | None] = mapped_column(
                "id", primary_key=True, autoincrement=True, info={"json": "id"}
            )
            OrderNo: Mapped[str] = mapped_column(
                "order_no", nullable=False, info={"json": "order_no"}
            )

            @classmethod
            def table_name(cls) -> str:
                '''Return the table name.'''
                return "ny_order"


        OrderModelIns = OrderModel()
    """

    def __init__(
        self,
        schema: TableSchema,
        package_name: str = "models",
        *,
        naming: NamingPolicy | None = None,
        mapper: TypeMapper | None = None,
        module_name: str | None = None,
        file_name: str | None = None,
    ) -> None:
        """
        Initialize the generator.

        Args:
            schema: Table schema to generate a model for
            package_name: Package named in the module header
            naming: Naming policy (defaults to NamingPolicy())
            mapper: Type mapper (defaults to TypeMapper())
            module_name: Name for the generated module (defaults to the table name)
            file_name: File to write, relative to the output directory
                (defaults to ``<module_name>.py``)
        """
        super().__init__(schema, package_name)
        self.naming = naming or NamingPolicy()
        self.mapper = mapper or TypeMapper()
        self.module_name = module_name or schema.name
        self.file_name = file_name or f"{self.module_name}.py"

    @property
    def model_name(self) -> str:
        return self.naming.model_name(self.schema.name)

    @property
    def instance_name(self) -> str:
        return self.naming.instance_name(self.model_name)

    def generate(self) -> GenerationResult:
        """Generate the model module."""
        result = GenerationResult()
        if not self.schema.primary_keys:
            result.warnings.append(
                f"Table {self.schema.name} has no primary key; SQLAlchemy will "
                f"refuse to map {self.model_name} when the module is imported"
            )
        result.files.append(GeneratedFile(
            path=self.file_name,
            content=self.render(),
            module_name=self.module_name,
        ))
        return result

    def render(self) -> str:
        """
        Assemble and canonicalize the module text.

        Raises:
            SynthesisError: Two columns derive the same attribute name, or
                the assembled text is not valid Python
        """
        source = self.assemble()
        self._check_field_names(source)
        return canonicalize(source)

    def assemble(self) -> str:
        """Assemble the module text before formatting."""
        lines = [
            self._format_docstring(
                f"Package {self.package_name}.\n\n"
                f"Model for table {self.schema.name}. Generated code, regenerate instead of editing.",
                indent=0,
            ),
            "",
            *self._generate_imports(),
            "",
            f"__all__ = [{', '.join(string_literal(n) for n in ('Base', self.model_name, self.instance_name))}]",
            "",
            "",
            *self._generate_base_class(),
            "",
            "",
            *self._generate_model_class(),
            "",
            "",
            f"{self.instance_name} = {self.model_name}()",
        ]
        return "\n".join(lines) + "\n"

    def _check_field_names(self, source: str) -> None:
        """Two columns must not derive the same attribute name."""
        columns_by_attribute: dict[str, str] = {}
        for field in self.schema.fields:
            attribute = self.naming.field_name(field.name)
            if attribute in columns_by_attribute:
                raise SynthesisError(
                    f"Columns '{columns_by_attribute[attribute]}' and '{field.name}' "
                    f"both map to attribute '{attribute}'",
                    source,
                )
            columns_by_attribute[attribute] = field.name

    def _generate_imports(self) -> list[str]:
        sqlalchemy_names = {"inspect"}
        for field in self.schema.fields:
            sqlalchemy_names |= self.mapper.sqlalchemy_imports(field)

        return [
            "from typing import Any",
            "",
            f"from sqlalchemy import {', '.join(sorted(sqlalchemy_names))}",
            "from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column",
        ]

    def _generate_base_class(self) -> list[str]:
        """Declarative base with column serialization."""
        key = string_literal(SERIALIZATION_KEY)
        return [
            "class Base(DeclarativeBase):",
            f"    {self._format_docstring(f'Declarative base for package {self.package_name}.')}",
            "",
            "    def to_dict(self) -> dict[str, Any]:",
            '        """Column values keyed by their serialization names."""',
            "        return {",
            f"            prop.columns[0].info.get({key}, prop.key): getattr(self, prop.key)",
            "            for prop in inspect(type(self)).column_attrs",
            "        }",
        ]

    def _generate_model_class(self) -> list[str]:
        table = string_literal(self.schema.name)
        summary = f"{self.model_name} {self.schema.comment}".strip()

        lines = [
            f"class {self.model_name}(Base):",
            f"    {self._format_docstring(summary)}",
            "",
            f"    __tablename__ = {table}",
            "",
        ]
        lines.extend(f"    {self._generate_field(field)}" for field in self.schema.fields)
        lines.extend([
            "",
            "    @classmethod",
            "    def table_name(cls) -> str:",
            '        """Return the table name."""',
            f"        return {table}",
        ])
        return lines

    def _generate_field(self, field: FieldSchema) -> str:
        """Generate a field definition line."""
        line = (
            f"{self.naming.field_name(field.name)}: {self.mapper.annotation(field)}"
            f" = {self.mapper.compose_column(field)}"
        )
        comment = comment_text(field.comment)
        if comment:
            line += f"  # {comment}"
        return line


def synthesize(schema: TableSchema, package_name: str = "models") -> str:
    """
    Generate canonical model source for a table.

    Raises:
        SynthesisError: The assembled text is not valid Python
    """
    return ModelCodeGenerator(schema, package_name).render()
