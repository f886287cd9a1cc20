"""
Naming policy for generated code.

Derives class, attribute and instance names from table and column names.
The table-prefix drop and singularization are conventions, so they live here
as one swappable object rather than inside the generator.
"""

import keyword
from collections.abc import Callable
from dataclasses import dataclass, field

import inflection


@dataclass(frozen=True)
class NamingPolicy:
    """
    Name derivation rules.

    Attributes:
        model_suffix: Appended to the singular class name
        instance_suffix: Appended to the class name for the module singleton
        drop_table_prefix: Whether the first ``_``-separated segment of a
            table name is a prefix to drop (``ny_order`` -> ``Order``)
        titleize: Title-cases one name segment (first letter upper-cased,
            the rest untouched)
        singularize: Reduces a name to its singular form
    """

    model_suffix: str = "Model"
    instance_suffix: str = "Ins"
    drop_table_prefix: bool = True
    titleize: Callable[[str], str] = field(default=inflection.camelize)
    singularize: Callable[[str], str] = field(default=inflection.singularize)

    def model_name(self, table_name: str) -> str:
        """
        Class name for a table.

        ``ny_order`` -> ``OrderModel``; a name with nothing left after the
        prefix drop is title-cased whole (``orders`` -> ``OrderModel``).
        """
        parts = table_name.split("_")
        if self.drop_table_prefix:
            parts = parts[1:]

        base = "".join(self.titleize(part) for part in parts if part)
        if not base:
            base = self.titleize(table_name)

        return self.singularize(base) + self.model_suffix

    def field_name(self, column_name: str) -> str:
        """
        Attribute name for a column: ``order_no`` -> ``OrderNo``.

        Names that title-case into a Python keyword get a trailing
        underscore (``none`` -> ``None_``).
        """
        name = "".join(self.titleize(part) for part in column_name.split("_") if part)
        if keyword.iskeyword(name):
            name += "_"
        return name

    def instance_name(self, model_name: str) -> str:
        """Name of the module-level singleton for a class."""
        return model_name + self.instance_suffix
