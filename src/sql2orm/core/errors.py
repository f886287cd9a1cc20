"""
Error taxonomy for sql2orm.

All sql2orm errors inherit from Sql2OrmError and include:
- A unique error code for programmatic handling
- A human-readable message naming the offending construct
- Optional details for diagnosis (input statement, assembled source, ...)

Every stage fails on its first error; no partial schema or partial source
text is ever returned alongside one.
"""

from typing import Any


class Sql2OrmError(Exception):
    """
    Base class for all sql2orm errors.

    Attributes:
        code: Unique error code for programmatic handling
        message: Human-readable error message
        details: Additional error context
    """

    code: str = "SQL2ORM_ERROR"

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a dictionary for serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ParseError(Sql2OrmError):
    """
    The input is not a single, well-formed CREATE TABLE statement.

    Raised for syntax errors, non-table statements, multi-statement input and
    constructs that cannot be reduced to the schema model.
    """

    code = "PARSE_ERROR"

    def __init__(
        self,
        message: str,
        statement: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            details={"statement": statement} if statement is not None else {},
            **kwargs,
        )


class MappingError(Sql2OrmError):
    """A native type cannot be mapped onto the requested Python type."""

    code = "MAPPING_ERROR"

    def __init__(
        self,
        native_type: str,
        target_type: str,
        allowed_targets: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        message = f"Cannot map native type '{native_type}' to '{target_type}'"
        if allowed_targets:
            message += f" (allowed: {', '.join(allowed_targets)})"
        super().__init__(
            message,
            details={
                "native_type": native_type,
                "target_type": target_type,
                "allowed_targets": allowed_targets,
            },
            **kwargs,
        )


class SynthesisError(Sql2OrmError):
    """
    The assembled module text is not valid Python.

    This signals a bug in an earlier stage; the full assembled text is kept
    in ``details["source"]`` for diagnosis.
    """

    code = "SYNTHESIS_ERROR"

    def __init__(
        self,
        message: str,
        source: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, details={"source": source}, **kwargs)

    @property
    def source(self) -> str:
        """The assembled text that failed canonicalization."""
        return self.details["source"]


class IntrospectionError(Sql2OrmError):
    """Reading table metadata from a live database failed."""

    code = "INTROSPECTION_ERROR"

    def __init__(
        self,
        message: str,
        table: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            details={"table": table} if table else {},
            **kwargs,
        )


class ConfigError(Sql2OrmError):
    """Generator configuration is invalid or incomplete."""

    code = "CONFIG_ERROR"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            details={"field": field} if field else {},
            **kwargs,
        )
