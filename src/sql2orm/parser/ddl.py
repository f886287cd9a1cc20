"""
CREATE TABLE extraction.

Statement grammar is delegated to sqlglot (MySQL dialect); the extractor walks
the resulting expression tree and reduces it to a TableSchema.
"""

import sqlglot
from pydantic import ValidationError as SchemaValidationError
from sqlglot import exp
from sqlglot.errors import ParseError as GrammarError
from sqlglot.errors import TokenError
from sqlglot.tokens import TokenType

from sql2orm.core.errors import ParseError
from sql2orm.core.types import CURRENT_TIMESTAMP, NULL, FieldSchema, TableSchema

# Zero-argument functions that MySQL accepts as a current-timestamp default.
_TIMESTAMP_FUNCTIONS = {"NOW", "CURRENT_TIMESTAMP", "LOCALTIME", "LOCALTIMESTAMP"}


def extract_table_comment(options: str) -> str:
    """
    Extract the table comment from table-options text.

    Finds the first ``COMMENT`` keyword (any case) and returns what lies
    between the first single quote after it and the last single quote in the
    rest of the text. This is a tolerant scan, not a tokenizer: when another
    quoted option follows the comment, or the comment contains an escaped
    apostrophe, the result runs from the first to the last quote.

    Args:
        options: Raw text following the column list of a CREATE TABLE

    Returns:
        The comment, or an empty string when none can be located
    """
    index = options.upper().find("COMMENT")
    if index == -1:
        return ""

    rest = options[index:]
    start = rest.find("'")
    end = rest.rfind("'")
    if start == -1 or start >= end:
        return ""
    return rest[start + 1 : end]


class DDLParser:
    """
    Parses a single CREATE TABLE statement into a TableSchema.

    Example:
        parser = DDLParser()
        schema = parser.parse("CREATE TABLE t_user (id bigint primary key)")
    """

    def __init__(self, dialect: str = "mysql") -> None:
        """
        Initialize the parser.

        Args:
            dialect: sqlglot dialect used to read the statement
        """
        self.dialect = dialect

    def parse(self, ddl_text: str) -> TableSchema:
        """
        Parse DDL text into a TableSchema.

        Raises:
            ParseError: The text is not exactly one valid CREATE TABLE
                statement, or its columns cannot form a valid schema
        """
        create = self._parse_create_table(ddl_text)
        table_schema = create.this
        table_name = table_schema.this.name

        fields: list[FieldSchema] = []
        primary_keys: list[str] = []

        for definition in table_schema.expressions:
            if isinstance(definition, exp.ColumnDef):
                field, inline_primary = self._parse_column(definition, ddl_text)
                fields.append(field)
                if inline_primary:
                    self._add_key(primary_keys, field.name)
            else:
                for key in self._table_primary_keys(definition):
                    self._add_key(primary_keys, key)

        if not fields:
            raise ParseError(
                f"CREATE TABLE {table_name} defines no columns",
                statement=ddl_text,
            )

        try:
            return TableSchema(
                name=table_name,
                comment=extract_table_comment(self._table_options_text(ddl_text)),
                fields=fields,
                primary_keys=primary_keys,
            )
        except SchemaValidationError as exc:
            problems = "; ".join(err["msg"] for err in exc.errors())
            raise ParseError(
                f"Table {table_name} cannot be reduced to a schema: {problems}",
                statement=ddl_text,
            ) from exc

    def _parse_create_table(self, ddl_text: str) -> exp.Create:
        """Parse the text and make sure it is one CREATE TABLE with columns."""
        if not ddl_text or not ddl_text.strip():
            raise ParseError("Empty input, expected a CREATE TABLE statement", statement=ddl_text)

        try:
            statements = [
                s for s in sqlglot.parse(ddl_text, read=self.dialect) if s is not None
            ]
        except (GrammarError, TokenError) as exc:
            raise ParseError(f"Invalid SQL: {exc}", statement=ddl_text) from exc

        if len(statements) != 1:
            raise ParseError(
                f"Expected exactly one CREATE TABLE statement, found {len(statements)} statements",
                statement=ddl_text,
            )

        statement = statements[0]
        if not isinstance(statement, exp.Create):
            raise ParseError(
                f"Expected a CREATE TABLE statement, got {statement.key.upper()}",
                statement=ddl_text,
            )

        kind = (statement.args.get("kind") or "").upper()
        if kind != "TABLE":
            raise ParseError(
                f"Expected a CREATE TABLE statement, got CREATE {kind}",
                statement=ddl_text,
            )

        if statement.expression is not None or not isinstance(statement.this, exp.Schema):
            raise ParseError(
                "CREATE TABLE without column definitions (AS SELECT / LIKE) is not supported",
                statement=ddl_text,
            )

        return statement

    def _parse_column(
        self, column: exp.ColumnDef, ddl_text: str
    ) -> tuple[FieldSchema, bool]:
        """Reduce a column definition; also report an inline PRIMARY KEY."""
        data_type = column.args.get("kind")
        if data_type is None:
            raise ParseError(
                f"Column {column.name} has no data type",
                statement=ddl_text,
            )

        nullable = True
        auto_increment = False
        inline_primary = False
        default_value = None
        comment = ""

        for constraint in column.constraints:
            kind = constraint.args.get("kind")
            if isinstance(kind, exp.NotNullColumnConstraint):
                nullable = bool(kind.args.get("allow_null"))
            elif isinstance(kind, exp.PrimaryKeyColumnConstraint):
                inline_primary = True
            elif isinstance(
                kind,
                (exp.AutoIncrementColumnConstraint, exp.GeneratedAsIdentityColumnConstraint),
            ):
                auto_increment = True
            elif isinstance(kind, exp.DefaultColumnConstraint):
                default_value = self._literal_default(kind.this)
            elif isinstance(kind, exp.CommentColumnConstraint):
                comment = kind.name

        field = FieldSchema(
            name=column.name,
            native_type=data_type.sql(dialect=self.dialect).lower(),
            nullable=nullable,
            default_value=default_value,
            comment=comment,
            is_auto_increment=auto_increment,
        )
        return field, inline_primary

    def _literal_default(self, value: exp.Expression | None) -> str | None:
        """
        Capture literal defaults and the NULL / current-timestamp sentinels.

        Any other expression yields None: the default is left empty rather
        than rejected.
        """
        if isinstance(value, exp.Null):
            return NULL
        if isinstance(value, exp.CurrentTimestamp):
            return CURRENT_TIMESTAMP
        if isinstance(value, exp.Anonymous) and value.name.upper() in _TIMESTAMP_FUNCTIONS:
            return CURRENT_TIMESTAMP
        if isinstance(value, exp.Literal):
            return value.this
        if (
            isinstance(value, exp.Neg)
            and isinstance(value.this, exp.Literal)
            and not value.this.is_string
        ):
            return f"-{value.this.this}"
        return None

    def _table_primary_keys(self, definition: exp.Expression) -> list[str]:
        """Column names of a table-level PRIMARY KEY (...) definition."""
        primary_key = (
            definition
            if isinstance(definition, exp.PrimaryKey)
            else definition.find(exp.PrimaryKey)
        )
        if primary_key is None:
            return []

        names = []
        for part in primary_key.expressions:
            identifier = (
                part if isinstance(part, exp.Identifier) else part.find(exp.Identifier)
            )
            names.append(identifier.name if identifier is not None else part.name)
        return names

    def _table_options_text(self, ddl_text: str) -> str:
        """Raw source text after the parenthesis closing the column list."""
        depth = 0
        for token in sqlglot.tokenize(ddl_text, read=self.dialect):
            if token.token_type == TokenType.L_PAREN:
                depth += 1
            elif token.token_type == TokenType.R_PAREN:
                depth -= 1
                if depth == 0:
                    return ddl_text[token.end + 1 :]
        return ""

    @staticmethod
    def _add_key(primary_keys: list[str], name: str) -> None:
        if name and name not in primary_keys:
            primary_keys.append(name)


def parse(ddl_text: str) -> TableSchema:
    """Parse a MySQL CREATE TABLE statement into a TableSchema."""
    return DDLParser().parse(ddl_text)
