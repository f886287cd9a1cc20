"""
Conversion pipeline.

Wires schema extraction (DDL text or a live database), type mapping and code
synthesis together, and writes the result for a configured run.
"""

from __future__ import annotations

import time
from pathlib import Path

from sql2orm.codegen.generator import GenerationResult
from sql2orm.codegen.mapper import TypeMapper
from sql2orm.codegen.models import ModelCodeGenerator
from sql2orm.codegen.naming import NamingPolicy
from sql2orm.config import GeneratorConfig
from sql2orm.core.types import TableSchema
from sql2orm.introspection import DatabaseIntrospector
from sql2orm.logging import get_logger, with_log_context
from sql2orm.parser import DDLParser

logger = get_logger(__name__)


def convert_schema(
    schema: TableSchema,
    package_name: str = "models",
    *,
    naming: NamingPolicy | None = None,
    mapper: TypeMapper | None = None,
) -> str:
    """
    Generate model source for an already-built schema.

    Raises:
        SynthesisError: The generated text is not valid Python
    """
    generator = ModelCodeGenerator(schema, package_name, naming=naming, mapper=mapper)
    return _generate(generator).files[0].content


def _generate(generator: ModelCodeGenerator) -> GenerationResult:
    """Run a generator, logging its warnings and timing."""
    start = time.perf_counter()
    result = generator.generate()
    for warning in result.warnings:
        logger.warning(warning)
    logger.debug(
        "Generated model source",
        field_count=len(generator.schema.fields),
        duration_ms=(time.perf_counter() - start) * 1000,
    )
    return result


def convert_ddl(
    ddl: str,
    package_name: str = "models",
    *,
    naming: NamingPolicy | None = None,
    mapper: TypeMapper | None = None,
) -> str:
    """
    Generate model source from a CREATE TABLE statement.

    Raises:
        ParseError: The statement cannot be parsed
        SynthesisError: The generated text is not valid Python
    """
    schema = DDLParser().parse(ddl)
    with with_log_context(table_name=schema.name, source="ddl"):
        logger.debug("Parsed table", field_count=len(schema.fields))
        return convert_schema(schema, package_name, naming=naming, mapper=mapper)


def load_schema(config: GeneratorConfig) -> TableSchema:
    """
    Build the schema for a run: from the database when a DSN is set,
    otherwise from the SQL file.
    """
    if config.dsn:
        with with_log_context(table_name=config.table_name, source="database"):
            with DatabaseIntrospector.from_url(config.dsn) as introspector:
                schema = introspector.get_table_schema(config.table_name)
            logger.info("Read table structure from database")
            return schema

    schema = DDLParser().parse(Path(config.sql_file).read_text(encoding="utf-8"))
    with with_log_context(table_name=schema.name, source="ddl"):
        logger.info("Read table structure from SQL file", sql_file=config.sql_file)
        if config.table_name and config.table_name != schema.name:
            logger.warning(
                "SQL file defines a different table than configured",
                configured_table=config.table_name,
            )
    return schema


def run(config: GeneratorConfig) -> Path:
    """
    Execute a configured conversion and write the generated module.

    Returns:
        Path of the written file

    Raises:
        Sql2OrmError: Any configuration, extraction, mapping or synthesis failure
    """
    config.validate()
    mapper = TypeMapper(config.type_overrides)

    schema = load_schema(config)
    output = Path(config.output_file)
    generator = ModelCodeGenerator(
        schema,
        config.package_name,
        mapper=mapper,
        module_name=output.stem,
        file_name=output.name,
    )
    (output,) = _generate(generator).write_all(output.parent)

    with with_log_context(
        table_name=schema.name,
        package_name=config.package_name,
        output_file=str(output),
    ):
        logger.info("Wrote generated model")
    return output
