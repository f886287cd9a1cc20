"""
Generator configuration.

Settings come from a YAML file, from ``SQL2ORM_*`` environment variables and
from command-line flags; later sources win (file < env < flags).
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from sql2orm.core.errors import ConfigError
from sql2orm.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_PACKAGE_NAME = "models"
ENV_PREFIX = "SQL2ORM_"


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Settings for one conversion run.

    Attributes:
        sql_file: Path of a file holding one CREATE TABLE statement
        output_file: Path of the module to write
        table_name: Table to convert
        package_name: Package named in the generated module header
        dsn: SQLAlchemy database URL; preferred over sql_file when both are set
        type_overrides: Native base type -> Python type name
    """

    sql_file: str = ""
    output_file: str = ""
    table_name: str = ""
    package_name: str = DEFAULT_PACKAGE_NAME
    dsn: str = ""
    type_overrides: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GeneratorConfig:
        """
        Build a config from a mapping, rejecting unknown keys.

        Raises:
            ConfigError: Unknown keys or wrongly typed values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}", field=unknown[0])

        overrides = data.get("type_overrides") or {}
        if not isinstance(overrides, dict):
            raise ConfigError("type_overrides must be a mapping", field="type_overrides")

        values: dict[str, Any] = {
            key: "" if value is None else str(value)
            for key, value in data.items()
            if key != "type_overrides"
        }
        config = cls(
            **values,
            type_overrides={str(k): str(v) for k, v in overrides.items()},
        )
        if not config.package_name:
            config = replace(config, package_name=DEFAULT_PACKAGE_NAME)
        return config

    @classmethod
    def from_yaml(cls, path: str | Path) -> GeneratorConfig:
        """
        Load a config file; a missing file yields the defaults.

        Raises:
            ConfigError: The file is not valid YAML or not a mapping
        """
        path = Path(path)
        if not path.exists():
            logger.debug("Config file not found, using defaults", config_file=str(path))
            return cls()

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        logger.info("Loaded config file", config_file=str(path))
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> dict[str, str]:
        """
        Read ``SQL2ORM_<FIELD>`` variables for the scalar settings.

        Returns:
            The values found, suitable for ``merge(**values)``
        """
        environ = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            if f.name == "type_overrides":
                continue
            value = environ.get(ENV_PREFIX + f.name.upper())
            if value:
                values[f.name] = value
        return values

    def merge(self, **overrides: Any) -> GeneratorConfig:
        """Return a copy with every non-empty override applied."""
        changes = {key: value for key, value in overrides.items() if value}
        return replace(self, **changes) if changes else self

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary."""
        return asdict(self)

    def to_yaml(self, path: str | Path) -> None:
        """Write the config as YAML."""
        Path(path).write_text(
            yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )

    def validate(self) -> None:
        """
        Check that the config describes a runnable conversion.

        Raises:
            ConfigError: A required setting is missing or the SQL file does
                not exist
        """
        if not self.output_file:
            raise ConfigError("Output file path must not be empty", field="output_file")
        if not self.table_name:
            raise ConfigError("Table name must not be empty", field="table_name")
        if not self.dsn and not self.sql_file:
            raise ConfigError("Either a DSN or a SQL file must be provided", field="dsn")
        if not self.dsn and not Path(self.sql_file).is_file():
            raise ConfigError(f"SQL file does not exist: {self.sql_file}", field="sql_file")


def load_config(
    config_file: str | Path | None = None,
    environ: dict[str, str] | None = None,
    **overrides: Any,
) -> GeneratorConfig:
    """
    Resolve the effective configuration.

    Args:
        config_file: YAML file to read (defaults to ./config.yaml if present)
        environ: Environment mapping (defaults to os.environ)
        **overrides: Values from the command line

    Returns:
        The merged configuration (not yet validated)
    """
    config = GeneratorConfig.from_yaml(config_file or DEFAULT_CONFIG_FILE)
    config = config.merge(**GeneratorConfig.from_env(environ))
    return config.merge(**overrides)
