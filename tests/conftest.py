"""
Shared test fixtures.
"""

import logging
import sys
import types
import uuid

import pytest

from sql2orm.core.types import FieldSchema, TableSchema

# === DDL samples ===

ORDER_DDL = (
    "CREATE TABLE ny_order ("
    "id bigint primary key auto_increment, "
    "order_no varchar(32) not null, "
    "created_at datetime default CURRENT_TIMESTAMP"
    ") COMMENT='orders'"
)

USER_ROLE_DDL = """
CREATE TABLE `t_user_role` (
  `user_id` int(11) NOT NULL COMMENT 'user',
  `role_id` int(11) NOT NULL,
  `note` varchar(255) DEFAULT NULL,
  `score` decimal(10,2) DEFAULT '0.00',
  `level` int DEFAULT -1,
  `ratio` double DEFAULT 1.5,
  `avatar` blob,
  PRIMARY KEY (`user_id`, `role_id`),
  KEY `idx_role` (`role_id`)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COMMENT='user roles';
"""


# === Fixtures ===


@pytest.fixture
def order_ddl() -> str:
    """The ny_order CREATE TABLE statement."""
    return ORDER_DDL


@pytest.fixture
def user_role_ddl() -> str:
    """A backtick-quoted statement with a composite primary key."""
    return USER_ROLE_DDL


@pytest.fixture
def order_schema() -> TableSchema:
    """Schema equivalent to parsing ORDER_DDL."""
    return TableSchema(
        name="ny_order",
        comment="orders",
        fields=[
            FieldSchema(
                name="id",
                native_type="bigint",
                comment="primary key",
                is_auto_increment=True,
            ),
            FieldSchema(name="order_no", native_type="varchar(32)", nullable=False),
            FieldSchema(
                name="created_at",
                native_type="datetime",
                default_value="CURRENT_TIMESTAMP",
            ),
        ],
        primary_keys=["id"],
    )


@pytest.fixture
def load_module():
    """
    Execute generated source as a fresh module.

    Each call gets a unique module name so the declarative registries of
    separate generated modules never meet.
    """
    loaded = []

    def _load(source: str) -> types.ModuleType:
        name = f"generated_{uuid.uuid4().hex}"
        module = types.ModuleType(name)
        sys.modules[name] = module
        loaded.append(name)
        exec(compile(source, f"<{name}>", "exec"), module.__dict__)
        return module

    yield _load

    for name in loaded:
        sys.modules.pop(name, None)


@pytest.fixture(autouse=True)
def reset_sql2orm_logger():
    """Drop handlers installed by configure_logging() during a test."""
    yield
    logger = logging.getLogger("sql2orm")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
