"""Tests for the model code generator."""

import ast

import pytest
from sqlalchemy import Integer, String

from sql2orm.codegen import ModelCodeGenerator, NamingPolicy, TypeMapper, synthesize
from sql2orm.core.errors import SynthesisError
from sql2orm.core.types import FieldSchema, TableSchema
from sql2orm.parser import parse


class TestSynthesize:
    """Source text produced for the ny_order table."""

    def test_is_valid_python(self, order_schema: TableSchema):
        ast.parse(synthesize(order_schema))

    def test_header_names_package(self, order_schema: TableSchema):
        source = synthesize(order_schema, "app.models")

        assert source.startswith('"""\nPackage app.models.\n')
        assert "Model for table ny_order." in source

    def test_model_class(self, order_schema: TableSchema):
        source = synthesize(order_schema)

        assert "class OrderModel(Base):" in source
        assert '"""OrderModel orders"""' in source
        assert '__tablename__ = "ny_order"' in source
        assert 'return "ny_order"' in source
        assert "OrderModelIns = OrderModel()" in source

    def test_fields_in_schema_order(self, order_schema: TableSchema):
        source = synthesize(order_schema)

        positions = [source.index(f"{name}: Mapped[") for name in ("Id", "OrderNo", "CreatedAt")]
        assert positions == sorted(positions)

    def test_annotations(self, order_schema: TableSchema):
        source = synthesize(order_schema)

        assert "Id: Mapped[int | None]" in source
        assert "OrderNo: Mapped[str] " in source
        assert "CreatedAt: Mapped[str | None]" in source

    def test_field_comment(self, order_schema: TableSchema):
        assert "# primary key" in synthesize(order_schema)

    def test_imports_follow_defaults(self, order_schema: TableSchema):
        assert "from sqlalchemy import func, inspect\n" in synthesize(order_schema)

        plain = TableSchema(name="t", fields=[FieldSchema(name="id", native_type="int")])
        assert "from sqlalchemy import inspect\n" in synthesize(plain)

    def test_singleton_after_class(self, order_schema: TableSchema):
        source = synthesize(order_schema)

        assert source.index("class OrderModel(Base):") < source.index("OrderModelIns = ")

    def test_deterministic(self, order_schema: TableSchema):
        assert synthesize(order_schema) == synthesize(order_schema)

    def test_canonical_form_is_stable(self, order_schema: TableSchema):
        from sql2orm.codegen import canonicalize

        source = synthesize(order_schema)
        assert canonicalize(source) == source

    def test_unprefixed_table(self):
        assert "class OrderModel(Base):" in synthesize(parse("CREATE TABLE orders (id int)"))


class TestGeneratedModule:
    """The generated module imports and maps the table."""

    def test_table_metadata(self, order_schema: TableSchema, load_module):
        module = load_module(synthesize(order_schema))
        table = module.OrderModel.__table__

        assert table.name == "ny_order"
        assert [c.name for c in table.columns] == ["id", "order_no", "created_at"]
        assert table.c["id"].primary_key is True
        assert table.c["id"].autoincrement is True
        assert table.c["order_no"].nullable is False
        assert table.c["created_at"].nullable is True
        assert str(table.c["created_at"].server_default.arg) == "CURRENT_TIMESTAMP"

    def test_column_types(self, order_schema: TableSchema, load_module):
        table = load_module(synthesize(order_schema)).OrderModel.__table__

        assert isinstance(table.c["id"].type, Integer)
        assert isinstance(table.c["order_no"].type, String)

    def test_serialization_names(self, order_schema: TableSchema, load_module):
        module = load_module(synthesize(order_schema))

        assert module.OrderModel.__table__.c["order_no"].info == {"json": "order_no"}
        assert module.OrderModelIns.to_dict() == {
            "id": None,
            "order_no": None,
            "created_at": None,
        }

    def test_to_dict_values(self, order_schema: TableSchema, load_module):
        module = load_module(synthesize(order_schema))

        order = module.OrderModel(Id=7, OrderNo="A-1")
        assert order.to_dict()["order_no"] == "A-1"
        assert order.to_dict()["id"] == 7

    def test_table_name_accessor(self, order_schema: TableSchema, load_module):
        module = load_module(synthesize(order_schema))

        assert module.OrderModel.table_name() == "ny_order"
        assert module.OrderModelIns.table_name() == "ny_order"
        assert module.__all__ == ["Base", "OrderModel", "OrderModelIns"]

    def test_literal_and_null_defaults(self, user_role_ddl: str, load_module):
        module = load_module(synthesize(parse(user_role_ddl)))
        table = module.UserRoleModel.__table__

        assert table.c["score"].server_default.arg == "0.00"
        assert table.c["level"].server_default.arg == "-1"
        assert table.c["note"].server_default is not None
        assert [c.name for c in table.primary_key.columns] == ["user_id", "role_id"]
        assert table.c["user_id"].comment is None
        assert table.c["user_id"].info == {"json": "user_id"}


class TestEscaping:
    """Free text from the schema never breaks the module."""

    def test_table_comment_with_quotes(self, load_module):
        schema = TableSchema(
            name="ny_order",
            comment='he said "hi" \\ bye',
            fields=[FieldSchema(name="id", native_type="int")],
            primary_keys=["id"],
        )

        module = load_module(synthesize(schema))
        assert module.OrderModel.__doc__ == 'OrderModel he said "hi" \\ bye'

    def test_multiline_field_comment(self):
        schema = TableSchema(
            name="ny_order",
            fields=[FieldSchema(name="id", native_type="int", comment="first\nsecond")],
            primary_keys=["id"],
        )

        source = synthesize(schema)
        ast.parse(source)
        assert "# first second" in source

    def test_default_with_quotes(self, load_module):
        schema = TableSchema(
            name="ny_order",
            fields=[
                FieldSchema(name="id", native_type="int"),
                FieldSchema(name="label", native_type="varchar(8)", default_value="it's \"x\""),
            ],
            primary_keys=["id"],
        )

        table = load_module(synthesize(schema)).OrderModel.__table__
        assert table.c["label"].server_default.arg == "it's \"x\""


class TestKeywordColumns:
    """Columns whose attribute name would be a Python keyword."""

    def test_keyword_attributes_escaped(self, load_module):
        schema = parse(
            "CREATE TABLE ny_flag (id int primary key, `none` tinyint(1), "
            "`true` int, `false` int)"
        )

        module = load_module(synthesize(schema))
        mapper = module.FlagModel.__mapper__

        assert [c.name for c in module.FlagModel.__table__.columns] == [
            "id", "none", "true", "false",
        ]
        assert mapper.attrs["None_"].columns[0].name == "none"
        assert mapper.attrs["True_"].columns[0].name == "true"
        assert mapper.attrs["False_"].columns[0].name == "false"
        assert module.FlagModel.__table__.c["none"].info == {"json": "none"}
        assert "none" in module.FlagModelIns.to_dict()


class TestSynthesisErrors:
    """Schemas that cannot become a correct Python module."""

    def test_columns_deriving_same_attribute(self):
        schema = parse("CREATE TABLE ny_o (id int primary key, order_no int, order__no int)")

        with pytest.raises(SynthesisError, match="'order_no' and 'order__no'") as exc_info:
            synthesize(schema)

        assert "OrderNo" in str(exc_info.value)
        assert "class OModel(Base):" in exc_info.value.source

    def test_table_name_with_dash(self):
        schema = TableSchema(
            name="ny_order-items",
            fields=[FieldSchema(name="id", native_type="int")],
        )

        with pytest.raises(SynthesisError):
            synthesize(schema)


class TestModelCodeGenerator:
    """Tests for ModelCodeGenerator."""

    def test_generates_one_file(self, order_schema: TableSchema):
        result = ModelCodeGenerator(order_schema).generate()

        assert len(result.files) == 1
        assert result.files[0].path == "ny_order.py"
        assert result.files[0].module_name == "ny_order"
        assert result.warnings == []

    def test_custom_module_name(self, order_schema: TableSchema):
        result = ModelCodeGenerator(order_schema, module_name="order").generate()

        assert result.files[0].path == "order.py"

    def test_custom_file_name(self, order_schema: TableSchema):
        result = ModelCodeGenerator(
            order_schema, module_name="order", file_name="order_model.py"
        ).generate()

        assert result.files[0].path == "order_model.py"
        assert result.files[0].module_name == "order"

    def test_warns_without_primary_key(self):
        result = ModelCodeGenerator(parse("CREATE TABLE orders (id int)")).generate()

        assert len(result.warnings) == 1
        assert "orders has no primary key" in result.warnings[0]
        assert "class OrderModel(Base):" in result.files[0].content

    def test_write_all(self, order_schema: TableSchema, tmp_path):
        written = ModelCodeGenerator(order_schema).generate().write_all(tmp_path / "models")

        assert written == [tmp_path / "models" / "ny_order.py"]
        assert "class OrderModel(Base):" in written[0].read_text(encoding="utf-8")

    def test_names(self, order_schema: TableSchema):
        generator = ModelCodeGenerator(order_schema, naming=NamingPolicy(model_suffix="Entity"))

        assert generator.model_name == "OrderEntity"
        assert generator.instance_name == "OrderEntityIns"
        assert "OrderEntityIns = OrderEntity()" in generator.render()

    def test_custom_mapper(self, load_module):
        schema = TableSchema(
            name="ny_flag",
            fields=[
                FieldSchema(name="id", native_type="int"),
                FieldSchema(name="enabled", native_type="tinyint(1)", nullable=False),
            ],
            primary_keys=["id"],
        )

        source = ModelCodeGenerator(schema, mapper=TypeMapper({"tinyint": "bool"})).render()
        assert "Enabled: Mapped[bool]" in source
        load_module(source)

    def test_assemble_is_not_formatted(self, order_schema: TableSchema):
        generator = ModelCodeGenerator(order_schema)

        assert generator.assemble() != generator.render()
