"""Unit tests for the JSON schema extractor."""

import json

import pytest

from schema_diagram.engine import parse_json_schema, parse_sql


def test_single_table_document():
    schema, error = parse_json_schema('{"tables":[{"name":"a","columns":[{"name":"x","type":"int4"}]}]}')
    assert error == ""
    assert len(schema.tables) == 1
    table = schema.tables[0]
    assert table.id == "a"
    column = table.columns[0]
    assert column.name == "x"
    assert column.data_type == "int4"
    assert column.is_primary_key is False
    assert column.is_foreign_key is False


def test_nullable_defaults_differ_from_sql_column_definitions():
    """JSON columns are nullable unless nullable is false; SQL columns unless NOT NULL.

    The two formats state their defaults independently and both are kept as-is.
    """
    schema, _ = parse_json_schema(json.dumps({"tables": [{"name": "a", "columns": [
        {"name": "x", "type": "int4"},
        {"name": "y", "type": "int4", "nullable": False},
        {"name": "z", "type": "int4", "nullable": True},
    ]}]}))
    x, y, z = schema.tables[0].columns
    assert x.is_nullable is True
    assert y.is_nullable is False
    assert z.is_nullable is True

    sql_schema, _ = parse_sql("CREATE TABLE a (x int4, y int4 NOT NULL)")
    sql_x, sql_y = sql_schema.tables[0].columns
    assert sql_x.is_nullable is True
    assert sql_y.is_nullable is False


def test_primary_key_forces_not_null():
    schema, _ = parse_json_schema(json.dumps({"tables": [{"name": "a", "columns": [
        {"name": "id", "type": "uuid", "primaryKey": True},
    ]}]}))
    column = schema.tables[0].columns[0]
    assert column.is_primary_key is True
    assert column.is_nullable is False


def test_foreign_key_sets_references_and_relationship():
    document = {"tables": [
        {"name": "Users", "columns": [{"name": "id", "type": "uuid", "primaryKey": True}]},
        {"name": "Posts", "columns": [
            {"name": "id", "type": "uuid", "primaryKey": True},
            {"name": "author_id", "type": "uuid", "foreignKey": {"table": "Users", "column": "id"}},
        ]},
    ]}
    schema, error = parse_json_schema(json.dumps(document))
    assert error == ""
    author = schema.get_table("posts").get_column("author_id")
    assert author.is_foreign_key is True
    assert author.references == ("Users", "id")
    assert [r.id for r in schema.relationships] == ["Posts_author_id_Users_id"]


def test_missing_tables_array():
    schema, error = parse_json_schema('{"entities": []}')
    assert error == "Invalid JSON: missing tables array"
    assert schema.tables == ()


def test_tables_not_an_array():
    _, error = parse_json_schema('{"tables": {"name": "a"}}')
    assert error == "Invalid JSON: missing tables array"


def test_trailing_comma_is_a_format_error():
    schema, error = parse_json_schema('{"tables": [],}')
    assert error.startswith("JSON parse error")
    assert schema.tables == () and schema.relationships == ()


def test_unterminated_brace_is_a_format_error():
    schema, error = parse_json_schema('{"tables": [')
    assert error.startswith("JSON parse error")
    assert schema.is_empty()


def test_bad_column_entry_yields_empty_schema():
    text = json.dumps({"tables": [
        {"name": "ok", "columns": [{"name": "id", "type": "int"}]},
        {"name": "bad", "columns": ["id"]},
    ]})
    schema, error = parse_json_schema(text)
    assert error.startswith("Invalid JSON:")
    assert schema.is_empty()


def test_type_defaults_to_text():
    schema, _ = parse_json_schema('{"tables":[{"name":"a","columns":[{"name":"x"}]}]}')
    assert schema.tables[0].columns[0].data_type == "text"


def test_deeply_nested_document_is_a_format_error():
    text = '{"tables": ' + '[' * 100000 + ']' * 100000 + '}'
    schema, error = parse_json_schema(text)
    assert error.startswith("JSON parse error")
    assert schema.is_empty()


def test_foreign_key_target_must_be_strings():
    text = json.dumps({"tables": [{"name": "a", "columns": [
        {"name": "b_id", "type": "int", "foreignKey": {"table": 5, "column": "id"}},
    ]}]})
    schema, error = parse_json_schema(text)
    assert error.startswith("Invalid JSON:")
    assert "foreignKey" in error
    assert schema.is_empty()


def test_column_type_must_be_a_string():
    text = json.dumps({"tables": [{"name": "a", "columns": [{"name": "x", "type": ["int"]}]}]})
    schema, error = parse_json_schema(text)
    assert error.startswith("Invalid JSON:")
    assert schema.is_empty()


def test_parsed_schema_is_read_only():
    schema, _ = parse_json_schema('{"tables":[{"name":"a","columns":[{"name":"x","type":"int"}]}]}')
    table = schema.tables[0]
    assert isinstance(table.columns, tuple)
    with pytest.raises(AttributeError):
        table.columns[0].is_nullable = False
    with pytest.raises(AttributeError):
        table.name = "b"
