"""
JSON schema parser - maps a declarative JSON document onto the schema model
"""
import json
import logging
from typing import Any, Dict, List, Tuple

from .er_model import Column, Table, Relationship, Schema

logger = logging.getLogger(__name__)


class SchemaFormatError(ValueError):
    """The decoded document does not have the expected shape"""


def parse_json_schema(text: str) -> Tuple[Schema, str]:
    """
    Parse a JSON schema document

    Expected shape::

        {"tables": [{"name": ..., "columns": [{"name": ..., "type": ...,
            "primaryKey": bool?, "foreignKey": {"table": ..., "column": ...}?,
            "nullable": bool?}]}]}

    A column is nullable unless it carries ``nullable: false``.

    Returns:
        Tuple of (schema, error message); the schema is empty whenever the
        error message is not.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError, RecursionError) as e:
        # 嵌套过深的文档会触发 RecursionError
        return Schema.empty(), f"JSON parse error: {e}"

    if not isinstance(data, dict) or not isinstance(data.get('tables'), list):
        return Schema.empty(), "Invalid JSON: missing tables array"

    try:
        return build_schema(data['tables']), ""
    except SchemaFormatError as e:
        logger.debug("Rejected JSON schema document: %s", e)
        return Schema.empty(), f"Invalid JSON: {e}"


def build_schema(tables_data: List[Any]) -> Schema:
    """Build the schema from the ``tables`` array; raises SchemaFormatError on bad entries"""
    tables = []
    relationships = []

    for index, table_data in enumerate(tables_data):
        if not isinstance(table_data, dict) or not isinstance(table_data.get('name'), str):
            raise SchemaFormatError(f"table #{index} must be an object with a name")

        columns_data = table_data.get('columns', [])
        if not isinstance(columns_data, list):
            raise SchemaFormatError(f"columns of table {table_data['name']} must be an array")

        table = Table(table_data['name'])
        for col_data in columns_data:
            column = _build_column(table.name, col_data)
            table.columns.append(column)
            if column.references:
                relationships.append(Relationship(
                    table.name, column.name, column.references[0], column.references[1]
                ))
        tables.append(table)

    return Schema(tables, relationships)


def _build_column(table_name: str, col_data: Dict[str, Any]) -> Column:
    if not isinstance(col_data, dict) or not isinstance(col_data.get('name'), str):
        raise SchemaFormatError(f"every column of table {table_name} needs a name")

    references = None
    foreign_key = col_data.get('foreignKey')
    if foreign_key:
        if (not isinstance(foreign_key, dict) or not isinstance(foreign_key.get('table'), str)
                or not isinstance(foreign_key.get('column'), str)):
            raise SchemaFormatError(
                f"foreignKey of {table_name}.{col_data['name']} needs string table and column"
            )
        references = (foreign_key['table'], foreign_key['column'])

    data_type = col_data.get('type', 'text')
    if not isinstance(data_type, str):
        raise SchemaFormatError(f"type of {table_name}.{col_data['name']} must be a string")

    return Column(
        name=col_data['name'],
        data_type=data_type,
        is_primary_key=bool(col_data.get('primaryKey', False)),
        is_nullable=col_data.get('nullable') is not False,
        references=references,
    )
