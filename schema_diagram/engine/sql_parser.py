"""
SQL parser - extracts tables, columns and foreign keys from CREATE TABLE statements
"""
import logging
import re
from typing import List, Optional, Tuple

from .er_model import Column, Table, Relationship, Schema

logger = logging.getLogger(__name__)

# 可选引号包裹的标识符，支持 schema.table 形式，只保留最后一段
_QUALIFIED = r'(?:[`"\[]?\w+[`"\]]?\s*\.\s*)*[`"\[]?(\w+)[`"\]]?'

CREATE_TABLE_RE = re.compile(
    r'CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?' + _QUALIFIED + r'\s*\(',
    re.IGNORECASE
)
PRIMARY_KEY_RE = re.compile(r'PRIMARY\s+KEY\s*\(([^)]+)\)', re.IGNORECASE)
FOREIGN_KEY_RE = re.compile(
    r'FOREIGN\s+KEY\s*\(([^)]+)\)\s*REFERENCES\s+' + _QUALIFIED + r'\s*(?:\(([^)]+)\))?',
    re.IGNORECASE
)
INLINE_REFERENCES_RE = re.compile(
    r'REFERENCES\s+' + _QUALIFIED + r'\s*(?:\(\s*[`"\[]?(\w+)[`"\]]?\s*\))?',
    re.IGNORECASE
)
COLUMN_RE = re.compile(r'^[`"\[]?(\w+)[`"\]]?\s+(\w+(?:\s*\([^)]*\))?)')

# 字符串和带引号的标识符内的括号、逗号不参与分割
QUOTE_CHARS = ("'", '"', "`")

KNOWN_TYPES = {
    'int', 'int2', 'int4', 'int8', 'integer', 'smallint', 'bigint', 'tinyint', 'mediumint',
    'serial', 'bigserial', 'smallserial',
    'float', 'float4', 'float8', 'real', 'double', 'numeric', 'decimal', 'money',
    'boolean', 'bool', 'bit',
    'text', 'varchar', 'char', 'character', 'nvarchar', 'nchar', 'citext',
    'uuid', 'date', 'time', 'timetz', 'timestamp', 'timestamptz', 'datetime', 'interval',
    'json', 'jsonb', 'xml', 'bytea', 'blob', 'inet', 'cidr',
}
_TYPE_NAMES = '|'.join(sorted(KNOWN_TYPES))

# 约束分类：按顺序匹配，先匹配者优先
CLAUSE_CLASSIFIERS = [
    ('primary_key', re.compile(r'^PRIMARY\s+KEY\b', re.IGNORECASE)),
    ('foreign_key', re.compile(r'^FOREIGN\s+KEY\b', re.IGNORECASE)),
    ('named_constraint', re.compile(r'^CONSTRAINT\b', re.IGNORECASE)),
    ('other_constraint', re.compile(
        r'^(?:UNIQUE\s*(?:\(|KEY\b|INDEX\b)|CHECK\s*\(|EXCLUDE\b|FULLTEXT\b'
        r'|(?:KEY|INDEX)\s*\(|(?:KEY|INDEX)\s+(?!(?:' + _TYPE_NAMES + r')\b)\w+\s*\()',
        re.IGNORECASE
    )),
    ('column', re.compile(r'^')),
]


def parse_sql(sql: str) -> Tuple[Schema, str]:
    """
    Parse CREATE TABLE statements into a schema

    Args:
        sql: SQL text containing zero or more CREATE TABLE statements

    Returns:
        Tuple of (schema, error message). The error message is empty on success;
        on failure the schema is empty.
    """
    try:
        sql = clean_sql(sql)

        tables: List[Table] = []
        relationships: List[Relationship] = []

        pos = 0
        while True:
            match = CREATE_TABLE_RE.search(sql, pos)
            if not match:
                break

            table_name = match.group(1)
            open_paren = match.end() - 1
            close_paren = find_closing_paren(sql, open_paren)
            if close_paren == -1:
                # 括号不匹配，跳过这个语句
                logger.debug("Unbalanced CREATE TABLE statement for %s skipped", table_name)
                pos = match.end()
                continue

            body = sql[open_paren + 1:close_paren]
            table = Table(table_name)
            for clause in smart_split(body):
                _apply_clause(table, clause, relationships)

            tables.append(table)
            pos = close_paren + 1

        if not tables:
            return Schema.empty(), "No CREATE TABLE statements found"

        return Schema(tables, relationships), ""

    except Exception as e:
        logger.exception("Unexpected error while parsing SQL")
        return Schema.empty(), f"Parse error: {e}"


def clean_sql(sql: str) -> str:
    """Strip block and line comments, then collapse whitespace runs"""
    sql = re.sub(r'/\*.*?\*/', '', sql, flags=re.DOTALL)
    sql = re.sub(r'--[^\n]*', '', sql)
    return re.sub(r'\s+', ' ', sql).strip()


def find_closing_paren(text: str, open_index: int) -> int:
    """Index of the parenthesis closing the one at open_index, or -1"""
    depth = 0
    quote_char = None

    for i in range(open_index, len(text)):
        char = text[i]

        if quote_char:
            if char == quote_char:
                quote_char = None
            continue
        if char in QUOTE_CHARS:
            quote_char = char
            continue

        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth == 0:
                return i

    return -1


def smart_split(content: str) -> List[str]:
    """Split a CREATE TABLE body on top-level commas, honouring nested parentheses and quotes"""
    parts = []
    current = []
    depth = 0
    quote_char = None

    for char in content:
        if quote_char:
            if char == quote_char:
                quote_char = None
        elif char in QUOTE_CHARS:
            quote_char = char
        elif char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
        elif char == ',' and depth == 0:
            parts.append(''.join(current).strip())
            current = []
            continue
        current.append(char)

    tail = ''.join(current).strip()
    if tail:
        parts.append(tail)

    return [part for part in parts if part]


def classify_clause(clause: str) -> str:
    """Return the kind of a body clause: the first classifier that matches wins"""
    for kind, pattern in CLAUSE_CLASSIFIERS:
        if pattern.match(clause):
            return kind
    return 'column'


def normalize_type(col_type: str) -> str:
    """Lowercase recognized base types, leave unknown types untouched"""
    base = col_type.split('(', 1)[0].strip().lower()
    if base in KNOWN_TYPES:
        return col_type.lower()
    return col_type


def _split_names(names: str) -> List[str]:
    return [name.strip().strip('`"[]') for name in names.split(',') if name.strip()]


def _apply_clause(table: Table, clause: str, relationships: List[Relationship]) -> None:
    kind = classify_clause(clause)
    handler = _CLAUSE_HANDLERS.get(kind)
    if handler is None:
        logger.debug("Skipping %s clause in %s: %s", kind, table.name, clause)
        return
    handler(table, clause, relationships)


def _apply_primary_key(table: Table, clause: str, relationships: List[Relationship]) -> None:
    pk_match = PRIMARY_KEY_RE.search(clause)
    if not pk_match:
        return
    for pk_col in _split_names(pk_match.group(1)):
        column = table.get_column(pk_col)
        if column:
            column.mark_primary_key()


def _apply_foreign_key(table: Table, clause: str, relationships: List[Relationship]) -> None:
    fk_match = FOREIGN_KEY_RE.search(clause)
    if not fk_match:
        return

    local_cols = _split_names(fk_match.group(1))
    ref_table = fk_match.group(2)
    ref_cols = _split_names(fk_match.group(3)) if fk_match.group(3) else []

    for i, local_col in enumerate(local_cols):
        ref_col = ref_cols[i] if i < len(ref_cols) else local_col
        column = table.get_column(local_col)
        if column:
            column.mark_foreign_key(ref_table, ref_col)
        relationships.append(Relationship(table.name, local_col, ref_table, ref_col))


def _parse_column(clause: str) -> Optional[Tuple[Column, Optional[Tuple[str, str]]]]:
    col_match = COLUMN_RE.match(clause)
    if not col_match:
        return None

    col_name = col_match.group(1)
    col_type = normalize_type(col_match.group(2))
    upper_clause = clause.upper()
    is_pk = 'PRIMARY KEY' in upper_clause

    references = None
    ref_match = INLINE_REFERENCES_RE.search(clause)
    if ref_match:
        references = (ref_match.group(1), ref_match.group(2) or 'id')

    column = Column(
        name=col_name,
        data_type=col_type,
        is_primary_key=is_pk,
        is_nullable=not ('NOT NULL' in upper_clause or is_pk),
        references=references,
    )
    return column, references


def _apply_column(table: Table, clause: str, relationships: List[Relationship]) -> None:
    parsed = _parse_column(clause)
    if parsed is None:
        logger.debug("Unrecognized column definition in %s: %s", table.name, clause)
        return

    column, references = parsed
    table.columns.append(column)
    if references:
        relationships.append(Relationship(table.name, column.name, references[0], references[1]))


_CLAUSE_HANDLERS = {
    'primary_key': _apply_primary_key,
    'foreign_key': _apply_foreign_key,
    'column': _apply_column,
}
