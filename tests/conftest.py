"""Shared fixtures for the schema diagram tests."""

import os

import pytest

os.environ.setdefault("FLASK_ENV", "testing")

from schema_diagram.engine import parse_sql  # noqa: E402

USERS_POSTS_SQL = (
    "CREATE TABLE users (id uuid PRIMARY KEY, name text NOT NULL); "
    "CREATE TABLE posts (id uuid PRIMARY KEY, user_id uuid REFERENCES users(id));"
)


@pytest.fixture
def users_posts_sql():
    return USERS_POSTS_SQL


@pytest.fixture
def users_posts_schema():
    schema, error = parse_sql(USERS_POSTS_SQL)
    assert error == ""
    return schema


@pytest.fixture
def users_posts_positions():
    return {
        "users": {"x": 600, "y": 100},
        "posts": {"x": 100, "y": 100},
    }
