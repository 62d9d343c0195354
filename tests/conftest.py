# tests/conftest.py

import copy
import json

import pytest

SAMPLE_DATABASE = {
    "tables": [
        {
            "name": "users",
            "note": "ユーザー情報テーブル",
            "fields": [
                {
                    "name": "id",
                    "type": {"type_name": "bigint"},
                    "pk": True,
                    "increment": True,
                    "not_null": True,
                },
                {
                    "name": "email",
                    "type": {"type_name": "varchar", "args": [255]},
                    "unique": True,
                    "not_null": True,
                    "note": "メールアドレス",
                },
                {
                    "name": "name",
                    "type": "varchar",
                    "note": "氏名, 漢字",
                },
                {
                    "name": "status",
                    "type": "varchar",
                    "default": "active",
                },
            ],
        },
        {
            "name": "products",
            "note": "商品情報テーブル",
            "fields": [
                {
                    "name": "price",
                    "type": {"type_name": "decimal", "args": [10, 2]},
                    "default": 0,
                },
            ],
        },
    ]
}

SAMPLE_DBML = """\
Table users {
  id bigint [pk, increment]
  email varchar(255) [unique, not null, note: 'メールアドレス']
  name varchar
  status varchar [default: 'active']
  Note: 'ユーザー情報テーブル'
}

Table products {
  price decimal(10,2)
  Note: '商品情報テーブル'
}
"""


@pytest.fixture
def sample_database():
    """A fresh copy of the two-table users/products schema."""
    return copy.deepcopy(SAMPLE_DATABASE)


@pytest.fixture
def dbml_text():
    return SAMPLE_DBML


@pytest.fixture
def dbml_file(tmp_path):
    path = tmp_path / "schema.dbml"
    path.write_text(SAMPLE_DBML, encoding="utf-8")
    return path


@pytest.fixture
def json_file(tmp_path, sample_database):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(sample_database, ensure_ascii=False), encoding="utf-8")
    return path
