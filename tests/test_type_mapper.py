"""Tests for SQL Server -> C# type mapping."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from db2crud.helpers.type_mapper import TypeMapper, get_type_mapper, map_sql_server_type


@pytest.fixture()
def mapper() -> TypeMapper:
    return TypeMapper("mssql", "csharp")


class TestMapType:

    @pytest.mark.parametrize(
        ("native", "expected"),
        [
            ("int", "int"),
            ("bigint", "long"),
            ("smallint", "short"),
            ("tinyint", "byte"),
            ("bit", "bool"),
            ("money", "decimal"),
            ("numeric", "decimal"),
            ("float", "double"),
            ("real", "float"),
            ("datetime2", "DateTime"),
            ("datetimeoffset", "DateTimeOffset"),
            ("time", "TimeSpan"),
            ("uniqueidentifier", "Guid"),
            ("nvarchar", "string"),
            ("xml", "string"),
            ("varbinary", "byte[]"),
            ("rowversion", "byte[]"),
        ],
    )
    def test_non_nullable_types(self, mapper: TypeMapper, native: str, expected: str) -> None:
        assert mapper.map_type(native, is_nullable=False) == expected

    def test_nullable_value_type_gets_marker(self, mapper: TypeMapper) -> None:
        assert mapper.map_type("int", is_nullable=True) == "int?"
        assert mapper.map_type("uniqueidentifier", is_nullable=True) == "Guid?"

    def test_nullable_string_is_undecorated(self, mapper: TypeMapper) -> None:
        assert mapper.map_type("nvarchar", is_nullable=True) == "string"

    def test_nullable_array_is_undecorated(self, mapper: TypeMapper) -> None:
        assert mapper.map_type("varbinary", is_nullable=True) == "byte[]"

    def test_lookup_is_case_insensitive(self, mapper: TypeMapper) -> None:
        assert mapper.map_type("BIGINT", is_nullable=False) == "long"
        assert mapper.map_type(" DateTime2 ", is_nullable=True) == "DateTime?"

    def test_unknown_and_missing_types_fall_back_to_string(self, mapper: TypeMapper) -> None:
        assert mapper.map_type("sql_variant", is_nullable=False) == "string"
        assert mapper.map_type("geography", is_nullable=True) == "string"
        assert mapper.map_type(None, is_nullable=True) == "string"
        assert mapper.map_type("", is_nullable=False) == "string"

    def test_facets_do_not_change_result(self, mapper: TypeMapper) -> None:
        assert mapper.map_type("decimal", False, precision=18, scale=2) == "decimal"
        assert mapper.map_type("nvarchar", False, max_length=-1) == "string"


class TestMappingFile:

    def test_available_native_types_sorted(self, mapper: TypeMapper) -> None:
        types = mapper.available_native_types
        assert types == sorted(types)
        assert "uniqueidentifier" in types

    def test_missing_mapping_file_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            TypeMapper("oracle", "csharp")

    def test_custom_mapping_file(self, tmp_path: Path) -> None:
        (tmp_path / "pg-to-csharp.mapping.yaml").write_text(
            "mappings:\n  INT4: int\n  bytea: byte[]\nfallback: object\n"
        )
        with patch("db2crud.helpers.type_mapper._TYPE_MAPS_DIR", tmp_path):
            custom = TypeMapper("pg", "csharp")

        assert custom.map_type("int4", is_nullable=True) == "int?"
        assert custom.map_type("bytea", is_nullable=True) == "byte[]"
        assert custom.map_type("jsonb", is_nullable=False) == "object"

    def test_mappings_must_be_a_mapping(self, tmp_path: Path) -> None:
        (tmp_path / "bad-to-csharp.mapping.yaml").write_text("mappings:\n  - int\n")
        with patch("db2crud.helpers.type_mapper._TYPE_MAPS_DIR", tmp_path), \
                pytest.raises(ValueError, match="Invalid mappings"):
            TypeMapper("bad", "csharp")


class TestModuleHelpers:

    def test_get_type_mapper_is_cached(self) -> None:
        assert get_type_mapper("mssql", "csharp") is get_type_mapper("mssql", "csharp")

    def test_map_sql_server_type(self) -> None:
        assert map_sql_server_type("bit", True) == "bool?"
        assert map_sql_server_type("nchar", False, max_length=10) == "string"
