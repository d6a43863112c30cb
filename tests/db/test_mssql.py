"""Tests for SQL Server constants."""

from datalayer.db.mssql import ColumnLengths, ColumnTypes, Functions


def test_column_lengths() -> None:
    assert ColumnLengths.DEFAULT_NVARCHAR == 255
    assert ColumnLengths.UNIQUE_NAME == 50


def test_column_types() -> None:
    assert ColumnTypes.NVARCHAR == "nvarchar"
    assert ColumnTypes.MONEY == "decimal(18,4)"
    assert ColumnTypes.DATETIME == "datetime2"
    assert ColumnTypes.DATE == "date"


def test_specify_nvarchar_length() -> None:
    """Should default to the standard nvarchar length."""
    assert ColumnTypes.specify_nvarchar_length() == "nvarchar(255)"
    assert ColumnTypes.specify_nvarchar_length(100) == "nvarchar(100)"


def test_functions() -> None:
    assert Functions.NEW_SEQUENTIAL_ID == "newsequentialid()"
    assert Functions.GET_UTC_DATE == "getutcdate()"
