"""SQL Server column types, lengths and server-side functions.

Plain string constants for schema configuration, e.g.::

    price: Decimal = Field(sa_column=Column(Numeric(18, 4)))  # ColumnTypes.MONEY
    created_at: datetime = Field(
        sa_column_kwargs={"server_default": text(Functions.GET_UTC_DATE)}
    )
"""


class ColumnLengths:
    """Default column lengths."""

    DEFAULT_NVARCHAR = 255
    UNIQUE_NAME = 50


class ColumnTypes:
    """Column type names."""

    NVARCHAR = "nvarchar"
    MONEY = "decimal(18,4)"
    DATETIME = "datetime2"
    DATE = "date"

    @staticmethod
    def specify_nvarchar_length(length: int = ColumnLengths.DEFAULT_NVARCHAR) -> str:
        """Return the nvarchar type with an explicit length, e.g. ``nvarchar(100)``."""
        return f"{ColumnTypes.NVARCHAR}({length})"


class Functions:
    """Server-side default value expressions."""

    NEW_SEQUENTIAL_ID = "newsequentialid()"
    GET_UTC_DATE = "getutcdate()"
