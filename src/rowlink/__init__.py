"""
rowlink - convention-driven relational mapping over SQLite.

Open a :class:`Database`, ask it for a :class:`Collection` by table name,
then filter, order, page, iterate, follow relations and write back. Links
between tables are inferred from names alone: a ``countriesId`` column
points at ``Countries``, a ``TasksUsers`` table joins ``Tasks`` and
``Users``.

Examples:
    >>> from rowlink import Database
    >>> db = Database.connect("sqlite:///app.db")
    >>> for user in db.all("Users").filter("age", ">", 35):
    ...     print(user["name"], [t["description"] for t in user["tasks"]])
"""

__version__ = "0.1.0"

from rowlink.core.database import Database
from rowlink.core.errors import (
    AmbiguousUpdateError,
    ConfigError,
    DatabaseError,
    DataError,
    EmptyResultError,
    ErrorCategory,
    InvalidConfigError,
    RelationError,
    ReentrantIterationError,
    RowLinkError,
    SchemaError,
    StatementError,
    TableNotFoundError,
    UnknownRelationError,
)
from rowlink.core.logging import configure_logging, get_logger
from rowlink.core.settings import RowLinkSettings, get_settings
from rowlink.orm.collection import Collection
from rowlink.orm.query import Filter, Ordering, QueryKind, QueryShape, build_query
from rowlink.orm.relations import MultipleLink, Scalar, SingularLink
from rowlink.orm.row import RowView

__all__ = [
    "__version__",
    # Entry points
    "Collection",
    "Database",
    "RowView",
    # Field values
    "MultipleLink",
    "Scalar",
    "SingularLink",
    # Query building
    "Filter",
    "Ordering",
    "QueryKind",
    "QueryShape",
    "build_query",
    # Errors
    "AmbiguousUpdateError",
    "ConfigError",
    "DataError",
    "DatabaseError",
    "EmptyResultError",
    "ErrorCategory",
    "InvalidConfigError",
    "ReentrantIterationError",
    "RelationError",
    "RowLinkError",
    "SchemaError",
    "StatementError",
    "TableNotFoundError",
    "UnknownRelationError",
    # Ambient
    "RowLinkSettings",
    "configure_logging",
    "get_logger",
    "get_settings",
]
