"""Mapping layer: query shapes, cursors, relations and collections."""

from rowlink.orm.collection import Collection
from rowlink.orm.cursor import CursorState, LazyCursor
from rowlink.orm.mutations import UNITERATED, MutationBuffer
from rowlink.orm.query import Filter, Ordering, QueryKind, QueryShape, build_query
from rowlink.orm.registry import SchemaRegistry
from rowlink.orm.relations import (
    FieldValue,
    MultipleLink,
    MultipleRelation,
    RelationResolver,
    Scalar,
    SingularLink,
    SingularRelation,
    infer_relation,
)
from rowlink.orm.row import RowView

__all__ = [
    "Collection",
    "CursorState",
    "FieldValue",
    "Filter",
    "LazyCursor",
    "MultipleLink",
    "MultipleRelation",
    "MutationBuffer",
    "Ordering",
    "QueryKind",
    "QueryShape",
    "RelationResolver",
    "RowView",
    "Scalar",
    "SchemaRegistry",
    "SingularLink",
    "SingularRelation",
    "UNITERATED",
    "build_query",
    "infer_relation",
]
