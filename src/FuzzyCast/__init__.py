"""FuzzyCast: compose ILIKE / equality searches across SQLAlchemy schema fields.

```
from FuzzyCast import compose

query = compose(User, ["gmail", "yahoo"])
query = compose(query, "m", fields=["name"])
```
"""

from __future__ import annotations

from FuzzyCast.compose import build, compose, search_query
from FuzzyCast.core.errors import CastError, FuzzyCastError, SchemaResolutionError
from FuzzyCast.core.models import CastRejection, CompositionRequest, FieldCast, FuzzyCast
from FuzzyCast.schema import MappedSchema, SchemaMetadata, SchemaRegistry

__all__ = [
    "build",
    "compose",
    "search_query",
    "CastError",
    "CastRejection",
    "CompositionRequest",
    "FieldCast",
    "FuzzyCast",
    "FuzzyCastError",
    "MappedSchema",
    "SchemaMetadata",
    "SchemaRegistry",
    "SchemaResolutionError",
]
