from engines.plurals import (
    PluralFormResolver,
    CategoryBinding,
    build_enumerate_query,
    build_lookup_query,
    numeric_categories,
    schema_index,
)

__all__ = [
    "PluralFormResolver",
    "CategoryBinding",
    "build_enumerate_query",
    "build_lookup_query",
    "numeric_categories",
    "schema_index",
]
