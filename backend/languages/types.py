"""Shared type definitions for numeric-category contracts."""
from typing import Mapping

# Singular-form identifier (column naming the base form) -> category column
NumericCategoryContract = Mapping[str, str]

# Category column -> the noun's form in that column (None when stored NULL)
ResolvedForms = dict[str, str | None]
