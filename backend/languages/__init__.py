"""Language data contracts.

Loads the per-language JSON contracts whose `numbers` section drives
plural form resolution.
"""
from .contracts import DataContract, contract_path, load_contract, parse_contract
from .types import NumericCategoryContract, ResolvedForms

__all__ = [
    "DataContract",
    "contract_path",
    "load_contract",
    "parse_contract",
    "NumericCategoryContract",
    "ResolvedForms",
]
