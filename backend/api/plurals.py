"""Plurals API

Exposes plural form lookups for languages that ship a data contract and a
noun database. Failures are raised as AppErrorException and rendered by the
registered error handlers.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.errors import raise_result
from core.logging import api_logger
from engines.plurals import PluralFormResolver
from languages import DataContract, load_contract

log = api_logger()

router = APIRouter()


def get_resolver() -> PluralFormResolver:
    """Dependency returning the resolver; overridden in tests."""
    return PluralFormResolver()


def get_contract(language: str) -> DataContract:
    """Dependency loading the language's data contract."""
    result = load_contract(language)
    raise_result(result)
    return result.unwrap()


# === Response Models ===

class ContractResponse(BaseModel):
    language: str
    numbers: dict[str, str]


class CategoryValuesResponse(BaseModel):
    language: str
    values: list[str]


class NounFormsResponse(BaseModel):
    language: str
    noun: str
    forms: dict[str, str | None]


class PluralCheckResponse(BaseModel):
    language: str
    word: str
    isPlural: bool


# === Endpoints ===

@router.get("/{language}/contract", response_model=ContractResponse)
async def get_numeric_contract(language: str, contract: DataContract = Depends(get_contract)):
    """Get the numeric-category contract (singular column -> category column)."""
    return ContractResponse(language=language, numbers=contract.numbers)


@router.get("/{language}/values", response_model=CategoryValuesResponse)
async def list_category_values(
    language: str,
    contract: DataContract = Depends(get_contract),
    resolver: PluralFormResolver = Depends(get_resolver),
):
    """List every stored category value across all nouns."""
    result = await resolver.enumerate_category_values(language, contract)
    raise_result(result)
    values = result.unwrap()
    log.debug("category_values_listed", language=language, count=len(values))
    return CategoryValuesResponse(language=language, values=values)


@router.get("/{language}/nouns/{noun}", response_model=NounFormsResponse)
async def get_noun_forms(
    language: str,
    noun: str,
    contract: DataContract = Depends(get_contract),
    resolver: PluralFormResolver = Depends(get_resolver),
):
    """Get a noun's form for every numeric category."""
    result = await resolver.resolve_noun_forms(language, contract, noun)
    raise_result(result)
    return NounFormsResponse(language=language, noun=noun, forms=result.unwrap())


@router.get("/{language}/check/{word}", response_model=PluralCheckResponse)
async def check_plural(
    language: str,
    word: str,
    contract: DataContract = Depends(get_contract),
    resolver: PluralFormResolver = Depends(get_resolver),
):
    """Check whether a word is one of the stored category forms."""
    result = await resolver.is_plural(language, contract, word)
    raise_result(result)
    return PluralCheckResponse(language=language, word=word, isPlural=result.unwrap())
