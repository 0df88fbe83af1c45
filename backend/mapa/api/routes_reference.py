from typing import List

from fastapi import APIRouter, Depends

from mapa.api import get_repository
from mapa.models.schemas import (
    AirportSchema,
    CitySchema,
    CountrySchema,
    CurrencySchema,
    PreferenceSchema,
)
from mapa.storage.repository import Repository

router = APIRouter()


@router.get("/airports", response_model=List[AirportSchema])
def list_airports(
    philippine: bool = False, repository: Repository = Depends(get_repository)
) -> List[AirportSchema]:
    return [AirportSchema.from_domain(a) for a in repository.list_airports(philippine_only=philippine)]


@router.get("/countries", response_model=List[CountrySchema])
def list_countries(repository: Repository = Depends(get_repository)) -> List[CountrySchema]:
    return [CountrySchema.from_domain(c) for c in repository.list_countries()]


@router.get("/currencies", response_model=List[CurrencySchema])
def list_currencies(repository: Repository = Depends(get_repository)) -> List[CurrencySchema]:
    return [CurrencySchema.from_domain(c) for c in repository.list_currencies()]


@router.get("/preferences", response_model=List[PreferenceSchema])
def list_preferences(repository: Repository = Depends(get_repository)) -> List[PreferenceSchema]:
    return [PreferenceSchema.from_domain(p) for p in repository.list_preferences()]


@router.get("/cities/{country_code}", response_model=List[CitySchema])
def list_cities(country_code: str, repository: Repository = Depends(get_repository)) -> List[CitySchema]:
    return [CitySchema.from_domain(c) for c in repository.list_cities(country_code)]
