"""Schemas shared across domains"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    data: list[T]
    count: int
    page: int
    limit: int
    totalPages: int


class CategoryInfo(BaseModel):
    value: str
    label: str
    description: str
    group: str


class CategoryGroupInfo(BaseModel):
    key: str
    label: str
    categories: list[str]


class MarketplaceMetaResponse(BaseModel):
    categories: list[CategoryInfo]
    groups: list[CategoryGroupInfo]
    sortOptions: dict[str, str]
    statusLabels: dict[str, dict[str, str]]
    locations: list[str]
