from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class CrateSummary(BaseModel):
    """Single crate as returned by search_crates."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    version: str
    downloads: int = 0
    documentation: str | None = None
    repository: str | None = None
    keywords: tuple[str, ...] = ()

    @field_validator("description", mode="before")
    @classmethod
    def none_to_empty(cls, v: str | None) -> str:
        return v or ""

    @field_validator("keywords", mode="before")
    @classmethod
    def none_to_tuple(cls, v: list[str] | None) -> list[str]:
        return v or []


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    crates: tuple[CrateSummary, ...] = ()
    total: int = 0
