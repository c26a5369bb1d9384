from __future__ import annotations

import re
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field, field_validator

from rustdocs.models.docs import LATEST, ItemType

_CRATE_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
_VERSION_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9.+~^=<>*-]*$")
_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_MODULE_SEGMENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


def _validate_crate(v: str) -> str:
    v = v.strip()
    if not _CRATE_RE.match(v):
        raise ValueError(f"Invalid crate name: {v!r}")
    return v


def _validate_version(v: str | None) -> str:
    if v is None or not v.strip():
        return LATEST
    v = v.strip()
    if len(v) > 64 or not _VERSION_RE.match(v):
        raise ValueError(f"Invalid crate version: {v!r}")
    return v


def _validate_module(v: str | None) -> str | None:
    """Accept ``a/b`` and ``a::b`` forms; return the slash-separated path."""
    if v is None or not v.strip():
        return None
    segments = [s for s in v.strip().replace("::", "/").split("/") if s]
    if len(v) > 500 or not segments or not all(_MODULE_SEGMENT_RE.match(s) for s in segments):
        raise ValueError(f"Invalid module path: {v!r}")
    return "/".join(segments)


CrateName = Annotated[str, Field(min_length=1, max_length=64), AfterValidator(_validate_crate)]
CrateVersion = Annotated[str | None, AfterValidator(_validate_version)]
ModulePath = Annotated[str | None, AfterValidator(_validate_module)]


class SearchCratesInput(BaseModel):
    query: str = Field(min_length=1, max_length=200)
    limit: int = Field(default=10, ge=1, le=100)

    @field_validator("query")
    @classmethod
    def strip_query(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("query must not be blank")
        return v


class GetCrateOverviewInput(BaseModel):
    crate: CrateName
    version: CrateVersion = LATEST


class GetItemDocsInput(BaseModel):
    crate: CrateName
    version: CrateVersion = LATEST
    item_type: ItemType
    item_name: str = Field(min_length=1, max_length=200)
    module: ModulePath = None

    @field_validator("item_name")
    @classmethod
    def validate_item_name(cls, v: str) -> str:
        v = v.strip()
        if not _IDENT_RE.match(v):
            raise ValueError(f"Invalid item name: {v!r}")
        return v


class ListModulesInput(BaseModel):
    crate: CrateName
    version: CrateVersion = LATEST
    module: ModulePath = None
