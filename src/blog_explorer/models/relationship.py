"""Relationship references between content records."""

from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, field_validator


class CategoryRef(BaseModel):
    """Embedded summary of a related category (populated when depth > 0)."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    title: str | None = None
    slug: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        """Accept numeric ids, drop anything else that is not a string."""
        if isinstance(v, bool):
            return None
        if isinstance(v, int):
            return str(v)
        return v if isinstance(v, str) else None

    @field_validator("title", "slug", mode="before")
    @classmethod
    def drop_non_strings(cls, v):
        return v if isinstance(v, str) else None


# A reference is either a bare identifier or an embedded object
RelationshipRef = str | CategoryRef


def coerce_reference(value: Any) -> RelationshipRef | dict | None:
    """Pre-validate a raw reference; unusable values become None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (str, CategoryRef, dict)):
        return value
    return None


def coerce_references(value: Any) -> list:
    """Pre-validate a raw list of references, dropping unusable members."""
    if not isinstance(value, (list, tuple)):
        return []
    return [ref for ref in (coerce_reference(v) for v in value) if ref is not None]


def normalize_reference(ref: Any) -> str | None:
    """Resolve a relationship reference to its identifier."""
    if isinstance(ref, CategoryRef):
        return ref.id or None
    if isinstance(ref, dict):
        return CategoryRef.model_validate(ref).id or None
    coerced = coerce_reference(ref)
    if isinstance(coerced, str):
        return coerced.strip() or None
    return None


def normalize_references(refs: Iterable[Any] | None) -> list[str]:
    """Resolve a list of references to identifiers, skipping unresolvable ones."""
    if not refs or isinstance(refs, (str, dict)):
        return []
    ids = []
    for ref in refs:
        ref_id = normalize_reference(ref)
        if ref_id:
            ids.append(ref_id)
    return ids
