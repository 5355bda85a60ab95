"""Content repository backed by a JSON export of the CMS collections."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import aiofiles

from blog_explorer.models.relationship import normalize_reference
from blog_explorer.services.repository import ContentRepositoryError
from blog_explorer.utils.text_utils import collation_key

_MISSING = object()


def get_field(record: dict[str, Any], path: str) -> Any:
    """Look up a dotted field path such as ``meta.description``."""
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _same(value: Any, target: Any) -> bool:
    """Equality that treats relationship references by their identifier."""
    if isinstance(value, dict):
        return normalize_reference(value) == normalize_reference(target)
    if isinstance(value, int) and not isinstance(value, bool) and isinstance(target, str):
        return str(value) == target
    return value == target


def _equals(value: Any, target: Any) -> bool:
    # A relationship list matches when any member matches
    if isinstance(value, list):
        return any(_same(member, target) for member in value)
    return _same(value, target)


def _matches_condition(value: Any, operator: str, operand: Any) -> bool:
    if operator == "exists":
        present = value is not _MISSING and value is not None
        return present == bool(operand)
    if value is _MISSING:
        value = None
    if operator == "equals":
        return _equals(value, operand)
    if operator == "not_equals":
        return not _equals(value, operand)
    if operator == "in":
        return any(_equals(value, option) for option in (operand or []))
    if operator == "not_in":
        return not any(_equals(value, option) for option in (operand or []))
    if operator == "like":
        return isinstance(value, str) and str(operand).lower() in value.lower()
    raise ValueError(f"Unsupported where operator '{operator}'")


def matches_where(record: dict[str, Any], where: dict[str, Any] | None) -> bool:
    """
    Evaluate a CMS-style ``where`` clause against a record.

    Field clauses look like ``{"slug": {"equals": "web"}}``; ``and`` / ``or``
    take lists of nested clauses. Top-level keys are combined with AND.
    """
    if not where:
        return True
    for key, clause in where.items():
        if key == "and":
            if not all(matches_where(record, sub) for sub in clause or []):
                return False
        elif key == "or":
            if not any(matches_where(record, sub) for sub in clause or []):
                return False
        elif isinstance(clause, dict):
            value = get_field(record, key)
            if not all(_matches_condition(value, op, operand) for op, operand in clause.items()):
                return False
        else:
            # Shorthand {"field": value}
            if not _equals(get_field(record, key), clause):
                return False
    return True


def _sort_value(value: Any) -> tuple:
    if isinstance(value, bool):
        return (0, float(value))
    if isinstance(value, (int, float)):
        return (0, float(value))
    if isinstance(value, str):
        return (1, collation_key(value))
    return (2, str(value))


def sort_records(records: list[dict[str, Any]], sort: str | None) -> list[dict[str, Any]]:
    """Sort by ``field`` or ``-field``; records missing the field go last."""
    if not sort:
        return list(records)
    descending = sort.startswith("-")
    path = sort.lstrip("-")

    present = []
    missing = []
    for record in records:
        value = get_field(record, path)
        if value is _MISSING or value is None:
            missing.append(record)
        else:
            present.append(record)

    present.sort(key=lambda r: _sort_value(get_field(r, path)), reverse=descending)
    return present + missing


def project(record: dict[str, Any], select: list[str] | None) -> dict[str, Any]:
    """Keep only the selected top-level fields (``id`` is always kept)."""
    if not select:
        return dict(record)
    fields = {"id", *select}
    return {key: value for key, value in record.items() if key in fields}


class JsonContentRepository:
    """Reads collections from a JSON file shaped like ``{"posts": [...], ...}``."""

    def __init__(self, content_file: Path):
        self.content_file = Path(content_file)

    async def _load(self, collection: str) -> list[dict[str, Any]]:
        if not self.content_file.exists():
            raise ContentRepositoryError(
                f"Content file not found: {self.content_file}", collection=collection
            )
        try:
            async with aiofiles.open(self.content_file, "r", encoding="utf-8") as f:
                raw = await f.read()
        except UnicodeDecodeError as exc:
            raise ContentRepositoryError(
                f"Content file is not valid UTF-8: {self.content_file}", collection=collection
            ) from exc
        except OSError as exc:
            raise ContentRepositoryError(
                f"Could not read {self.content_file}: {exc}", collection=collection
            ) from exc
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ContentRepositoryError(
                f"Invalid JSON in {self.content_file}: {exc}", collection=collection
            ) from exc

        docs = data.get(collection, []) if isinstance(data, dict) else []
        # Accept API-style {"docs": [...]} wrappers as well as bare lists
        if isinstance(docs, dict):
            docs = docs.get("docs", [])
        if not isinstance(docs, list):
            return []
        return [doc for doc in docs if isinstance(doc, dict)]

    async def find(
        self,
        collection: str,
        *,
        where: dict[str, Any] | None = None,
        sort: str | None = None,
        select: list[str] | None = None,
        limit: int | None = None,
        depth: int = 0,
        draft: bool = False,
    ) -> list[dict[str, Any]]:
        """Return matching records; ``depth`` is ignored since exports are flat."""
        records = await self._load(collection)
        if not draft:
            records = [r for r in records if r.get("_status") != "draft"]
        records = [r for r in records if matches_where(r, where)]
        records = sort_records(records, sort)
        if limit is not None and limit > 0:
            records = records[:limit]
        return [project(r, select) for r in records]
