"""
Statement registry: operation name -> SQL template.

Loaded once at startup from a JSON file or a mapping and read-only
afterwards. Nested JSON objects act as namespaces, so

    {"users": {"pageable": "SELECT * FROM t_user"}}

registers the operation "users.pageable".
"""
from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

import structlog

from .config.settings import STATEMENTS_PATH
from .errors import RegistryError, StatementNotFoundError

logger = structlog.get_logger("pager.registry")


def _flatten(source: Mapping[str, Any], prefix: str = "") -> Iterator[tuple[str, Any]]:
    for key, value in source.items():
        if not isinstance(key, str) or not key:
            raise RegistryError("Operation names must be non-empty strings", details={"name": key})
        name = f"{prefix}.{key}" if prefix else key
        if isinstance(value, Mapping):
            yield from _flatten(value, name)
        else:
            yield name, value


class StatementRegistry:
    """Immutable mapping from operation name to SQL text."""

    def __init__(self, statements: Mapping[str, Any]):
        validated: dict[str, str] = {}
        for name, sql in _flatten(statements):
            if not isinstance(sql, str) or not sql.strip():
                raise RegistryError(
                    f"Statement for '{name}' must be non-empty SQL text",
                    details={"name": name},
                )
            validated[name] = sql.strip()
        self._statements = MappingProxyType(validated)

    @classmethod
    def from_mapping(cls, statements: Mapping[str, Any]) -> StatementRegistry:
        return cls(statements)

    @classmethod
    def from_file(cls, path: str | Path) -> StatementRegistry:
        """Load statements from a JSON object file."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise RegistryError(
                f"Cannot load statements from {path}: {exc}",
                details={"path": str(path)},
            ) from exc
        if not isinstance(data, dict):
            raise RegistryError(
                "Statement file must contain a JSON object",
                details={"path": str(path)},
            )
        registry = cls(data)
        logger.info("statements_loaded", path=str(path), count=len(registry))
        return registry

    def statement(self, operation: str) -> str:
        """Return the SQL registered for `operation`."""
        try:
            return self._statements[operation]
        except KeyError:
            raise StatementNotFoundError(
                f"No statement registered for '{operation}'",
                details={"operation": operation},
            ) from None

    def names(self) -> list[str]:
        return sorted(self._statements)

    def __contains__(self, operation: object) -> bool:
        return operation in self._statements

    def __len__(self) -> int:
        return len(self._statements)


def load_registry(path: str | Path | None = None) -> StatementRegistry:
    """Load the registry from `path`, or PAGER_STATEMENTS_PATH if not given."""
    path = path or STATEMENTS_PATH
    if path is None:
        raise RegistryError("No statement file configured; set PAGER_STATEMENTS_PATH")
    return StatementRegistry.from_file(path)
