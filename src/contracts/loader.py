"""Schema loading utilities for the wire contracts."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import jsonschema

_CONTRACT_ROOT = Path(__file__).resolve().parent / "schemas"
_CATALOG_PATH = _CONTRACT_ROOT / "catalog.json"


@dataclass(frozen=True)
class SchemaDescriptor:
    """Descriptor describing a schema entry from the catalog."""

    contract: str
    version: str
    schema_id: str
    schema_path: str


_catalog_cache: Dict[str, SchemaDescriptor] | None = None
_schema_cache: Dict[str, Dict[str, Any]] = {}
_compiled_cache: Dict[str, Any] = {}


def load_catalog() -> Dict[str, SchemaDescriptor]:
    """Load and cache the schema catalog."""

    global _catalog_cache
    if _catalog_cache is not None:
        return _catalog_cache

    raw_catalog = json.loads(_CATALOG_PATH.read_text("utf-8"))
    catalog: Dict[str, SchemaDescriptor] = {}
    for contract, payload in raw_catalog.items():
        catalog[contract] = SchemaDescriptor(
            contract=contract,
            version=payload["version"],
            schema_id=payload["schema_id"],
            schema_path=payload["schema_path"],
        )
    _catalog_cache = catalog
    return catalog


def get_descriptor(contract: str) -> SchemaDescriptor:
    """Return the :class:`SchemaDescriptor` for *contract*."""

    catalog = load_catalog()
    if contract not in catalog:
        raise KeyError(f"Unknown contract: {contract}")
    return catalog[contract]


def load_schema(contract: str) -> Dict[str, Any]:
    """Load the JSON schema registered for *contract*."""

    if contract in _schema_cache:
        return copy.deepcopy(_schema_cache[contract])

    descriptor = get_descriptor(contract)
    resolved = (_CONTRACT_ROOT / descriptor.schema_path).resolve()
    if not str(resolved).startswith(str(_CONTRACT_ROOT)):
        raise ValueError("Schema path escapes the contracts directory")

    schema = json.loads(resolved.read_text("utf-8"))
    if "$id" in schema and schema["$id"] != descriptor.schema_id:
        raise ValueError(
            f"Schema id mismatch: catalog has {descriptor.schema_id!r}, schema has {schema['$id']!r}"
        )

    _schema_cache[contract] = schema
    return copy.deepcopy(schema)


def compiled_validator(contract: str) -> jsonschema.protocols.Validator:
    """Return a cached validator instance for *contract*."""

    if contract in _compiled_cache:
        return _compiled_cache[contract]

    schema = load_schema(contract)
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    validator = validator_cls(schema)
    _compiled_cache[contract] = validator
    return validator


__all__ = [
    "SchemaDescriptor",
    "compiled_validator",
    "get_descriptor",
    "load_catalog",
    "load_schema",
]
