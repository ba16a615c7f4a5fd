"""Object-type catalog: declarative schema definitions loaded from YAML."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from enum import StrEnum
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from activity_streams.errors import CatalogError
from activity_streams.matchers import (
    is_absolute_iri,
    is_language_tag,
    is_mime_type,
    is_token,
    is_verb,
)
from activity_streams.registry import SchemaRegistry
from activity_streams.rules import (
    Predicate,
    PropertyRule,
    RangePolicy,
    RuleKind,
    absolute_iri_rule,
    boolean_rule,
    bounded_float_rule,
    date_time_rule,
    iri_rule,
    non_negative_int_rule,
    numeric_rule,
    object_array_rule,
    object_rule,
    string_array_rule,
    string_rule,
)
from activity_streams.schema import Schema, always_valid, compose
from activity_streams.values import ValueKind, classify, recorded_type_tag

_LOGGER = logging.getLogger(__name__)

BUNDLED_CATALOG = "catalog.yaml"
LINK_TYPE_TAG = "link"


class CheckName(StrEnum):
    """Named predicates a catalog field may reference."""

    ABSOLUTE_IRI = "absolute_iri"
    VERB = "verb"
    TOKEN = "token"
    MIME_TYPE = "mime_type"
    LANGUAGE_TAG = "language_tag"


class MissingCheckName(StrEnum):
    """Named fallback checks for properties without a rule."""

    ANY = "any"
    LINK_OBJECTS = "link_objects"


def _is_link(value: Any) -> bool:
    return recorded_type_tag(value) == LINK_TYPE_TAG


def link_objects(value: Any) -> bool:
    """Accept a link object or a list of link objects."""
    if classify(value) is ValueKind.SEQUENCE:
        return all(_is_link(item) for item in value)
    return _is_link(value)


_CHECKS: dict[CheckName, Predicate] = {
    CheckName.ABSOLUTE_IRI: is_absolute_iri,
    CheckName.VERB: is_verb,
    CheckName.TOKEN: is_token,
    CheckName.MIME_TYPE: is_mime_type,
    CheckName.LANGUAGE_TAG: is_language_tag,
}

_MISSING_CHECKS: dict[MissingCheckName, Predicate] = {
    MissingCheckName.ANY: always_valid,
    MissingCheckName.LINK_OBJECTS: link_objects,
}

_CHECKED_KINDS = frozenset({RuleKind.STRING, RuleKind.STRING_ARRAY})
_OBJECT_KINDS = frozenset({RuleKind.OBJECT, RuleKind.OBJECT_ARRAY})


class PropertyDefinition(BaseModel):
    """One property of an object type."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    kind: RuleKind
    alias: str | None = None
    object_type: str | None = None
    child_type: str | None = None
    check: CheckName | None = None
    minimum: float | None = None
    maximum: float | None = None

    @model_validator(mode="after")
    def _options_match_kind(self) -> PropertyDefinition:
        if self.kind is RuleKind.BOUNDED_FLOAT:
            if self.minimum is None or self.maximum is None:
                raise ValueError(f"{self.name}: bounded_float requires minimum and maximum")
            if self.minimum > self.maximum:
                raise ValueError(f"{self.name}: minimum exceeds maximum")
        elif self.minimum is not None or self.maximum is not None:
            raise ValueError(f"{self.name}: bounds are only valid for bounded_float")
        if self.check is not None and self.kind not in _CHECKED_KINDS:
            raise ValueError(f"{self.name}: check is only valid for string kinds")
        if (
            self.object_type is not None or self.child_type is not None
        ) and self.kind not in _OBJECT_KINDS:
            raise ValueError(f"{self.name}: object types are only valid for object kinds")
        return self


class SchemaDefinition(BaseModel):
    """Declarative schema for one object type."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    extends: tuple[str, ...] = ()
    properties: tuple[PropertyDefinition, ...] = ()
    missing_check: MissingCheckName = MissingCheckName.ANY


class CatalogDefinition(BaseModel):
    """Root catalog document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: int = Field(default=1, ge=1)
    base: str | None = None
    schemas: dict[str, SchemaDefinition] = Field(default_factory=dict)


def _check_references(catalog: CatalogDefinition) -> None:
    """Require base and ``extends`` targets to be defined.

    Extra catalogs may extend bundled schemas, so references are only
    resolvable once catalogs are merged.

    Raises:
        CatalogError: On a dangling reference.
    """
    if catalog.base is not None and catalog.base not in catalog.schemas:
        raise CatalogError(f"Base schema {catalog.base!r} is not defined")
    for tag, definition in catalog.schemas.items():
        for parent in definition.extends:
            if parent not in catalog.schemas:
                raise CatalogError(f"{tag!r} extends unknown schema {parent!r}")


def _decode_catalog_text(raw: str, origin: str) -> dict[str, object]:
    """Decode catalog text from JSON or YAML.

    Args:
        raw: Catalog text.
        origin: File name used to pick the decoder and in errors.

    Returns:
        Parsed mapping payload.

    Raises:
        CatalogError: If decode fails or payload is not an object.
    """
    if origin.lower().endswith(".json"):
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CatalogError(f"Invalid catalog JSON ({origin}): {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise CatalogError(f"Invalid catalog YAML ({origin}): {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise CatalogError(f"Invalid catalog ({origin}): root must be an object")
    return payload


def parse_catalog(payload: Mapping[str, object], origin: str = "<memory>") -> CatalogDefinition:
    """Validate a decoded catalog payload.

    Raises:
        CatalogError: If the payload does not describe a valid catalog.
    """
    try:
        return CatalogDefinition.model_validate(payload)
    except ValidationError as exc:
        raise CatalogError(f"Invalid catalog ({origin}): {exc}") from exc


def load_catalog(path: Path | None = None) -> CatalogDefinition:
    """Load a catalog file, or the bundled catalog when no path is given.

    Args:
        path: JSON or YAML catalog file.

    Returns:
        Validated catalog definition.

    Raises:
        CatalogError: If the file cannot be read, decoded or validated.
    """
    if path is None:
        origin = BUNDLED_CATALOG
        raw = (
            resources.files("activity_streams")
            .joinpath("data", BUNDLED_CATALOG)
            .read_text(encoding="utf-8")
        )
    else:
        origin = str(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CatalogError(f"Cannot read catalog {origin}: {exc}") from exc
    return parse_catalog(_decode_catalog_text(raw, origin), origin)


def merge_catalogs(catalogs: Iterable[CatalogDefinition]) -> CatalogDefinition:
    """Merge catalogs in order; later definitions replace earlier ones per tag."""
    base: str | None = None
    schemas: dict[str, SchemaDefinition] = {}
    for catalog in catalogs:
        schemas.update(catalog.schemas)
        if catalog.base is not None:
            base = catalog.base
    return CatalogDefinition(base=base, schemas=schemas)


def build_rule(prop: PropertyDefinition, range_policy: RangePolicy) -> PropertyRule:
    """Turn one property definition into a rule."""
    check = _CHECKS[prop.check] if prop.check is not None else None
    match prop.kind:
        case RuleKind.STRING:
            return string_rule(prop.name, prop.alias, check)
        case RuleKind.STRING_ARRAY:
            return string_array_rule(prop.name, prop.alias, check)
        case RuleKind.DATE_TIME:
            return date_time_rule(prop.name, prop.alias)
        case RuleKind.ABSOLUTE_IRI:
            return absolute_iri_rule(prop.name, prop.alias)
        case RuleKind.IRI:
            return iri_rule(prop.name, prop.alias)
        case RuleKind.OBJECT:
            return object_rule(prop.name, prop.alias, prop.object_type, prop.child_type)
        case RuleKind.OBJECT_ARRAY:
            return object_array_rule(
                prop.name, prop.alias, prop.object_type, prop.child_type
            )
        case RuleKind.NUMERIC:
            return numeric_rule(prop.name, prop.alias)
        case RuleKind.NON_NEGATIVE_INT:
            return non_negative_int_rule(prop.name, prop.alias)
        case RuleKind.BOUNDED_FLOAT:
            assert prop.minimum is not None and prop.maximum is not None
            return bounded_float_rule(
                prop.name, prop.minimum, prop.maximum, prop.alias, range_policy
            )
        case RuleKind.BOOLEAN:
            return boolean_rule(prop.name, prop.alias)


def compile_catalog(
    catalog: CatalogDefinition,
    *,
    range_policy: RangePolicy = RangePolicy.REJECT,
) -> dict[str, Schema]:
    """Compile every catalog definition into a Schema, resolving ``extends``.

    Args:
        catalog: Validated catalog.
        range_policy: Policy applied to every bounded numeric field.

    Returns:
        Mapping of type tag to composed Schema, in catalog order.

    Raises:
        CatalogError: If ``extends`` references are dangling or cyclic.
    """
    _check_references(catalog)
    compiled: dict[str, Schema] = {}
    resolving: set[str] = set()

    def _resolve(tag: str) -> Schema:
        if tag in compiled:
            return compiled[tag]
        if tag in resolving:
            raise CatalogError(f"Cyclic extends involving {tag!r}")
        resolving.add(tag)
        definition = catalog.schemas[tag]
        parents = [_resolve(parent) for parent in definition.extends]
        own = Schema.from_rules(
            tag,
            (build_rule(prop, range_policy) for prop in definition.properties),
            missing_check=_MISSING_CHECKS[definition.missing_check],
        )
        schema = compose(*parents, own, type_tag=tag)
        resolving.discard(tag)
        compiled[tag] = schema
        return schema

    for tag in catalog.schemas:
        _resolve(tag)
    _LOGGER.debug("Compiled %d object-type schemas", len(compiled))
    return {tag: compiled[tag] for tag in catalog.schemas}


def build_registry(
    extra_paths: Iterable[Path] = (),
    *,
    range_policy: RangePolicy = RangePolicy.REJECT,
) -> SchemaRegistry:
    """Build a registry from the bundled catalog plus optional extra catalogs.

    Args:
        extra_paths: Catalog files merged over the bundled one, in order.
        range_policy: Policy applied to every bounded numeric field.

    Returns:
        A populated SchemaRegistry whose base is the catalog's base schema.
    """
    catalogs = [load_catalog()]
    catalogs.extend(load_catalog(path) for path in extra_paths)
    catalog = merge_catalogs(catalogs)
    schemas = compile_catalog(catalog, range_policy=range_policy)
    base = schemas[catalog.base] if catalog.base is not None else None
    return SchemaRegistry(base=base, schemas=schemas)
