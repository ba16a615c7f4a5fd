"""Object-type catalog loading, validation and compilation."""

import json
from pathlib import Path

import pytest

from activity_streams.catalog import (
    build_registry,
    compile_catalog,
    link_objects,
    load_catalog,
    merge_catalogs,
    parse_catalog,
)
from activity_streams.errors import CatalogError, StreamsErrorCode
from activity_streams.rules import RangePolicy, RuleKind


@pytest.mark.unit
def test_bundled_catalog_loads() -> None:
    """The bundled catalog validates and names object as its base."""
    catalog = load_catalog()
    assert catalog.base == "object"
    assert {"activity", "media_link", "links", "person", "task"} <= set(catalog.schemas)


@pytest.mark.unit
def test_activity_inherits_object_rules(registry) -> None:
    """Extended schemas carry their parents' rules plus their own."""
    activity = registry.get("activity")
    assert activity.rule_for("verb") is not None
    assert activity.rule_for("display_name") is not None
    assert activity.wire_name("obj") == "object"
    assert activity.rule_for("object") is activity.rule_for("obj")


@pytest.mark.unit
def test_task_inherits_through_activity(registry) -> None:
    """Multi-level extends resolves transitively."""
    task = registry.get("task")
    assert task.rule_for("verb") is not None
    assert task.rule_for("prerequisites").object_type == "task"
    assert task.rule_for("summary") is not None


@pytest.mark.unit
def test_media_link_stands_alone(registry) -> None:
    """Schemas without extends only carry their own rules."""
    media_link = registry.get("media_link")
    assert set(media_link.names()) == {"url", "duration", "width", "height"}
    assert media_link.rule_for("width").kind is RuleKind.NON_NEGATIVE_INT


@pytest.mark.unit
def test_position_bounds(registry) -> None:
    """Latitude and longitude carry their geographic ranges."""
    position = registry.get("position")
    latitude = position.rule_for("latitude")
    longitude = position.rule_for("longitude")
    assert (latitude.minimum, latitude.maximum) == (-90.0, 90.0)
    assert (longitude.minimum, longitude.maximum) == (-180.0, 180.0)
    assert not latitude.is_valid(91.0)


@pytest.mark.unit
def test_shared_definitions(registry) -> None:
    """Audio and video share one definition under their own tags."""
    audio = registry.get("audio")
    video = registry.get("video")
    assert audio.names() == video.names()
    assert audio.type_tag == "audio"
    assert video.type_tag == "video"


@pytest.mark.unit
def test_base_schema_is_object(registry) -> None:
    """Unregistered tags fall back to the object schema."""
    assert registry.base.type_tag == "object"
    assert registry.lookup("unicorn").rule_for("display_name") is not None


@pytest.mark.unit
def test_extension_vocabulary_child_types(registry) -> None:
    """Extension vocabularies are untyped objects with a nested builder tag."""
    rule = registry.base.rule_for("open_social")
    assert rule.wire_name == "openSocial"
    assert rule.object_type is None
    assert rule.child_type == "open_social"


@pytest.mark.unit
def test_links_requires_link_objects(registry) -> None:
    """The links schema only accepts link objects, alone or in lists."""
    links = registry.get("links")
    assert links.names() == []
    assert links.missing_check is link_objects
    assert link_objects({"objectType": "link"})
    assert link_objects([{"objectType": "link"}, {"objectType": "link"}])
    assert not link_objects({"objectType": "note"})
    assert not link_objects("http://example.com")


@pytest.mark.unit
def test_range_policy_applies_to_every_bounded_field() -> None:
    """The compile-time range policy reaches every bounded rule."""
    reg = build_registry(range_policy=RangePolicy.CLAMP)
    assert reg.base.rule_for("rating").normalize(7.5) == 5.0
    assert reg.get("activity").rule_for("priority").normalize(2) == 1.0


@pytest.mark.unit
def test_extra_catalog_extends_bundled_schema(tmp_path: Path) -> None:
    """Extra catalogs can extend bundled schemas and add new types."""
    extra = tmp_path / "recipes.yaml"
    extra.write_text(
        "schemas:\n"
        "  recipe:\n"
        "    extends: [object]\n"
        "    properties:\n"
        "      - {name: servings, kind: non_negative_int}\n",
        encoding="utf-8",
    )
    reg = build_registry([extra])
    recipe = reg.get("recipe")
    assert recipe.rule_for("servings") is not None
    assert recipe.rule_for("display_name") is not None
    assert reg.base.type_tag == "object"


@pytest.mark.unit
def test_extra_catalog_overrides_bundled_schema(tmp_path: Path) -> None:
    """A later definition of a tag replaces the bundled one."""
    extra = tmp_path / "notes.json"
    extra.write_text(
        json.dumps(
            {
                "schemas": {
                    "note": {
                        "extends": ["object"],
                        "properties": [{"name": "word_count", "kind": "non_negative_int"}],
                    }
                }
            }
        ),
        encoding="utf-8",
    )
    reg = build_registry([extra])
    assert reg.get("note").rule_for("word_count") is not None


@pytest.mark.unit
def test_dangling_extends_raises() -> None:
    """Extending an undefined schema fails at compile time."""
    catalog = parse_catalog({"schemas": {"orphan": {"extends": ["missing"]}}})
    with pytest.raises(CatalogError, match="extends unknown schema 'missing'"):
        compile_catalog(catalog)


@pytest.mark.unit
def test_missing_base_raises() -> None:
    """The base tag must name a defined schema."""
    catalog = parse_catalog({"base": "object", "schemas": {}})
    with pytest.raises(CatalogError, match="Base schema 'object' is not defined"):
        compile_catalog(catalog)


@pytest.mark.unit
def test_cyclic_extends_raises() -> None:
    """Cycles in extends are reported instead of recursing forever."""
    catalog = parse_catalog(
        {"schemas": {"a": {"extends": ["b"]}, "b": {"extends": ["a"]}}}
    )
    with pytest.raises(CatalogError, match="Cyclic extends"):
        compile_catalog(catalog)


@pytest.mark.unit
@pytest.mark.parametrize(
    "prop",
    [
        {"name": "rating", "kind": "bounded_float"},
        {"name": "rating", "kind": "bounded_float", "minimum": 5, "maximum": 0},
        {"name": "width", "kind": "non_negative_int", "minimum": 0},
        {"name": "width", "kind": "numeric", "check": "verb"},
        {"name": "actor", "kind": "string", "object_type": "person"},
        {"name": "unknown", "kind": "colour"},
        {"name": "content", "kind": "string", "extra": True},
    ],
    ids=[
        "bounded_without_bounds",
        "inverted_bounds",
        "bounds_on_int",
        "check_on_numeric",
        "object_type_on_string",
        "unknown_kind",
        "unknown_key",
    ],
)
def test_invalid_property_definitions_raise(prop) -> None:
    """Property options must match their kind."""
    with pytest.raises(CatalogError) as excinfo:
        parse_catalog({"schemas": {"sample": {"properties": [prop]}}})
    assert excinfo.value.code is StreamsErrorCode.CATALOG_INVALID


@pytest.mark.unit
def test_invalid_yaml_raises(tmp_path: Path) -> None:
    """Undecodable catalog files raise CatalogError."""
    broken = tmp_path / "broken.yaml"
    broken.write_text("schemas: [unclosed", encoding="utf-8")
    with pytest.raises(CatalogError, match="Invalid catalog YAML"):
        load_catalog(broken)


@pytest.mark.unit
def test_non_mapping_root_raises(tmp_path: Path) -> None:
    """The catalog root must be an object."""
    listing = tmp_path / "list.yaml"
    listing.write_text("- one\n- two\n", encoding="utf-8")
    with pytest.raises(CatalogError, match="root must be an object"):
        load_catalog(listing)


@pytest.mark.unit
def test_missing_file_raises(tmp_path: Path) -> None:
    """Unreadable catalog paths raise CatalogError."""
    with pytest.raises(CatalogError, match="Cannot read catalog"):
        load_catalog(tmp_path / "absent.yaml")


@pytest.mark.unit
def test_merge_catalogs_keeps_last_base() -> None:
    """Merging keeps the last declared base and later definitions per tag."""
    first = parse_catalog({"base": "a", "schemas": {"a": {}, "b": {}}})
    second = parse_catalog(
        {"schemas": {"b": {"properties": [{"name": "x", "kind": "string"}]}}}
    )
    merged = merge_catalogs([first, second])
    assert merged.base == "a"
    assert len(merged.schemas["b"].properties) == 1
