from __future__ import annotations

from pathlib import Path

import pytest

from gasoline.core.exceptions import (
    IdentityExtractionError,
    IdentityNotFoundError,
    InvalidResourceIdError,
)
from gasoline.core.resources.identity import (
    IdentityExtractor,
    JsonExportLoader,
    NodeExportLoader,
    descriptor_from_export,
    find_identity_export,
)
from gasoline.core.resources.models import looks_like_resource_id, parse_resource_id


class TestResourceIds:
    def test_parse_splits_segments(self):
        parts = parse_resource_id("core:base:kv:a1b2")

        assert parts.entity_group == "core"
        assert parts.entity == "base"
        assert parts.kind == "kv"
        assert parts.suffix == "a1b2"
        assert parts.extra == ()

    def test_parse_keeps_extra_segments(self):
        assert parse_resource_id("a:b:c:d:e:f").extra == ("e", "f")

    @pytest.mark.parametrize("value", ["a:b:c", ":b:c:d", "", "plain"])
    def test_parse_rejects_malformed_ids(self, value):
        with pytest.raises(InvalidResourceIdError):
            parse_resource_id(value)

    def test_loose_shape_check(self):
        assert looks_like_resource_id("a:b:c:d")
        assert looks_like_resource_id("a:b:c:d:e")
        assert not looks_like_resource_id("a:b:c")
        assert not looks_like_resource_id(42)
        assert not looks_like_resource_id(None)


class TestIdentityExport:
    def test_first_id_shaped_export_wins(self):
        exports = {
            "helper": {"value": 1},
            "notAnId": {"id": "only:three:parts"},
            "first": {"id": "core:base:kv:1"},
            "second": {"id": "core:base:kv:2"},
        }

        assert find_identity_export(exports) == ("first", {"id": "core:base:kv:1"})

    def test_no_identity_export(self):
        assert find_identity_export({"a": 1, "b": "core:base:kv:1", "c": {"id": 5}}) is None

    def test_descriptor_uses_name_field_then_export_name(self):
        named = descriptor_from_export("coreBaseKv", {"id": "core:base:kv:1", "name": "CORE_KV"})
        unnamed = descriptor_from_export("coreBaseKv", {"id": "core:base:kv:1"})

        assert named.name == "CORE_KV"
        assert named.kind == "kv"
        assert named.raw_config == {"id": "core:base:kv:1", "name": "CORE_KV"}
        assert unnamed.name == "coreBaseKv"

    def test_descriptor_rejects_empty_entity_group(self):
        with pytest.raises(InvalidResourceIdError):
            descriptor_from_export("x", {"id": ":base:kv:1"})


def test_extract_reads_json_artifact(resource_project):
    resource_project.add_resource(
        "kv",
        "core:base:kv:a1b2",
        binding="coreBaseKv",
        config={"name": "CORE_KV", "ttl": 60},
        extra_exports={"helpers": {"retry": 3}},
    )
    artifact = next((resource_project.resource_dir("kv") / "build").iterdir())

    descriptor = IdentityExtractor([JsonExportLoader()]).extract(artifact)

    assert descriptor.id == "core:base:kv:a1b2"
    assert descriptor.kind == "kv"
    assert descriptor.name == "CORE_KV"
    assert descriptor.raw_config["ttl"] == 60


def test_extract_all_keeps_input_order(sample_project):
    paths = [
        next((sample_project.resource_dir(p) / "build").iterdir())
        for p in ("core-base-kv", "admin-base-api", "core-base-api")
    ]

    ids = [d.id for d in IdentityExtractor([JsonExportLoader()]).extract_all(paths)]

    assert ids == ["core:base:kv:a1b2", "admin:base:worker:e5f6", "core:base:worker:c3d4"]


def test_artifact_without_identity_is_reported(resource_project):
    artifact = resource_project.write_artifact("kv", {"helper": {"value": 1}})

    with pytest.raises(IdentityNotFoundError) as exc_info:
        IdentityExtractor([JsonExportLoader()]).extract(artifact)

    assert exc_info.value.context["artifact"] == str(artifact)
    assert exc_info.value.context["exports"] == ["helper"]


def test_first_missing_identity_in_input_order_is_raised(resource_project):
    good = resource_project.write_artifact("a", {"r": {"id": "a:b:c:d"}})
    bad_one = resource_project.write_artifact("b", {})
    bad_two = resource_project.write_artifact("c", {})

    with pytest.raises(IdentityNotFoundError) as exc_info:
        IdentityExtractor([JsonExportLoader()]).extract_all([good, bad_two, bad_one])

    assert exc_info.value.context["artifact"] == str(bad_two)


def test_invalid_json_artifact_is_an_extraction_error(tmp_path):
    artifact = tmp_path / "_a.b.c.index.json"
    artifact.write_text("{oops", encoding="utf-8")

    with pytest.raises(IdentityExtractionError, match="Cannot load artifact"):
        JsonExportLoader().load([artifact])


def test_undecodable_json_artifact_is_an_extraction_error(tmp_path):
    artifact = tmp_path / "_a.b.c.index.json"
    artifact.write_bytes(b'{"id": "\xff"}')

    with pytest.raises(IdentityExtractionError, match="Cannot load artifact"):
        JsonExportLoader().load([artifact])


def test_json_artifact_must_be_an_object(tmp_path):
    artifact = tmp_path / "_a.b.c.index.json"
    artifact.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(IdentityExtractionError, match="JSON object of exports"):
        JsonExportLoader().load([artifact])


def test_unsupported_artifact_type(tmp_path):
    artifact = tmp_path / "_a.b.c.index.js"
    artifact.write_text("", encoding="utf-8")

    with pytest.raises(IdentityExtractionError, match="No loader for artifact type '.js'"):
        IdentityExtractor([JsonExportLoader()]).extract(artifact)


def test_missing_node_binary_is_an_extraction_error(tmp_path):
    artifact = tmp_path / "_a.b.c.index.mjs"
    artifact.write_text("export const r = {};\n", encoding="utf-8")
    loader = NodeExportLoader(node_binary=str(tmp_path / "no-such-node"))

    with pytest.raises(IdentityExtractionError, match="Node.js executable not found"):
        loader.load([artifact])


def test_node_loader_reports_failing_artifact_from_stderr():
    loader = NodeExportLoader()

    message, artifact = loader._parse_failure('{"error": "boom", "artifact": "/x/a.mjs"}')
    raw_message, raw_artifact = loader._parse_failure("Segmentation fault\n")

    assert (message, artifact) == ("boom", "/x/a.mjs")
    assert (raw_message, raw_artifact) == ("Segmentation fault", None)


def test_node_loader_ships_its_import_script():
    assert Path(NodeExportLoader().script_path).is_file()


@pytest.mark.requires_node
class TestNodeExportLoader:
    def test_imports_es_module_artifacts(self, resource_project, node_binary):
        resource_project.add_resource(
            "kv",
            "core:base:kv:a1b2",
            binding="coreBaseKv",
            config={"name": "CORE_KV"},
            ext="mjs",
        )
        resource_project.add_resource("api", "core:base:worker:c3d4", ext="mjs")
        paths = [
            next((resource_project.resource_dir(p) / "build").iterdir()) for p in ("kv", "api")
        ]

        descriptors = IdentityExtractor([NodeExportLoader(node_binary)]).extract_all(paths)

        assert [d.id for d in descriptors] == ["core:base:kv:a1b2", "core:base:worker:c3d4"]
        assert descriptors[0].name == "CORE_KV"
        assert descriptors[1].name == "resource"

    def test_import_failure_names_the_artifact(self, tmp_path, node_binary):
        broken = tmp_path / "_a.b.c.index.mjs"
        broken.write_text("export const = ;\n", encoding="utf-8")

        with pytest.raises(IdentityExtractionError) as exc_info:
            NodeExportLoader(node_binary).load([broken])

        assert exc_info.value.context["artifact"] == str(broken.resolve())
