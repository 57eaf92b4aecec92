from __future__ import annotations

import pytest

from gasoline.core.exceptions import ManifestError, ScanError
from gasoline.core.resources.scanner import ResourceScanner


def test_scan_reads_every_resource_in_directory_order(sample_project):
    scanned = ResourceScanner(sample_project.root).scan()

    assert [s.manifest.name for s in scanned] == ["admin-base-api", "core-base-api", "core-base-kv"]
    api = scanned[1]
    assert api.manifest.dependencies == {"core-base-kv": "workspace:*", "hono": "^4.0.0"}
    assert api.artifact_path.name == "_core.base.worker.index.json"
    assert api.location.manifest_path == api.directory / "package.json"


def test_scan_of_empty_container_is_empty(resource_project):
    assert ResourceScanner(resource_project.root).scan() == []


def test_multiple_container_dirs_are_scanned_in_order(resource_project):
    resource_project.add_resource("web", "app:site:pages:1", container="apps")
    resource_project.add_resource("kv", "core:base:kv:1")

    scanner = ResourceScanner(resource_project.root, container_dirs=["gasoline", "apps"])

    assert [s.manifest.name for s in scanner.scan()] == ["kv", "web"]


def test_hidden_directories_are_ignored(resource_project):
    resource_project.add_resource("kv", "core:base:kv:1")
    (resource_project.root / "gasoline" / ".turbo").mkdir()

    dirs = ResourceScanner(resource_project.root).resource_dirs()

    assert [d.name for d in dirs] == ["kv"]


def test_missing_container_dir_is_a_scan_error(isolated_project_env):
    with pytest.raises(ScanError) as exc_info:
        ResourceScanner(isolated_project_env).resource_dirs()

    assert "container directory not found" in str(exc_info.value)
    assert exc_info.value.context["directory"].endswith("gasoline")


def test_missing_manifest_names_the_directory(resource_project):
    resource_project.add_resource("kv", "core:base:kv:1")
    (resource_project.resource_dir("kv") / "package.json").unlink()

    with pytest.raises(ScanError) as exc_info:
        ResourceScanner(resource_project.root).scan()

    assert "Missing package.json" in str(exc_info.value)
    assert exc_info.value.context["directory"] == str(resource_project.resource_dir("kv"))


def test_missing_artifact_is_a_scan_error(resource_project):
    resource_project.write_manifest("kv")

    with pytest.raises(ScanError, match="No built artifact"):
        ResourceScanner(resource_project.root).scan()


def test_non_matching_artifact_names_are_ignored(resource_project):
    resource_project.write_manifest("kv")
    build = resource_project.resource_dir("kv") / "build"
    build.mkdir()
    (build / "index.js").write_text("export {}", encoding="utf-8")
    (build / "_core.base.kv.index.js.map").write_text("{}", encoding="utf-8")

    with pytest.raises(ScanError, match="No built artifact"):
        ResourceScanner(resource_project.root).scan()


def test_more_than_one_artifact_is_a_scan_error(resource_project):
    resource_project.add_resource("kv", "core:base:kv:1")
    resource_project.write_artifact("kv", {}, stem="_core.base.other", ext="json")

    with pytest.raises(ScanError, match="Multiple built artifacts") as exc_info:
        ResourceScanner(resource_project.root).scan()

    assert len(exc_info.value.context["artifacts"]) == 2


def test_dist_is_searched_when_build_is_absent(resource_project):
    resource_project.add_resource("kv", "core:base:kv:1", artifact_dir="dist")

    location = ResourceScanner(resource_project.root).locate(resource_project.resource_dir("kv"))

    assert location.artifact_path.parent.name == "dist"


def test_invalid_manifest_json_is_a_manifest_error(resource_project):
    resource_project.add_resource("kv", "core:base:kv:1")
    (resource_project.resource_dir("kv") / "package.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(ManifestError, match="Cannot read manifest"):
        ResourceScanner(resource_project.root).scan()


def test_undecodable_manifest_is_a_manifest_error(sample_project):
    manifest = sample_project.resource_dir("core-base-kv") / "package.json"
    manifest.write_bytes(b'{"name": "\xff"}')

    with pytest.raises(ManifestError, match="Cannot read manifest") as exc_info:
        ResourceScanner(sample_project.root).scan()

    assert exc_info.value.context["path"] == str(manifest)


def test_manifest_without_name_is_a_manifest_error(resource_project):
    resource_project.add_resource("kv", "core:base:kv:1")
    (resource_project.resource_dir("kv") / "package.json").write_text("{}", encoding="utf-8")

    with pytest.raises(ManifestError, match="no package name"):
        ResourceScanner(resource_project.root).scan()


def test_manifest_with_non_object_dependencies_is_rejected(resource_project):
    resource_project.add_resource("kv", "core:base:kv:1")
    (resource_project.resource_dir("kv") / "package.json").write_text(
        '{"name": "kv", "dependencies": ["a"]}', encoding="utf-8"
    )

    with pytest.raises(ManifestError, match="non-object 'dependencies'"):
        ResourceScanner(resource_project.root).scan()


def test_one_bad_resource_aborts_the_whole_scan(sample_project):
    (sample_project.resource_dir("core-base-kv") / "package.json").unlink()

    with pytest.raises(ScanError):
        ResourceScanner(sample_project.root, max_workers=4).scan()


def test_earliest_failure_in_directory_order_is_raised(resource_project):
    resource_project.write_manifest("a-first")
    resource_project.write_manifest("b-second")

    with pytest.raises(ScanError) as exc_info:
        ResourceScanner(resource_project.root, max_workers=1).scan()

    assert exc_info.value.context["directory"].endswith("a-first")


def test_from_config_uses_configured_values(resource_project):
    config = {
        "resources": {
            "container_dirs": ["svc"],
            "manifest_filename": "package.json",
            "artifact_dirs": ["out"],
            "artifact_pattern": r"^[^.]+\.[^.]+\.[^.]+\.[^.]+\.json$",
        },
        "scan": {"max_workers": 2},
    }

    scanner = ResourceScanner.from_config(resource_project.root, config)

    assert scanner.container_dirs == ["svc"]
    assert scanner.artifact_dirs == ["out"]
    assert scanner.max_workers == 2
    assert ResourceScanner.from_config(
        resource_project.root, config, container_dirs=["other"]
    ).container_dirs == ["other"]


def test_unreadable_resource_directory_is_a_scan_error(sample_project, monkeypatch):
    denied = sample_project.resource_dir("core-base-api")
    original = ResourceScanner._find_artifact

    def find_artifact(self, resource_dir):
        if resource_dir == denied:
            raise PermissionError(13, "Permission denied", str(resource_dir / "build"))
        return original(self, resource_dir)

    monkeypatch.setattr(ResourceScanner, "_find_artifact", find_artifact)

    with pytest.raises(ScanError, match="Cannot read resource directory") as exc_info:
        ResourceScanner(sample_project.root, max_workers=2).scan()

    assert exc_info.value.context["directory"] == str(denied)
    assert isinstance(exc_info.value.__cause__, PermissionError)
