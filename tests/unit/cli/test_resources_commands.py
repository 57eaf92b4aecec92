"""CLI tests for `gas resources ...` driven through the dispatcher."""
from __future__ import annotations

import json
import shutil

import pytest

from gasoline.cli._dispatcher import main


def _json(capsys):
    return json.loads(capsys.readouterr().out)


def test_list_json(sample_project, capsys) -> None:
    assert main(["resources", "list", "--json"]) == 0

    data = _json(capsys)
    assert data["count"] == 3
    assert [r["id"] for r in data["resources"]] == [
        "admin:base:worker:e5f6",
        "core:base:worker:c3d4",
        "core:base:kv:a1b2",
    ]
    assert data["resources"][0]["directory"] == "gasoline/admin-base-api"


def test_list_text(sample_project, capsys) -> None:
    assert main(["resources", "list"]) == 0

    out = capsys.readouterr().out
    assert "core:base:kv:a1b2" in out
    assert "  package: core-base-kv" in out
    assert "3 resource(s)" in out


def test_list_empty_project(resource_project, capsys) -> None:
    assert main(["resources", "list"]) == 0

    assert "No resources found." in capsys.readouterr().out


def test_list_honours_repo_root_and_container_dir(tmp_path, capsys) -> None:
    from helpers.resource_project import ResourceProject

    project = ResourceProject(tmp_path / "proj", container="infra")
    project.add_resource("kv", "core:base:kv:1")

    code = main(
        ["resources", "list", "--json", "--repo-root", str(project.root), "--container-dir", "infra"]
    )

    assert code == 0
    assert _json(capsys)["count"] == 1


def test_graph_json(sample_project, capsys) -> None:
    assert main(["resources", "graph", "--json"]) == 0

    data = _json(capsys)
    assert data["direct"]["core:base:worker:c3d4"] == ["core:base:kv:a1b2"]
    assert data["upstream"]["core:base:kv:a1b2"] == []
    assert data["endpoints"] == ["core:base:worker:c3d4"]
    assert data["cycles"] == []


def test_graph_nested_json(sample_project, capsys) -> None:
    assert main(["resources", "graph", "--nested", "--json"]) == 0

    data = _json(capsys)
    assert sorted(data) == ["admin", "core"]
    assert "core:base:kv:a1b2" in data["core"]["base"]["kv"]


def test_graph_nested_text(sample_project, capsys) -> None:
    assert main(["resources", "graph", "--nested"]) == 0

    out = capsys.readouterr().out
    assert "core:base:worker:c3d4 (CORE_BASE_API) <- core:base:kv:a1b2" in out


def test_graph_cycle_error_json(resource_project, capsys) -> None:
    resource_project.add_resource("a", "x:y:p:1", dependencies={"b": "*"})
    resource_project.add_resource("b", "x:y:q:2", dependencies={"a": "*"})

    assert main(["resources", "graph", "--json"]) == 1

    err = json.loads(capsys.readouterr().err)
    assert err["error"] == "CycleDetectedError"
    assert err["context"]["involved_resources"] == ["x:y:p:1", "x:y:q:2"]


def test_graph_cycle_warn_flag(resource_project, capsys) -> None:
    resource_project.add_resource("a", "x:y:p:1", dependencies={"b": "*"})
    resource_project.add_resource("b", "x:y:q:2", dependencies={"a": "*"})

    assert main(["resources", "graph", "--json", "--on-cycle", "warn"]) == 0

    assert _json(capsys)["cycles"] == [["x:y:p:1", "x:y:q:2"]]


def test_endpoints(sample_project, capsys) -> None:
    assert main(["resources", "endpoints", "--json"]) == 0

    assert _json(capsys) == {
        "endpoints": ["core:base:worker:c3d4"],
        "upstream": {"core:base:worker:c3d4": ["core:base:kv:a1b2"]},
    }


def test_validate_ok(sample_project, capsys) -> None:
    assert main(["resources", "validate"]) == 0

    assert "OK: 3 resource(s)" in capsys.readouterr().out


def test_validate_reports_duplicate_ids(resource_project, capsys) -> None:
    resource_project.add_resource("one", "core:base:kv:same")
    resource_project.add_resource("two", "core:base:kv:same")

    assert main(["resources", "validate", "--json"]) == 1

    data = _json(capsys)
    assert data["valid"] is False
    assert data["problems"][0]["code"] == "DuplicateResourceIdError"


def test_validate_reports_cycles(resource_project, capsys) -> None:
    resource_project.add_resource("a", "x:y:p:1", dependencies={"b": "*"})
    resource_project.add_resource("b", "x:y:q:2", dependencies={"a": "*"})

    assert main(["resources", "validate", "--json"]) == 1

    problems = _json(capsys)["problems"]
    assert problems == [
        {
            "code": "CycleDetectedError",
            "message": "Dependency cycle: x:y:p:1 -> x:y:q:2 -> x:y:p:1",
            "resources": ["x:y:p:1", "x:y:q:2"],
        }
    ]


def test_scan_error_text_mode(resource_project, capsys) -> None:
    resource_project.write_manifest("kv")

    assert main(["resources", "list"]) == 1

    assert capsys.readouterr().err.startswith("Error: No built artifact")


def test_plan_first_deploy(sample_project, capsys) -> None:
    assert main(["resources", "plan", "--json"]) == 0

    data = _json(capsys)
    assert data["stateFile"] == str(sample_project.root / "gas.up.json")
    assert data["byState"]["CREATED"] == [
        "admin:base:worker:e5f6",
        "core:base:kv:a1b2",
        "core:base:worker:c3d4",
    ]
    assert data["deployWaves"] == [
        {"wave": 1, "resources": ["admin:base:worker:e5f6", "core:base:kv:a1b2"]},
        {"wave": 2, "resources": ["core:base:worker:c3d4"]},
    ]


def test_plan_after_save_has_no_changes(sample_project, capsys) -> None:
    assert main(["state", "save"]) == 0
    capsys.readouterr()

    assert main(["resources", "plan"]) == 0

    out = capsys.readouterr().out
    assert "No changes." in out
    assert "  UNCHANGED: 3" in out


def test_plan_text_lists_teardown_and_deploy(sample_project, capsys) -> None:
    assert main(["state", "save"]) == 0
    capsys.readouterr()
    sample_project.add_resource("new-kv", "core:extra:kv:9")
    shutil.rmtree(sample_project.resource_dir("admin-base-api"))

    assert main(["resources", "plan"]) == 0

    out = capsys.readouterr().out
    assert "Teardown wave 1:\n  - admin:base:worker:e5f6" in out
    assert "created  core:extra:kv:9" in out


def test_no_domain_prints_help(capsys) -> None:
    assert main([]) == 0

    assert "resources" in capsys.readouterr().out


def test_version_flag(capsys) -> None:
    from gasoline import __version__

    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])

    assert exc_info.value.code == 0
    assert __version__ in capsys.readouterr().out
