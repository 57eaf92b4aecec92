"""CLI tests for `gas state ...` and `gas config show`."""
from __future__ import annotations

import json

import yaml

from gasoline.cli._dispatcher import main


def test_state_show_without_snapshot(resource_project, capsys) -> None:
    assert main(["state", "show"]) == 0

    assert "nothing deployed yet" in capsys.readouterr().out


def test_state_save_then_show(sample_project, capsys) -> None:
    assert main(["state", "save", "--json"]) == 0
    saved = json.loads(capsys.readouterr().out)

    assert saved == {
        "status": "success",
        "stateFile": str(sample_project.root / "gas.up.json"),
        "resources": 3,
        "dryRun": False,
    }

    assert main(["state", "show", "--json"]) == 0
    shown = json.loads(capsys.readouterr().out)
    assert shown["core:base:worker:c3d4"]["dependencies"] == ["core:base:kv:a1b2"]
    assert shown["core:base:kv:a1b2"]["config"]["name"] == "CORE_BASE_KV"


def test_state_save_dry_run_writes_nothing(sample_project, capsys) -> None:
    assert main(["state", "save", "--dry-run", "--json"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["dryRun"] is True
    assert sorted(data["snapshot"]) == [
        "admin:base:worker:e5f6",
        "core:base:kv:a1b2",
        "core:base:worker:c3d4",
    ]
    assert not (sample_project.root / "gas.up.json").exists()


def test_state_save_to_custom_file(sample_project, capsys) -> None:
    target = sample_project.root / ".gas" / "prod.json"

    assert main(["state", "save", "--state-file", str(target)]) == 0

    assert f"Saved snapshot of 3 resource(s) to {target}" in capsys.readouterr().out
    assert target.is_file()


def test_state_file_from_config(sample_project, capsys) -> None:
    sample_project.write_config("state:\n  file: deploy/state.json\n")

    assert main(["state", "save"]) == 0

    assert (sample_project.root / "deploy" / "state.json").is_file()


def test_state_save_refuses_cycles(resource_project, capsys) -> None:
    resource_project.add_resource("a", "x:y:p:1", dependencies={"b": "*"})
    resource_project.add_resource("b", "x:y:q:2", dependencies={"a": "*"})

    assert main(["state", "save"]) == 1

    assert "Dependency cycle detected" in capsys.readouterr().err
    assert not (resource_project.root / "gas.up.json").exists()


def test_state_show_nested(sample_project, capsys) -> None:
    main(["state", "save"])
    capsys.readouterr()

    assert main(["state", "show", "--nested", "--json"]) == 0

    nested = json.loads(capsys.readouterr().out)
    assert list(nested["core"]["base"]) == ["kv", "worker"]


def test_state_show_invalid_snapshot(resource_project, capsys) -> None:
    (resource_project.root / "gas.up.json").write_text("[]", encoding="utf-8")

    assert main(["state", "show", "--json"]) == 1

    err = json.loads(capsys.readouterr().err)
    assert err["error"] == "StateError"


def test_config_show_yaml(isolated_project_env, capsys) -> None:
    assert main(["config", "show"]) == 0

    parsed = yaml.safe_load(capsys.readouterr().out)
    assert parsed["graph"]["on_cycle"] == "error"


def test_config_show_key_json(isolated_project_env, capsys) -> None:
    (isolated_project_env / "gasoline.config.yaml").write_text(
        "graph:\n  on_cycle: warn\n", encoding="utf-8"
    )

    assert main(["config", "show", "graph.on_cycle", "--json"]) == 0

    assert json.loads(capsys.readouterr().out) == {"graph": {"on_cycle": "warn"}}


def test_config_show_missing_key(isolated_project_env, capsys) -> None:
    assert main(["config", "show", "graph.nope"]) == 1

    assert "Key not found: graph.nope" in capsys.readouterr().out


def test_invalid_config_is_reported(isolated_project_env, capsys) -> None:
    (isolated_project_env / "gasoline.config.yaml").write_text(
        "scan:\n  max_workers: 0\n", encoding="utf-8"
    )

    assert main(["config", "show", "--json"]) == 1

    err = json.loads(capsys.readouterr().err)
    assert err["error"] == "ConfigError"
