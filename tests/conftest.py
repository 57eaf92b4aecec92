import os
import shutil
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'gasoline' and tests/ importable for helpers
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from gasoline.core.config.cache import clear_all_caches
from gasoline.core.utils.logging_config import reset_logging_for_tests
from helpers.resource_project import ResourceProject


@pytest.fixture(autouse=True)
def _reset_gasoline_state(monkeypatch):
    """Drop config caches and CLI log handlers around every test."""
    for key in [k for k in os.environ if k.startswith("GASOLINE_")]:
        monkeypatch.delenv(key, raising=False)
    clear_all_caches()
    yield
    clear_all_caches()
    reset_logging_for_tests()


@pytest.fixture
def isolated_project_env(tmp_path, monkeypatch):
    """
    Isolated project environment for tests.

    The project root is pinned through GASOLINE_PROJECT_ROOT and the working
    directory is moved into it, so nothing resolves to the real checkout.
    """
    monkeypatch.setenv("GASOLINE_PROJECT_ROOT", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".git").mkdir()
    return tmp_path


@pytest.fixture
def resource_project(isolated_project_env) -> ResourceProject:
    """An empty gasoline project with a `gasoline/` container directory."""
    return ResourceProject(isolated_project_env)


@pytest.fixture
def sample_project(resource_project: ResourceProject) -> ResourceProject:
    """Three resources: core-base-api -> core-base-kv, admin-base-api isolated."""
    resource_project.add_resource(
        "core-base-kv",
        "core:base:kv:a1b2",
        binding="coreBaseKv",
        config={"name": "CORE_BASE_KV"},
    )
    resource_project.add_resource(
        "core-base-api",
        "core:base:worker:c3d4",
        binding="coreBaseApi",
        config={"name": "CORE_BASE_API"},
        dependencies={"core-base-kv": "workspace:*", "hono": "^4.0.0"},
    )
    resource_project.add_resource(
        "admin-base-api",
        "admin:base:worker:e5f6",
        binding="adminBaseApi",
        config={"name": "ADMIN_BASE_API"},
        dependencies={"hono": "^4.0.0"},
    )
    return resource_project


@pytest.fixture
def node_binary() -> str:
    node = shutil.which("node")
    if node is None:
        pytest.skip("node is not installed")
    return node
