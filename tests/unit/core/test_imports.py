"""Each entry point must import cleanly in a fresh interpreter."""

import os
import subprocess
import sys

import pytest


pytestmark = pytest.mark.unit


def _run(code: str) -> subprocess.CompletedProcess[str]:
    env = {**os.environ, "PYTHONPATH": os.pathsep.join(p for p in sys.path if p)}
    return subprocess.run(
        [sys.executable, "-c", code],
        capture_output=True,
        text=True,
        check=False,
        env=env,
    )


@pytest.mark.parametrize(
    "module",
    [
        "workforce.main",
        "workforce.core.policies",
        "workforce.modules.attendance.routes",
        "workforce.modules.companies.repos",
        "workforce.modules.companies.services",
        "workforce.modules.dashboard.services",
        "workforce.modules.sub_roles.repos",
        "workforce.modules.tasks.services",
        "workforce.modules.users.services",
        "workforce.seed",
    ],
)
def test_module_imports_in_fresh_interpreter(module: str):
    result = _run(f"import {module}")

    assert result.returncode == 0, result.stderr


def test_create_app_mounts_every_module():
    result = _run(
        "from workforce.main import create_app; "
        "paths = {r.path for r in create_app().routes}; "
        "assert '/api/v1/sub-roles' in paths, paths; "
        "assert '/api/v1/attendance/clock-in' in paths, paths; "
        "assert '/api/v1/dashboard/employee' in paths, paths"
    )

    assert result.returncode == 0, result.stderr
