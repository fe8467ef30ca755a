"""Feature modules with auto-discovery."""

from importlib import import_module
from pathlib import Path

import structlog
from fastapi import APIRouter


logger = structlog.get_logger()


def discover_modules() -> list[APIRouter]:
    """Auto-discover and return routers from all modules.

    Every subpackage shipping a ``routes`` module with a ``router``
    attribute is mounted. Package ``__init__`` files stay empty so the
    policies can import feature models without loading any routes. Import
    errors propagate: a module that fails to load is a deployment bug.
    """
    modules_dir = Path(__file__).parent
    routers: list[APIRouter] = []

    for path in sorted(modules_dir.iterdir()):
        if path.is_dir() and (path / "routes.py").exists():
            module = import_module(f"workforce.modules.{path.name}.routes")
            if hasattr(module, "router"):
                routers.append(module.router)
                logger.debug("module_loaded", module=path.name)

    return routers
