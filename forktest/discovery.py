from __future__ import annotations

import hashlib
import importlib
import importlib.util
import os
import sys
from pathlib import Path
from types import ModuleType
from typing import Iterable, List

from .errors import DiscoveryError


def _is_path(target: str) -> bool:
    return target.endswith(".py") or os.sep in target or Path(target).is_file()


def _module_name(path: Path) -> str:
    # Unique per path, so test files never replace real modules or each other.
    digest = hashlib.sha1(str(path).encode("utf-8", errors="surrogateescape")).hexdigest()
    return f"_forktest_{path.stem}_{digest[:12]}"


def _import_path(path: Path) -> ModuleType:
    path = path.resolve()
    if not path.is_file():
        raise DiscoveryError(f"test module not found: {path}")

    module_name = _module_name(path)
    if module_name in sys.modules:
        # Already imported; running it again would register its tests twice.
        return sys.modules[module_name]

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise DiscoveryError(f"cannot load test module from {path}")

    # Sibling imports inside the test file resolve like they would for a script.
    parent = str(path.parent)
    if parent not in sys.path:
        sys.path.insert(0, parent)

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def import_test_module(target: str) -> ModuleType:
    """Import ``target`` (dotted module name or ``.py`` path).

    Importing a module runs its ``@test`` decorators, which is what fills the
    registry.
    """

    try:
        if _is_path(target):
            return _import_path(Path(target))
        cwd = os.getcwd()
        if cwd not in sys.path:
            sys.path.insert(0, cwd)
        return importlib.import_module(target)
    except DiscoveryError:
        raise
    except Exception as exc:
        raise DiscoveryError(f"could not import test module {target}: {exc}") from exc


def import_test_modules(targets: Iterable[str]) -> List[ModuleType]:
    return [import_test_module(target) for target in targets]
