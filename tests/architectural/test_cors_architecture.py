"""Architectural tests for the CORS package.

Static, file/AST-based checks. They avoid executing application code and
only read files under the project root.
"""

from __future__ import annotations

import ast
import re
from pathlib import Path
from typing import Iterable, List

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[2]
PKG_DIR = PROJECT_ROOT / "http_cors"

# Decision logic must stay independent of the host server
CORE_MODULES = ("origin.py", "headers.py", "evaluate.py", "config.py", "errors.py")
HOST_PACKAGES = {"fastapi", "starlette", "uvicorn"}

CORS_RESPONSE_HEADERS = {
    "ALLOW_ORIGIN": "Access-Control-Allow-Origin",
    "ALLOW_CREDENTIALS": "Access-Control-Allow-Credentials",
    "EXPOSE_HEADERS": "Access-Control-Expose-Headers",
    "ALLOW_HEADERS": "Access-Control-Allow-Headers",
    "ALLOW_METHODS": "Access-Control-Allow-Methods",
    "MAX_AGE": "Access-Control-Max-Age",
    "VARY": "Vary",
}


def _parse(path: Path) -> ast.Module:
    try:
        return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    except FileNotFoundError:
        pytest.fail(f"Expected file is missing: {path}")
    except SyntaxError as exc:
        pytest.fail(f"Failed to parse {path}: {exc}")


def _package_files() -> List[Path]:
    return sorted(p for p in PKG_DIR.rglob("*.py") if "__pycache__" not in p.parts)


def _imported_roots(tree: ast.Module) -> Iterable[str]:
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield alias.name.split(".")[0]
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            yield node.module.split(".")[0]


def test_package_layout() -> None:
    expected = [
        "__init__.py",
        "config.py",
        "errors.py",
        "evaluate.py",
        "headers.py",
        "logging_setup.py",
        "main.py",
        "origin.py",
        "http/__init__.py",
        "http/interfaces.py",
        "http/starlette.py",
        "middleware/__init__.py",
        "middleware/cors.py",
    ]
    missing = [rel for rel in expected if not (PKG_DIR / rel).is_file()]
    assert not missing, f"Missing modules: {missing}"


@pytest.mark.parametrize("module", CORE_MODULES)
def test_core_modules_do_not_import_host_frameworks(module: str) -> None:
    roots = set(_imported_roots(_parse(PKG_DIR / module)))
    leaked = roots & HOST_PACKAGES
    assert not leaked, f"{module} imports host framework(s): {sorted(leaked)}"


def test_response_header_names_are_verbatim() -> None:
    tree = _parse(PKG_DIR / "headers.py")
    constants = {}
    for node in tree.body:
        if isinstance(node, ast.Assign) and isinstance(node.value, ast.Constant):
            for target in node.targets:
                if isinstance(target, ast.Name):
                    constants[target.id] = node.value.value
    for name, value in CORS_RESPONSE_HEADERS.items():
        assert constants.get(name) == value, f"{name} should be {value!r}, got {constants.get(name)!r}"


def test_no_bare_except_or_print_in_package() -> None:
    offenders = []
    for path in _package_files():
        for node in ast.walk(_parse(path)):
            if isinstance(node, ast.ExceptHandler) and node.type is None:
                offenders.append(f"{path.name}:{node.lineno} bare except")
            if isinstance(node, ast.Call) and isinstance(node.func, ast.Name) and node.func.id == "print":
                offenders.append(f"{path.name}:{node.lineno} print()")
    assert not offenders, "\n".join(offenders)


def test_logging_modules_use_module_logger() -> None:
    for path in _package_files():
        text = path.read_text(encoding="utf-8")
        if "logger." not in text:
            continue
        assert "logger = logging.getLogger(__name__)" in text, f"{path.name} logs without a module logger"


def test_no_module_level_mutable_state_in_evaluation() -> None:
    # Evaluation must not keep per-request state between calls
    for module in ("origin.py", "headers.py", "evaluate.py"):
        for node in _parse(PKG_DIR / module).body:
            if isinstance(node, (ast.Assign, ast.AnnAssign)):
                targets = node.targets if isinstance(node, ast.Assign) else [node.target]
                if any(isinstance(t, ast.Name) and t.id == "__all__" for t in targets):
                    continue
                value = node.value
                assert not isinstance(value, (ast.List, ast.Dict, ast.Set)), (
                    f"{module}:{node.lineno} defines module-level mutable state"
                )


def _exported_names(tree: ast.Module) -> List[str]:
    for node in tree.body:
        if isinstance(node, ast.Assign) and any(isinstance(t, ast.Name) and t.id == "__all__" for t in node.targets):
            if isinstance(node.value, (ast.List, ast.Tuple)):
                return [elt.value for elt in node.value.elts if isinstance(elt, ast.Constant)]
    return []


@pytest.mark.parametrize(
    "module",
    ["origin.py", "http/interfaces.py", "http/starlette.py", "middleware/cors.py"],
)
def test_exported_names_are_used_outside_their_module(module: str) -> None:
    path = PKG_DIR / module
    others = [p for p in _package_files() if p != path]
    others += sorted((PROJECT_ROOT / "tests").rglob("*.py"))
    corpus = "\n".join(p.read_text(encoding="utf-8") for p in others)
    unused = [
        name for name in _exported_names(_parse(path)) if not re.search(rf"\b{re.escape(name)}\b", corpus)
    ]
    assert not unused, f"{module} exports names nothing else uses: {unused}"
