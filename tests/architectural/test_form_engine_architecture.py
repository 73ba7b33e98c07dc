"""Architectural tests for the custom forms package.

Static inspection only: modules are parsed with ``ast`` rather than imported
so layering rules are checked without touching the database or the app.
"""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Iterable, List, Set, Tuple

import pytest

PACKAGE_ROOT = Path("customforms")
LOGIC_DIR = PACKAGE_ROOT / "logic"
ROUTES_DIR = PACKAGE_ROOT / "routes"

# Pure form logic must stay importable without web or storage stacks
PURE_LOGIC_MODULES = (
    "answer_canonical.py",
    "form_definition.py",
    "form_state.py",
    "merge_view.py",
    "order_sequences.py",
    "prompt_responses.py",
    "validation.py",
)

SQL_KEYWORDS = ("SELECT ", "INSERT ", "UPDATE ", "DELETE FROM")


def _parse(path: Path) -> ast.Module:
    assert path.exists(), f"Missing module: {path}"
    return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))


def _imported_roots(tree: ast.Module) -> Set[str]:
    roots: Set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            roots.update(alias.name.split(".")[0] for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            roots.add(node.module.split(".")[0])
    return roots


def _python_files(root: Path) -> Iterable[Path]:
    return sorted(p for p in root.rglob("*.py") if "__pycache__" not in p.parts)


def _string_constants(tree: ast.Module) -> List[str]:
    return [n.value for n in ast.walk(tree) if isinstance(n, ast.Constant) and isinstance(n.value, str)]


@pytest.mark.parametrize("module", PURE_LOGIC_MODULES)
def test_pure_logic_has_no_web_or_storage_imports(module: str) -> None:
    roots = _imported_roots(_parse(LOGIC_DIR / module))
    assert not roots & {"fastapi", "starlette", "sqlalchemy"}, f"{module} imports {roots}"


def test_routes_contain_no_sql() -> None:
    for path in _python_files(ROUTES_DIR):
        tree = _parse(path)
        assert "sqlalchemy" not in _imported_roots(tree), f"{path} imports sqlalchemy"
        for value in _string_constants(tree):
            upper = value.upper()
            assert not any(kw in upper for kw in SQL_KEYWORDS), f"SQL literal in {path}: {value!r}"


def test_no_bare_except_in_package() -> None:
    offenders: List[Tuple[str, int]] = []
    for path in _python_files(PACKAGE_ROOT):
        for node in ast.walk(_parse(path)):
            if isinstance(node, ast.ExceptHandler) and node.type is None:
                offenders.append((str(path), node.lineno))
    assert offenders == []


def test_prompt_type_checks_are_keyed_by_every_prompt_type() -> None:
    prompt_types = _parse(PACKAGE_ROOT / "models" / "prompt_type.py")
    declared = {
        target.id
        for node in ast.walk(prompt_types)
        if isinstance(node, ast.ClassDef) and node.name == "PromptType"
        for stmt in node.body
        if isinstance(stmt, ast.Assign) and isinstance(stmt.value, ast.Constant)
        for target in stmt.targets
        if isinstance(target, ast.Name)
    }

    validation = _parse(LOGIC_DIR / "validation.py")
    keyed: Set[str] = set()
    for node in ast.walk(validation):
        if isinstance(node, ast.AnnAssign) and getattr(node.target, "id", None) == "TYPE_CHECKS":
            keyed = {k.attr for k in node.value.keys if isinstance(k, ast.Attribute)}

    assert declared == {"LIKERT_3", "LIKERT_5", "LIKERT_7", "TEXT", "DROPDOWN", "CHECKBOX"}
    assert keyed == declared


def test_element_models_declare_literal_kind() -> None:
    tree = _parse(PACKAGE_ROOT / "models" / "elements.py")
    kinds = {}
    for node in ast.walk(tree):
        if isinstance(node, ast.ClassDef) and node.name in ("Heading", "TextBlock", "Prompt"):
            for stmt in node.body:
                if isinstance(stmt, ast.AnnAssign) and getattr(stmt.target, "id", None) == "kind":
                    kinds[node.name] = ast.unparse(stmt.annotation)

    assert kinds == {
        "Heading": "Literal['heading']",
        "TextBlock": "Literal['textBlock']",
        "Prompt": "Literal['prompt']",
    }


def test_sql_lives_only_in_repository_modules() -> None:
    for path in _python_files(LOGIC_DIR):
        if path.name.startswith("repository_"):
            continue
        assert "sqlalchemy" not in _imported_roots(_parse(path)), f"{path} imports sqlalchemy"
