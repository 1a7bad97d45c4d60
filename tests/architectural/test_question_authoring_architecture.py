"""Architectural tests for question authoring.

Static, file/AST-based checks: they read sources under ``app/`` and never
import or execute application code.
"""

from __future__ import annotations

import ast
import re
from pathlib import Path
from typing import Iterable, List, Set

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[2]
APP_DIR = PROJECT_ROOT / "app"
ROUTES_DIR = APP_DIR / "routes"
LOGIC_DIR = APP_DIR / "logic"

SQL_PATTERN = re.compile(r"\b(SELECT|INSERT\s+INTO|UPDATE\s+\w+\s+SET|DELETE\s+FROM)\b", re.IGNORECASE)
SERVICE_ERROR_CODES = ("SURVEY_NOT_FOUND", "QUESTION_NOT_FOUND", "SURVEY_LOCKED", "QUESTION_INVALID", "STORAGE_UNAVAILABLE")
MUTATIONS = ("create_with_options", "update", "delete", "apply_order")


# --------------------
# Helper utilities
# --------------------


def _py_files(root: Path) -> List[Path]:
    return sorted(p for p in root.rglob("*.py") if "__pycache__" not in p.parts)


def _parse(path: Path) -> ast.Module:
    try:
        return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    except SyntaxError as exc:
        pytest.fail(f"Failed to parse {path}: {exc}")


def _imported_modules(tree: ast.AST) -> Set[str]:
    names: Set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            names.add(node.module)
    return names


def _string_constants(tree: ast.AST) -> Iterable[str]:
    for node in ast.walk(tree):
        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            yield node.value


def _base_names(node: ast.ClassDef) -> Set[str]:
    out: Set[str] = set()
    for base in node.bases:
        if isinstance(base, ast.Name):
            out.add(base.id)
        elif isinstance(base, ast.Attribute):
            out.add(base.attr)
    return out


def _relative(path: Path) -> str:
    return path.relative_to(PROJECT_ROOT).as_posix()


# --------------------
# Layering
# --------------------


def test_routes_do_not_touch_the_database() -> None:
    """Route modules delegate storage to the service; no SQL and no SQLAlchemy."""
    offenders = []
    for path in _py_files(ROUTES_DIR):
        tree = _parse(path)
        if any(m.split(".")[0] == "sqlalchemy" for m in _imported_modules(tree)):
            offenders.append(f"{_relative(path)}: imports sqlalchemy")
        if any(SQL_PATTERN.search(s) for s in _string_constants(tree)):
            offenders.append(f"{_relative(path)}: embeds SQL")
    assert not offenders, offenders


def test_sql_lives_in_repositories_and_order_helpers() -> None:
    allowed = {"repository_surveys.py", "repository_questions.py", "repository_options.py", "order_sequences.py"}
    offenders = [
        _relative(path)
        for path in _py_files(LOGIC_DIR)
        if path.name not in allowed and any(SQL_PATTERN.search(s) for s in _string_constants(_parse(path)))
    ]
    assert not offenders, offenders


def _exported_names(tree: ast.Module) -> List[str]:
    for node in tree.body:
        if isinstance(node, ast.Assign) and any(isinstance(t, ast.Name) and t.id == "__all__" for t in node.targets):
            return [elt.value for elt in getattr(node.value, "elts", []) if isinstance(elt, ast.Constant)]
    return []


@pytest.mark.parametrize("module", ["repository_surveys", "repository_questions", "repository_options"])
def test_repository_functions_have_callers(module: str) -> None:
    """Each exported repository function is called from elsewhere in ``app/``."""
    source = LOGIC_DIR / f"{module}.py"
    names = _exported_names(_parse(source))
    assert names, f"{module}.__all__ missing"
    others = "\n".join(p.read_text(encoding="utf-8") for p in _py_files(APP_DIR) if p != source)
    unused = [name for name in names if f"{module}.{name}(" not in others]
    assert not unused, f"{module}: exported but never called: {unused}"


def test_mutations_take_the_survey_lock() -> None:
    """Every mutating service method serialises through ``_lock_survey``."""
    tree = _parse(LOGIC_DIR / "question_service.py")
    service = next(
        (n for n in tree.body if isinstance(n, ast.ClassDef) and n.name == "QuestionService"),
        None,
    )
    assert service is not None, "QuestionService class not found"
    methods = {n.name: n for n in service.body if isinstance(n, ast.FunctionDef)}
    missing = []
    for name in MUTATIONS:
        assert name in methods, f"QuestionService.{name} missing"
        calls = {
            node.func.attr
            for node in ast.walk(methods[name])
            if isinstance(node, ast.Call) and isinstance(node.func, ast.Attribute)
        }
        if "_lock_survey" not in calls:
            missing.append(name)
    assert not missing, f"mutations without survey lock: {missing}"


# --------------------
# Errors and problem codes
# --------------------


def test_error_types_are_centralised() -> None:
    """Exception classes are declared only in ``app/logic/errors.py``."""
    offenders = []
    for path in _py_files(APP_DIR):
        if path == LOGIC_DIR / "errors.py":
            continue
        for node in ast.walk(_parse(path)):
            if isinstance(node, ast.ClassDef) and any(b.endswith(("Error", "Exception")) for b in _base_names(node)):
                offenders.append(f"{_relative(path)}:{node.name}")
    assert not offenders, offenders


def test_service_error_codes_only_in_problem_factory() -> None:
    offenders = []
    for path in _py_files(APP_DIR):
        if path == LOGIC_DIR / "problem_factory.py":
            continue
        text = path.read_text(encoding="utf-8")
        offenders.extend(f"{_relative(path)}: {code}" for code in SERVICE_ERROR_CODES if code in text)
    assert not offenders, offenders


# --------------------
# Option types
# --------------------


def test_option_types_come_from_one_enumeration() -> None:
    """Only ``option_type.py`` spells the option type literals."""
    offenders = []
    for path in _py_files(APP_DIR):
        if path.name == "option_type.py":
            continue
        literals = {s for s in _string_constants(_parse(path)) if s in {"check", "free"}}
        if literals:
            offenders.append(f"{_relative(path)}: {sorted(literals)}")
    assert not offenders, offenders
