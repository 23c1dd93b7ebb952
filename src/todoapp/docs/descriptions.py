"""
Schema Description Resolver

Looks up human-authored descriptions for types and their members from the
docstrings in the source of the documented modules.

Descriptions are keyed by symbolic names:

- ``T:<module>.<Type>`` for a class docstring
- ``P:<module>.<Type>.<member>`` for an attribute docstring, the string
  literal directly following a field declaration

The source is parsed once, on first use, and lookups are cached for the
lifetime of the process.
"""

from __future__ import annotations

import ast
import importlib.util
import inspect
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel

logger = structlog.get_logger()


def type_symbol(schema_type: Any) -> str | None:
    """Symbolic name of a class, or None for anything that is not a class."""
    if not isinstance(schema_type, type):
        return None
    return f"T:{schema_type.__module__}.{schema_type.__qualname__}"


def declared_member_name(schema_type: Any, wire_name: str) -> str:
    """Map a serialized property name back to the field name it was declared as."""
    if isinstance(schema_type, type) and issubclass(schema_type, BaseModel):
        for name, field in schema_type.model_fields.items():
            if wire_name in (name, field.alias, field.serialization_alias):
                return name
    return wire_name


def member_symbol(schema_type: Any, wire_name: str) -> str | None:
    """Symbolic name of a class member, resolved from its serialized name."""
    if not isinstance(schema_type, type):
        return None
    member = declared_member_name(schema_type, wire_name)
    return f"P:{schema_type.__module__}.{schema_type.__qualname__}.{member}"


def _summary(docstring: str) -> str | None:
    text = inspect.cleandoc(docstring).split("\n\n", 1)[0]
    text = " ".join(line.strip() for line in text.splitlines()).strip()
    return text or None


class _DocstringCollector(ast.NodeVisitor):
    """Collects class and attribute docstrings from one module's syntax tree."""

    def __init__(self, module: str) -> None:
        self.module = module
        self.scope: list[str] = []
        self.entries: dict[str, str] = {}

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        self.scope.append(node.name)
        qualified = ".".join([self.module, *self.scope])

        docstring = ast.get_docstring(node, clean=True)
        if docstring and (summary := _summary(docstring)):
            self.entries[f"T:{qualified}"] = summary

        body = node.body
        for statement, following in zip(body, body[1:]):
            target = self._target_name(statement)
            if target is None:
                continue
            if (
                isinstance(following, ast.Expr)
                and isinstance(following.value, ast.Constant)
                and isinstance(following.value.value, str)
                and (summary := _summary(following.value.value))
            ):
                self.entries[f"P:{qualified}.{target}"] = summary

        self.generic_visit(node)
        self.scope.pop()

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        # Classes declared inside functions are not part of the API surface
        return None

    visit_AsyncFunctionDef = visit_FunctionDef

    @staticmethod
    def _target_name(statement: ast.stmt) -> str | None:
        if isinstance(statement, ast.AnnAssign) and isinstance(statement.target, ast.Name):
            return statement.target.id
        if (
            isinstance(statement, ast.Assign)
            and len(statement.targets) == 1
            and isinstance(statement.targets[0], ast.Name)
        ):
            return statement.targets[0].id
        return None


class DescriptionResolver:
    """
    Resolve descriptions by symbolic name.

    The documentation index is built at most once, even when several document
    requests arrive concurrently before it exists. A missing or unparsable
    source degrades to no descriptions.
    """

    def __init__(self, modules: Iterable[str]) -> None:
        self.modules = tuple(modules)
        self._index: dict[str, str] | None = None
        self._index_lock = threading.Lock()
        self._cache: dict[str, str | None] = {}
        self._cache_lock = threading.Lock()

    def describe(self, symbolic_name: str | None) -> str | None:
        """Description for a symbolic name, or None when undocumented."""
        if not symbolic_name:
            return None

        try:
            return self._cache[symbolic_name]
        except KeyError:
            pass

        description = self._get_index().get(symbolic_name)

        with self._cache_lock:
            return self._cache.setdefault(symbolic_name, description)

    def describe_type(self, schema_type: Any) -> str | None:
        return self.describe(type_symbol(schema_type))

    def describe_member(self, schema_type: Any, wire_name: str) -> str | None:
        return self.describe(member_symbol(schema_type, wire_name))

    def _get_index(self) -> dict[str, str]:
        index = self._index
        if index is None:
            with self._index_lock:
                if self._index is None:
                    self._index = self._build_index()
                index = self._index
        return index

    def _build_index(self) -> dict[str, str]:
        index: dict[str, str] = {}

        for module in self.modules:
            try:
                spec = importlib.util.find_spec(module)
                if spec is None or not spec.origin or not spec.origin.endswith(".py"):
                    raise FileNotFoundError(f"No Python source for module {module}")

                source = Path(spec.origin).read_text(encoding="utf-8")
                tree = ast.parse(source, filename=spec.origin)
            except (ImportError, OSError, SyntaxError, ValueError) as e:
                logger.warning(
                    "Documentation source unavailable, schema descriptions disabled for module",
                    module=module,
                    error=str(e),
                )
                continue

            collector = _DocstringCollector(module)
            collector.visit(tree)
            index.update(collector.entries)

        logger.debug("Documentation index built", entries=len(index))
        return index
