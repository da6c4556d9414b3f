"""Name conversions and static inspection of task-file contents."""

from __future__ import annotations

import ast
import logging
import re
from typing import Iterable, List, Optional, Set

logger = logging.getLogger(__name__)

BASE_CLASS_NAME = "Tasks"

_MODULE_COMMENT = re.compile(r"^\s*#\s*module:\s*(.*)$")


def snake_case(name: str) -> str:
    """``MyDeploy`` -> ``my_deploy``; all-caps names are only lowercased."""

    if re.fullmatch(r"[A-Z_]+", name):
        return name.lower()
    converted = re.sub(r"\B([A-Z])", r"_\1", name)
    converted = re.sub(r"_+", "_", converted)
    return converted.lstrip("_").lower()


def camel_case(name: str) -> str:
    """``my_deploy`` -> ``MyDeploy``; names already in CamelCase are kept."""

    if "_" not in name and re.search(r"[A-Z]", name):
        return name
    return "".join(part.capitalize() for part in name.split("_"))


def constant_to_path(constant: str) -> str:
    """Convert a dotted class name such as ``Ops.Database`` to ``ops:database``."""

    return ":".join(snake_case(part) for part in constant.split(".") if part)


def to_constant(path: str) -> str:
    """Convert a task path such as ``ops:database`` to ``Ops.Database``."""

    return ".".join(camel_case(part) for part in path.split(":") if part)


def namespace_of(task_path: str) -> str:
    """Return the namespace identifier that defines ``task_path``.

    ``ops:database:migrate`` is defined by ``Ops.Database``; a task name
    without a colon belongs to the ``Default`` group.
    """

    group_path, _, _ = task_path.rpartition(":")
    return to_constant(group_path or "default")


def module_name_from_contents(contents: str) -> Optional[str]:
    """Return the alias declared by a ``# module: <name>`` first line."""

    first_line = contents.split("\n", 1)[0]
    match = _MODULE_COMMENT.match(first_line)
    if not match:
        return None
    name = match.group(1).strip()
    return name or None


def constants_in_contents(contents: str, path: str) -> List[str]:
    """Return the qualified names of task groups ``contents`` would define.

    The source is parsed, never executed. A class counts as a task group when
    one of its bases is ``Tasks`` (bare or as an attribute such as
    ``thorn.Tasks``) or another group class defined earlier in the file.
    Nested classes are reported by their dotted qualified name.
    """

    try:
        tree = ast.parse(contents, filename=path)
    except (SyntaxError, ValueError) as exc:
        logger.warning("unable to inspect task file %r: %s", path, exc)
        return []

    found: List[str] = []
    known: Set[str] = {BASE_CLASS_NAME}
    _scan(tree.body, (), known, found)
    return found


def _scan(body: Iterable[ast.stmt], prefix: tuple, known: Set[str], found: List[str]) -> None:
    for node in body:
        if not isinstance(node, ast.ClassDef):
            continue
        qualified = ".".join(prefix + (node.name,))
        if any(_base_name(base) in known for base in node.bases):
            known.add(node.name)
            known.add(qualified)
            if qualified not in found:
                found.append(qualified)
        _scan(node.body, prefix + (node.name,), known, found)


def _base_name(node: ast.expr) -> Optional[str]:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        if node.attr == BASE_CLASS_NAME:
            return BASE_CLASS_NAME
        parent = _base_name(node.value)
        if parent is not None:
            return f"{parent}.{node.attr}"
    return None


__all__ = [
    "camel_case",
    "constant_to_path",
    "constants_in_contents",
    "module_name_from_contents",
    "namespace_of",
    "snake_case",
    "to_constant",
]
