"""Base class for task groups declared in task files."""

from __future__ import annotations

import argparse
import inspect
from typing import Any, Callable, ClassVar, Dict, List, Sequence, Tuple


class Tasks:
    """Derive from this class in a ``Thornfile`` or ``*.thorn`` file.

    Every public method becomes a task addressed as ``<group path>:<method>``.
    Parameters without defaults are positional arguments on the command line;
    parameters with defaults become ``--options`` and boolean defaults become
    flags::

        class Deploy(Tasks):
            def staging(self, branch, force=False):
                \"\"\"Deploy BRANCH to staging.\"\"\"
    """

    group: ClassVar[str] = "standard"


def task_methods(cls: type) -> Dict[str, Callable[..., Any]]:
    """Return the public methods of ``cls`` in definition order, parents first."""

    methods: Dict[str, Callable[..., Any]] = {}
    for klass in reversed(cls.__mro__):
        if klass in (object, Tasks):
            continue
        for name, value in vars(klass).items():
            if name.startswith("_") or not inspect.isfunction(value):
                continue
            methods.pop(name, None)
            methods[name] = value
    return methods


def summary_of(obj: object) -> str:
    doc = inspect.getdoc(obj) or ""
    return doc.strip().splitlines()[0] if doc.strip() else ""


def _parameters(func: Callable[..., Any]) -> List[inspect.Parameter]:
    params = list(inspect.signature(func).parameters.values())
    return params[1:] if params and params[0].name == "self" else params


def usage_of(name: str, func: Callable[..., Any]) -> str:
    parts = [name]
    for param in _parameters(func):
        option = param.name.replace("_", "-")
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            parts.append(f"[{param.name.upper()}...]")
        elif param.kind is inspect.Parameter.VAR_KEYWORD:
            continue
        elif param.default is inspect.Parameter.empty:
            parts.append(param.name.upper())
        elif isinstance(param.default, bool):
            parts.append(f"[--no-{option}]" if param.default else f"[--{option}]")
        else:
            parts.append(f"[--{option}={param.name.upper()}]")
    return " ".join(parts)


def build_parser(name: str, func: Callable[..., Any]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=f"thorn {name}", description=summary_of(func) or None)
    for param in _parameters(func):
        option = "--" + param.name.replace("_", "-")
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            parser.add_argument(param.name, nargs="*")
        elif param.kind is inspect.Parameter.VAR_KEYWORD:
            continue
        elif param.default is inspect.Parameter.empty:
            parser.add_argument(param.name)
        elif isinstance(param.default, bool):
            if param.default:
                parser.add_argument("--no-" + option[2:], dest=param.name, action="store_false")
            else:
                parser.add_argument(option, dest=param.name, action="store_true")
        elif param.default is None:
            parser.add_argument(option, dest=param.name, default=None)
        else:
            parser.add_argument(option, dest=param.name, type=type(param.default), default=param.default)
    return parser


def parse_arguments(
    name: str, func: Callable[..., Any], argv: Sequence[str]
) -> Tuple[List[Any], Dict[str, Any]]:
    """Turn ``argv`` into the positional and keyword arguments for ``func``."""

    namespace = vars(build_parser(name, func).parse_args(list(argv)))
    args: List[Any] = []
    kwargs: Dict[str, Any] = {}
    for param in _parameters(func):
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            continue
        value = namespace[param.name]
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            args.extend(value)
        elif param.kind is inspect.Parameter.KEYWORD_ONLY:
            kwargs[param.name] = value
        else:
            args.append(value)
    return args, kwargs


__all__ = ["Tasks", "build_parser", "parse_arguments", "summary_of", "task_methods", "usage_of"]
