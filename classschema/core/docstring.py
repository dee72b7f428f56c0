"""Docstring parsing for parameter type hints.

The parser is a fallback source of parameter types: it is only consulted
when a parameter has no annotation. It understands Sphinx fields
(``:param Post post:`` / ``:type post: Post``), Google style ``Args:``
sections and NumPy style ``Parameters`` sections. Everything that is not a
parameter entry (returns, raises, author, deprecation notes and any other
field or section) is discarded, and nothing in a docstring ever raises.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import lru_cache
import inspect
import re

SPHINX_FIELD = re.compile(
    r"^:(?P<field>[\w-]+)(?:\s+(?P<argument>[^:]+?))?\s*:(?P<body>.*)$"
)
SPHINX_PARAM_FIELDS = frozenset(
    {"param", "parameter", "arg", "argument", "key", "keyword"}
)
SPHINX_TYPE_FIELDS = frozenset({"type"})

GOOGLE_PARAM_SECTIONS = frozenset(
    {
        "args",
        "arguments",
        "parameters",
        "params",
        "keyword args",
        "keyword arguments",
        "other parameters",
    }
)
GOOGLE_SECTION = re.compile(r"^(?P<title>[A-Za-z][A-Za-z ]*):\s*$")
GOOGLE_ENTRY = re.compile(r"^(?P<name>\*{0,2}\w+)\s*(?:\((?P<type>[^)]*)\))?\s*:")

NUMPY_UNDERLINE = re.compile(r"^-{3,}\s*$")
NUMPY_PARAM_SECTIONS = frozenset({"parameters", "other parameters"})
NUMPY_ENTRY = re.compile(r"^(?P<name>\*{0,2}\w+)\s*(?::\s*(?P<type>.+))?$")

ROLE = re.compile(r":(?:\w+:)?\w+:`(?P<target>[^`]+)`")

Recorder = Callable[[str, str | None], None]


@dataclass(frozen=True)
class DocParam:
    """One documented parameter."""

    name: str
    type_name: str | None
    position: int


@dataclass(frozen=True)
class Docstring:
    """Parameter entries of a docstring, in the order they are documented."""

    params: tuple[DocParam, ...] = ()

    def get_param(
        self, name: str, position: int, parameter_names: Iterable[str] = ()
    ) -> DocParam | None:
        """Find a parameter entry by name, falling back to its position.

        The positional fallback only applies when the entry at that position
        documents a name the method does not declare.
        """
        for param in self.params:
            if param.name == name:
                return param
        if 0 <= position < len(self.params):
            candidate = self.params[position]
            if candidate.name not in set(parameter_names):
                return candidate
        return None


def clean_doc_type(type_name: str | None) -> str | None:
    """Normalize a documented type string.

    Sphinx roles, backticks, leading ``~``/``.`` and an ``optional`` suffix
    are removed.
    """
    if not type_name:
        return None
    cleaned = ROLE.sub(lambda match: match.group("target"), type_name)
    cleaned = cleaned.replace("`", "")
    cleaned = re.sub(r",?\s*optional\s*$", "", cleaned.strip())
    cleaned = cleaned.strip().lstrip("~!.").strip()
    return cleaned or None


class DocstringParser:
    """Extracts documented parameter types from method docstrings."""

    def parse(self, docstring: str | None) -> Docstring:
        if not docstring:
            return Docstring()
        return _parse(docstring)


@lru_cache(maxsize=1024)
def _parse(docstring: str) -> Docstring:
    lines = inspect.cleandoc(docstring).splitlines()
    entries: dict[str, list[str | None]] = {}
    order: list[str] = []

    def record(name: str, type_name: str | None) -> None:
        name = name.lstrip("*")
        if name not in entries:
            entries[name] = [None]
            order.append(name)
        if type_name:
            entries[name][0] = type_name

    _parse_sphinx(lines, record)
    _parse_google(lines, record)
    _parse_numpy(lines, record)

    return Docstring(
        params=tuple(
            DocParam(name, clean_doc_type(entries[name][0]), position)
            for position, name in enumerate(order)
        )
    )


def _parse_sphinx(lines: list[str], record: Recorder) -> None:
    for line in lines:
        match = SPHINX_FIELD.match(line.strip())
        if not match or not match.group("argument"):
            continue

        field = match.group("field").lower()
        argument = match.group("argument").split()
        if not argument:
            continue

        if field in SPHINX_PARAM_FIELDS:
            name = argument[-1]
            type_name = " ".join(argument[:-1]) or None
            record(name, type_name)
        elif field in SPHINX_TYPE_FIELDS:
            record(argument[-1], match.group("body").strip() or None)


def _parse_google(lines: list[str], record: Recorder) -> None:
    in_section = False
    entry_indent: int | None = None

    for line in lines:
        if not line.strip():
            continue

        indent = len(line) - len(line.lstrip())
        section = GOOGLE_SECTION.match(line) if indent == 0 else None

        if section:
            title = section.group("title").strip().lower()
            in_section = title in GOOGLE_PARAM_SECTIONS
            entry_indent = None
            continue

        if indent == 0:
            in_section = False
            continue

        if not in_section:
            continue

        if entry_indent is None:
            entry_indent = indent
        if indent != entry_indent:
            continue

        entry = GOOGLE_ENTRY.match(line.strip())
        if entry:
            record(entry.group("name"), entry.group("type"))


def _parse_numpy(lines: list[str], record: Recorder) -> None:
    in_section = False

    for index, line in enumerate(lines):
        following = lines[index + 1] if index + 1 < len(lines) else ""

        if NUMPY_UNDERLINE.match(following.strip()) and line.strip():
            in_section = line.strip().lower() in NUMPY_PARAM_SECTIONS
            continue

        if NUMPY_UNDERLINE.match(line.strip()):
            continue

        if not in_section or not line.strip() or line[0].isspace():
            continue

        entry = NUMPY_ENTRY.match(line.strip())
        if entry:
            record(entry.group("name"), entry.group("type"))
