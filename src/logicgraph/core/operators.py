"""Catalog of known JSONLogic operators with display metadata."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

OperatorCategory = Literal[
    "variable",
    "comparison",
    "logical",
    "arithmetic",
    "control",
    "string",
    "array",
    "datetime",
    "validation",
    "error",
    "utility",
]


@dataclass(frozen=True)
class OperatorMeta:
    """Display metadata for one operator."""

    name: str
    label: str
    category: OperatorCategory


CATEGORY_ICONS: dict[str, str] = {
    "variable": "box",
    "comparison": "scale",
    "logical": "git-branch",
    "arithmetic": "calculator",
    "control": "git-fork",
    "string": "text",
    "array": "list",
    "datetime": "calendar",
    "validation": "shield-check",
    "error": "alert-triangle",
    "utility": "wrench",
}

TYPE_ICONS: dict[str, str] = {
    "string": "text",
    "number": "hash",
    "boolean": "toggle-left",
    "boolean_true": "check",
    "boolean_false": "x",
    "null": "ban",
    "array": "list",
    "date": "calendar",
    "variable": "box",
    "expression": "cog",
}

# Per-argument icons for iterator operators: (source array, callback, initial).
ITERATOR_ARG_ICONS: dict[str, tuple[str, ...]] = {
    "map": ("database", "cog"),
    "reduce": ("database", "cog", "boxes"),
    "filter": ("database", "cog"),
    "some": ("database", "cog"),
    "none": ("database", "cog"),
    "all": ("database", "cog"),
}

OR_ICON = "git-merge"

VARIABLE_OPERATORS = frozenset({"var", "val", "exists"})
IF_OPERATORS = frozenset({"if", "?:"})
BRANCH_TABLE_OPERATORS = frozenset({"switch", "match"})


def _catalog(category: OperatorCategory, *entries: tuple[str, str]) -> dict[str, OperatorMeta]:
    return {name: OperatorMeta(name=name, label=label, category=category) for name, label in entries}


OPERATORS: dict[str, OperatorMeta] = {
    **_catalog("variable", ("var", "Variable"), ("val", "Value"), ("exists", "Exists")),
    **_catalog(
        "comparison",
        ("==", "Equals"),
        ("===", "Strict Equals"),
        ("!=", "Not Equals"),
        ("!==", "Strict Not Equals"),
        (">", "Greater Than"),
        (">=", "Greater Or Equal"),
        ("<", "Less Than"),
        ("<=", "Less Or Equal"),
    ),
    **_catalog("logical", ("!", "Not"), ("!!", "To Boolean"), ("and", "And"), ("or", "Or")),
    **_catalog(
        "arithmetic",
        ("+", "Add"),
        ("-", "Subtract"),
        ("*", "Multiply"),
        ("/", "Divide"),
        ("%", "Modulo"),
        ("max", "Maximum"),
        ("min", "Minimum"),
        ("abs", "Absolute"),
        ("ceil", "Ceiling"),
        ("floor", "Floor"),
    ),
    **_catalog(
        "control",
        ("if", "If"),
        ("?:", "Ternary"),
        ("switch", "Switch"),
        ("match", "Match"),
        ("??", "Coalesce"),
    ),
    **_catalog(
        "string",
        ("cat", "Concatenate"),
        ("substr", "Substring"),
        ("in", "Contains"),
        ("length", "Length"),
        ("starts_with", "Starts With"),
        ("ends_with", "Ends With"),
        ("upper", "Uppercase"),
        ("lower", "Lowercase"),
        ("trim", "Trim"),
        ("split", "Split"),
    ),
    **_catalog(
        "array",
        ("map", "Map"),
        ("filter", "Filter"),
        ("reduce", "Reduce"),
        ("all", "All"),
        ("some", "Some"),
        ("none", "None"),
        ("merge", "Merge"),
        ("sort", "Sort"),
        ("slice", "Slice"),
    ),
    **_catalog(
        "datetime",
        ("datetime", "DateTime"),
        ("timestamp", "Duration"),
        ("parse_date", "Parse Date"),
        ("format_date", "Format Date"),
        ("date_diff", "Date Difference"),
        ("now", "Now"),
    ),
    **_catalog("validation", ("missing", "Missing"), ("missing_some", "Missing Some")),
    **_catalog("error", ("try", "Try"), ("throw", "Throw")),
    **_catalog("utility", ("type", "Type"), ("preserve", "Preserve")),
}


def is_operator(name: str) -> bool:
    return name in OPERATORS


def operator_meta(name: str) -> OperatorMeta:
    """Metadata for ``name``; unknown operators get a generic utility entry."""
    meta = OPERATORS.get(name)
    if meta is not None:
        return meta
    return OperatorMeta(name=name, label=name, category="utility")


def category_icon(category: str) -> str:
    return CATEGORY_ICONS.get(category, "list")
