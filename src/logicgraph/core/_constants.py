"""Shared constants for graph conversion and formatting."""

from __future__ import annotations

TRACE_ID_PREFIX = "trace-"

ARG_HANDLE_PREFIX = "arg-"
BRANCH_HANDLE_PREFIX = "branch-"
TARGET_HANDLE = "left"

# Stands in for an embedded expression inside a structure node's JSON text.
EXPR_PLACEHOLDER = "{{EXPR}}"
EXPR_PLACEHOLDER_QUOTED = f'"{EXPR_PLACEHOLDER}"'

STRUCTURE_INDENT = 2

EXPRESSION_TEXT_LIMIT = 100
BRANCH_LABEL_LIMIT = 40
SHORT_LABEL_LIMIT = 20

DEFAULT_PLAYBACK_SPEED_MS = 500
