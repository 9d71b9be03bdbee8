"""Helpers for strategy parameter values: combo options, snapshots, display."""

from __future__ import annotations

import copy
from typing import Mapping

from .models import DataType, ParameterInfo

_TEXT_TYPES = frozenset({DataType.TEXT, DataType.COMBO, DataType.CLIENT, DataType.UPDATES, DataType.CONTRACT})


def combo_option(options: str, index: int) -> str:
    """The ``index``-th entry of a ';'-separated option list."""
    choices = options.split(";")
    if not 0 <= index < len(choices):
        raise IndexError(f"combo index {index} out of range for {options!r}")
    return choices[index]


def combo_labels(options: str) -> list[str]:
    """Labels shown in a combo box; the list ends at the first empty entry."""
    labels = []
    for label in options.split(";"):
        if not label:
            break
        labels.append(label)
    return labels


def snapshot_parameters(parameters: Mapping[str, ParameterInfo]) -> dict[str, ParameterInfo]:
    """Independent copies of ``parameters`` for a new strategy row.

    A combo keeps only the chosen option as its text.
    """
    snapshot: dict[str, ParameterInfo] = {}
    for name, info in parameters.items():
        item = copy.deepcopy(info)
        if item.type == DataType.COMBO:
            item.parameter.text = combo_option(item.parameter.text, item.parameter.integer)
        snapshot[name] = item
    return snapshot


def display_value(info: ParameterInfo) -> str:
    """The text shown for a parameter in a row that is not being edited."""
    value = info.parameter
    if info.type in _TEXT_TYPES:
        return value.text
    if info.type == DataType.INT:
        return f"{value.integer:d}"
    if info.type == DataType.FLOAT:
        return f"{value.floating:.2f}"
    if info.type == DataType.RADIO:
        return "1" if value.check else "0"
    return ""