"""Editor for the parameter template (column layout) of a strategy."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

from .models import DataType


@dataclass
class ColumnInfo:
    """Type and default value of one strategy parameter."""

    type: DataType
    value: str = ""


def default_value(data_type: DataType) -> Optional[str]:
    """The value a freshly chosen type starts with, or None to keep the current one."""
    if data_type == DataType.CLIENT:
        return "PRO"
    if data_type in (DataType.FLOAT, DataType.INT, DataType.RADIO):
        return "0"
    return None


class TemplateBuilder:
    """Builds the JSON column configuration of a strategy."""

    def __init__(self, strategy_name: str = "") -> None:
        self.strategy_name = strategy_name
        self.parameters: dict[str, ColumnInfo] = {}
        self.status_display = ""

    def get_config(self) -> str:
        """The configuration as compact JSON: the name and every parameter."""
        params = {
            name: {"Value": info.value, "DataType": int(info.type)}
            for name, info in self.parameters.items()
        }
        root = {"Name": self.strategy_name, "Params": params}
        return json.dumps(root, separators=(",", ":"), ensure_ascii=False)

    def parse_config(self, config: str) -> None:
        """Replace the parameters with those of a JSON configuration."""
        root = json.loads(config)
        params = root.get("Params") or {}
        self.parameters = {
            name: ColumnInfo(type=DataType(int(value["DataType"])), value=str(value["Value"]))
            for name, value in params.items()
        }

    def append_parameter(self, name: str, data_type: DataType, value: str) -> ColumnInfo:
        """Add a parameter, or replace the one of the same name."""
        if not name:
            raise ValueError("parameter name must not be empty")
        info = ColumnInfo(type=DataType(data_type), value=value)
        self.parameters[name] = info
        self.status_display = (
            f"Strategy ({self.strategy_name}) :- Parameter Added [ Name : ({name}), Value: ({value}) ]"
        )
        return info

    def remove_parameter(self, name: str) -> ColumnInfo:
        """Remove and return the parameter called ``name``."""
        if name not in self.parameters:
            raise KeyError(name)
        self.status_display = f"Strategy ({self.strategy_name}) :- Parameter Removed [ Name : ({name}) ]"
        return self.parameters.pop(name)