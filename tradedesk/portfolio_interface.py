"""Strategy rows of one portfolio: actions, global updates, import and export."""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Callable, Optional, Union

from .models import (
    DataType,
    GlobalParameterInfo,
    ParameterInfo,
    ParameterValue,
    PortfolioStatus,
    RequestType,
    StrategyRow,
    StrategyStatus,
)
from .parameters import combo_option

PathLike = Union[str, "os.PathLike[str]"]
StrategyAction = Callable[[StrategyRow, str, RequestType], None]
Post = Callable[[Callable[[], None]], None]

COLOR_GRAY = "gray"
COLOR_YELLOW = "yellow"
COLOR_GREEN = "green"
COLOR_RED = "red"
COLOR_BLUE = "blue"

_TEXT_TYPES = frozenset({DataType.TEXT, DataType.COMBO, DataType.CLIENT, DataType.UPDATES, DataType.CONTRACT})


def status_color(status: StrategyStatus, changed: bool) -> str:
    """Colour name used to show a row's status."""
    if status in (StrategyStatus.PENDING, StrategyStatus.WAITING, StrategyStatus.INACTIVE):
        return COLOR_GRAY
    if status in (StrategyStatus.APPLIED, StrategyStatus.ACTIVE):
        return COLOR_YELLOW if changed else COLOR_GREEN
    if status in (StrategyStatus.DISCONNECTED, StrategyStatus.TERMINATED):
        return COLOR_RED
    return COLOR_BLUE


def _format_float(value: float) -> str:
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def _run_now(task: Callable[[], None]) -> None:
    task()


class PortfolioInterface:
    """The strategy rows of one portfolio tab and the actions on them.

    Portfolio numbers are shared by every portfolio in the process.
    """

    portfolio_number = 0

    def __init__(
        self,
        name: str,
        strategy_name: str,
        config: str,
        strategy_action: Optional[StrategyAction] = None,
        post: Optional[Post] = None,
    ) -> None:
        self.name = name
        self.strategy_name = strategy_name
        self.strategy_action = strategy_action
        self._post = post or _run_now
        self.param_list: dict[str, ParameterInfo] = {}
        self.global_param_list: list[GlobalParameterInfo] = []
        self.strategy_list: list[StrategyRow] = []
        self.open = True
        self.export_activated = False
        self.status_display = ""
        self.parse_config(config)

    @classmethod
    def _next_pf(cls) -> int:
        PortfolioInterface.portfolio_number += 1
        return PortfolioInterface.portfolio_number

    def parse_config(self, config: str) -> None:
        """Load the parameter columns of the strategy from its JSON config."""
        root = json.loads(config)
        self.param_list = {}
        for name, value in (root.get("Params") or {}).items():
            data_type = DataType(int(value["DataType"]))
            data = str(value["Value"])
            if data_type == DataType.END:
                continue
            parameter = ParameterValue()
            if data_type in _TEXT_TYPES:
                parameter.text = data
            elif data_type == DataType.INT:
                parameter.integer = int(data)
            elif data_type == DataType.FLOAT:
                parameter.floating = float(data)
            elif data_type == DataType.RADIO:
                parameter.check = bool(int(data))
            info = ParameterInfo(type=data_type, parameter=parameter)
            self.param_list.setdefault(name, info)
            self.global_param_list.append(GlobalParameterInfo(name=name, info=copy.deepcopy(info)))

    def do_strategy_action(self, row: StrategyRow, request_type: RequestType) -> None:
        """Mark ``row`` pending and post the request to the strategy engine."""
        if self.strategy_action is None:
            raise RuntimeError("no strategy action configured")
        action = self.strategy_action
        strategy_name = self.strategy_name
        row.status = StrategyStatus.PENDING
        self._post(lambda: action(row, strategy_name, request_type))

    def _act_on(self, rows: list[StrategyRow], request_type: RequestType, waiting: bool = False) -> int:
        for row in rows:
            if waiting:
                row.status = StrategyStatus.WAITING
            self.do_strategy_action(row, request_type)
        return len(rows)

    @staticmethod
    def _can_subscribe(row: StrategyRow) -> bool:
        return row.changed or row.status in (StrategyStatus.TERMINATED, StrategyStatus.INACTIVE)

    @staticmethod
    def _can_apply(row: StrategyRow) -> bool:
        return (row.changed or row.status == StrategyStatus.ACTIVE) and row.subscribed

    @staticmethod
    def _can_unsubscribe(row: StrategyRow) -> bool:
        return row.changed or row.status in (StrategyStatus.ACTIVE, StrategyStatus.APPLIED)

    def subscribe_all(self) -> int:
        """Subscribe every changed, inactive or terminated row; returns the count."""
        rows = [row for row in self.strategy_list if self._can_subscribe(row)]
        return self._act_on(rows, RequestType.SUBSCRIBE, waiting=True)

    def subscribe_selected(self) -> int:
        rows = [row for row in self.strategy_list if self._can_subscribe(row) and row.selected]
        return self._act_on(rows, RequestType.SUBSCRIBE, waiting=True)

    def apply_all(self) -> int:
        rows = [row for row in self.strategy_list if self._can_apply(row)]
        return self._act_on(rows, RequestType.APPLY)

    def apply_selected(self) -> int:
        rows = [row for row in self.strategy_list if self._can_apply(row) and row.selected]
        return self._act_on(rows, RequestType.APPLY)

    def unsubscribe_all(self) -> int:
        rows = [row for row in self.strategy_list if self._can_unsubscribe(row)]
        return self._act_on(rows, RequestType.UNSUBSCRIBE)

    def unsubscribe_selected(self) -> int:
        rows = [row for row in self.strategy_list if self._can_unsubscribe(row) and row.selected]
        return self._act_on(rows, RequestType.UNSUBSCRIBE)

    def export_rows(self, path: PathLike) -> bool:
        """Write the rows as JSON; with no rows, delete the file instead.

        Returns True when a file was written.
        """
        target = Path(path)
        if not self.strategy_list:
            target.unlink(missing_ok=True)
            return False
        self.export_activated = True
        try:
            root = []
            for row in self.strategy_list:
                entries = {}
                for name, info in row.parameters.items():
                    value = info.parameter
                    if info.type == DataType.END:
                        continue
                    if info.type == DataType.INT:
                        text = str(value.integer)
                    elif info.type == DataType.FLOAT:
                        text = _format_float(value.floating)
                    elif info.type == DataType.RADIO:
                        text = "1" if value.check else "0"
                    else:
                        text = value.text
                    entries[name] = {"Value": text, "Type": int(info.type)}
                root.append(entries)
            target.write_text(json.dumps(root, separators=(",", ":"), ensure_ascii=False), encoding="utf-8")
        finally:
            self.export_activated = False
        self.status_display = f"Exporting done : {path} {len(self.strategy_list)}"
        return True

    def import_rows(self, path: PathLike) -> int:
        """Append the rows stored at ``path`` as inactive rows; returns how many.

        A missing file imports nothing.
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError:
            return 0
        root = json.loads(text)
        items = root.values() if isinstance(root, dict) else root
        count = 0
        for item in items:
            parameters: dict[str, ParameterInfo] = {}
            for name, value in item.items():
                data_type = DataType(int(value["Type"]))
                data = str(value["Value"])
                parameter = ParameterValue()
                if data_type == DataType.INT:
                    parameter.integer = int(data)
                elif data_type == DataType.FLOAT:
                    parameter.floating = float(data)
                elif data_type == DataType.RADIO:
                    parameter.check = data == "1"
                elif data_type in _TEXT_TYPES:
                    parameter.text = data
                parameters.setdefault(name, ParameterInfo(type=data_type, parameter=parameter))
            self.strategy_list.append(
                StrategyRow(pf=self._next_pf(), status=StrategyStatus.INACTIVE, parameters=parameters)
            )
            count += 1
        self.status_display = f"Importing done : {path} {len(self.strategy_list)}"
        return count

    def update_all(self, info: GlobalParameterInfo) -> None:
        """Copy a global parameter's value into every row that has it."""
        source = info.info.parameter
        for row in self.strategy_list:
            target = row.parameters.get(info.name)
            if target is None:
                continue
            if row.status in (StrategyStatus.ACTIVE, StrategyStatus.APPLIED):
                row.changed = True
            value = target.parameter
            data_type = info.info.type
            if data_type == DataType.INT:
                value.integer = source.integer
            elif data_type == DataType.FLOAT:
                value.floating = source.floating
            elif data_type in (DataType.TEXT, DataType.CLIENT):
                value.text = source.text
            elif data_type == DataType.RADIO:
                value.check = source.check
            elif data_type == DataType.COMBO:
                value.text = combo_option(source.text, source.integer)

    def check_any_active(self) -> PortfolioStatus:
        """Count rows per status; ``close`` is set while any row still runs."""
        status = PortfolioStatus()
        for row in self.strategy_list:
            if row.status == StrategyStatus.INACTIVE:
                status.inactive += 1
            elif row.status == StrategyStatus.ACTIVE:
                status.active += 1
            elif row.status == StrategyStatus.APPLIED:
                status.apply += 1
            elif row.status == StrategyStatus.TERMINATED:
                status.terminate += 1
            elif row.status == StrategyStatus.WAITING:
                status.waiting += 1
        status.close = bool(status.active or status.apply or status.waiting)
        return status