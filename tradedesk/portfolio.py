"""A portfolio tab: strategy rows of one strategy inside a workspace."""

from __future__ import annotations

import copy
from collections import deque
from typing import Mapping, Optional

from .models import ParameterInfo, PortfolioStatus, StrategyRow, StrategyStatus
from .parameters import snapshot_parameters
from .portfolio_interface import PortfolioInterface, Post, StrategyAction

_REMOVABLE = (StrategyStatus.INACTIVE, StrategyStatus.TERMINATED)


class Portfolio(PortfolioInterface):
    """Strategy rows of ``strategy_name`` shown in the workspace ``workspace_name``.

    ``max_portfolios`` caps the shared portfolio number; None means no cap.
    """

    def __init__(
        self,
        workspace_name: str,
        strategy_name: str,
        config: str,
        strategy_action: Optional[StrategyAction] = None,
        post: Optional[Post] = None,
        max_portfolios: Optional[int] = None,
    ) -> None:
        super().__init__(f"{workspace_name}[{strategy_name}]", strategy_name, config, strategy_action, post)
        self.workspace_name = workspace_name
        self.max_portfolios = max_portfolios
        self.multiple_selection_count = 0
        self.status = PortfolioStatus()
        self._scanner_queue: deque[StrategyRow] = deque()

    def _check_capacity(self) -> None:
        if self.max_portfolios is not None and PortfolioInterface.portfolio_number >= self.max_portfolios:
            raise RuntimeError(f"portfolio limit reached: {self.max_portfolios}")

    def append_strategy(self) -> StrategyRow:
        """Add a new inactive row holding a copy of the current parameters."""
        self._check_capacity()
        parameters = snapshot_parameters(self.param_list)
        row = StrategyRow(pf=self._next_pf(), status=StrategyStatus.INACTIVE, parameters=parameters)
        self.strategy_list.append(row)
        return row

    def add_scanner_portfolio(self, parameters: Mapping[str, ParameterInfo]) -> StrategyRow:
        """Queue a row created by a scanner; it is added by ``process_pending``."""
        params: dict[str, ParameterInfo] = copy.deepcopy(dict(parameters))
        row = StrategyRow(pf=self._next_pf(), status=StrategyStatus.INACTIVE, parameters=params)
        self._scanner_queue.append(row)
        return row

    def process_pending(self) -> bool:
        """Add at most one queued scanner row; True if one was added."""
        try:
            row = self._scanner_queue.popleft()
        except IndexError:
            return False
        self.strategy_list.append(row)
        return True

    def toggle_selection(self, row: StrategyRow, extend: bool) -> bool:
        """Flip the selection of ``row``; without ``extend`` others are cleared first."""
        if not extend:
            self.reset_selection()
            self.multiple_selection_count = 0
        row.selected = not row.selected
        self.multiple_selection_count += 1 if row.selected else -1
        return row.selected

    def reset_selection(self) -> None:
        for row in self.strategy_list:
            row.selected = False

    def remove_selection(self) -> int:
        """Remove selected rows that are inactive or terminated; returns how many."""
        before = len(self.strategy_list)
        self.strategy_list = [
            row for row in self.strategy_list if not (row.selected and row.status in _REMOVABLE)
        ]
        return before - len(self.strategy_list)

    def delete_selected(self, index: int) -> int:
        """Delete the selection, or with a single selection the row at ``index``.

        With one row deleted, the selection moves to the following row, or to
        the previous one at the end of the list. Returns how many rows went.
        """
        if self.multiple_selection_count <= 0:
            return 0
        if self.multiple_selection_count > 1:
            removed = self.remove_selection()
            self.multiple_selection_count = 0
            return removed
        if not 0 <= index < len(self.strategy_list):
            raise IndexError(f"no strategy row at index {index}")
        del self.strategy_list[index]
        if index < len(self.strategy_list):
            self.strategy_list[index].selected = True
        elif self.strategy_list:
            self.strategy_list[-1].selected = True
        else:
            self.multiple_selection_count = 0
        return 1

    def modify_global_param(self) -> int:
        """Apply every global parameter marked for update; returns how many."""
        count = 0
        for info in self.global_param_list:
            if info.update:
                self.update_all(info)
                count += 1
        return count

    def close(self) -> PortfolioStatus:
        """Try to close the tab; it stays open while any row is still running."""
        self.status = self.check_any_active()
        self.open = self.status.close
        return self.status

    def closed(self) -> bool:
        return not self.open