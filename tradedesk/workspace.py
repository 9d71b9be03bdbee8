"""Workspaces: named portfolios, each running one strategy."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Callable, Optional, Union

from .portfolio import Portfolio

PathLike = Union[str, "os.PathLike[str]"]
PortfolioFactory = Callable[[str, str], Portfolio]


class StrategyWorkspace:
    """Named portfolios, saved as a JSON map of workspace name to strategy.

    When ``config_path`` is given the map is loaded from it at start and
    written back after every change. When ``save_dir`` is given, removing a
    workspace also deletes the saved rows of its portfolio there.
    """

    def __init__(
        self,
        factory: PortfolioFactory,
        config_path: Optional[PathLike] = None,
        save_dir: Optional[PathLike] = None,
    ) -> None:
        self._factory = factory
        self.config_path = Path(config_path) if config_path is not None else None
        self.save_dir = Path(save_dir) if save_dir is not None else None
        self.portfolios: dict[str, Portfolio] = {}
        if self.config_path is not None:
            self.import_file(self.config_path)

    def _save(self) -> None:
        if self.config_path is not None:
            self.export(self.config_path)

    def add_workspace(self, name: str, strategy: str) -> Portfolio:
        """Create the workspace ``name``; an existing one is kept as it is."""
        if not name:
            raise ValueError("workspace name must not be empty")
        portfolio = self.portfolios.get(name)
        if portfolio is None:
            portfolio = self._factory(name, strategy)
            self.portfolios[name] = portfolio
        self._save()
        return portfolio

    def remove_workspace(self, name: str) -> Portfolio:
        """Remove and return the workspace ``name``."""
        portfolio = self.portfolios.pop(name)
        self._save()
        if self.save_dir is not None:
            (self.save_dir / f"{portfolio.name}.json").unlink(missing_ok=True)
        return portfolio

    def names(self) -> list[str]:
        return list(self.portfolios)

    def export(self, path: PathLike) -> bool:
        """Write the workspace map; with no workspaces, delete the file.

        Returns True when a file was written.
        """
        target = Path(path)
        if not self.portfolios:
            target.unlink(missing_ok=True)
            return False
        root = {name: portfolio.strategy_name for name, portfolio in self.portfolios.items()}
        try:
            target.write_text(json.dumps(root, separators=(",", ":"), ensure_ascii=False), encoding="utf-8")
        except OSError:
            return False
        return True

    def import_file(self, path: PathLike) -> int:
        """Create the workspaces listed at ``path``; returns how many were read.

        A missing file imports nothing; existing workspaces are kept.
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError:
            return 0
        root = json.loads(text)
        for name, strategy in root.items():
            if name not in self.portfolios:
                self.portfolios[name] = self._factory(name, str(strategy))
        return len(root)