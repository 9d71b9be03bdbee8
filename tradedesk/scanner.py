"""Scanner formulas built from selected functions, saved per portfolio."""

from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

PathLike = Union[str, "os.PathLike[str]"]


@dataclass
class ScannerFunction:
    """A scanner function that can be bound to a one-letter variable."""

    variable: str
    name: str
    selected: bool = False


@dataclass
class SavedScanner:
    """A named, fully expanded scanner expression."""

    unique_id: int
    name: str
    expanded_equation: str
    applied: bool = False


class PortfolioScanner:
    """Builds, stores, exports and imports scanner formulas of one strategy.

    ``function_names`` are bound to the variables A, B, C, ... in order.
    ``parameters`` maps a parameter id to its name, as stored for the
    strategy; ``strategy_id`` is None while the strategy is unknown.
    """

    def __init__(
        self,
        strategy_name: str,
        function_names: Iterable[str],
        strategy_id: Optional[int] = None,
        parameters: Optional[Mapping[int, str]] = None,
    ) -> None:
        self.strategy_name = strategy_name
        self.strategy_id = strategy_id
        self.parameters: dict[int, str] = dict(parameters or {})
        self.functions = [
            ScannerFunction(variable=chr(ord("A") + offset), name=name)
            for offset, name in enumerate(function_names)
        ]
        self.saved: list[SavedScanner] = []
        self.unfolded_formula = ""

    def has_parameter(self) -> bool:
        """True when the strategy has at least one parameter to report."""
        return bool(self.parameters)

    @property
    def ready(self) -> bool:
        """True when the scanner window can be shown for this strategy."""
        return self.has_parameter() and self.strategy_id is not None

    def selected_functions(self) -> list[ScannerFunction]:
        return [function for function in self.functions if function.selected]

    def create_formula(
        self,
        equations: str,
        name: str,
        selected_param: int = 0,
        unique_id: Optional[int] = None,
    ) -> SavedScanner:
        """Expand ``equations`` over the selected functions and save it."""
        if not name:
            raise ValueError("formula name must not be empty")
        if self.strategy_id is None:
            raise RuntimeError(f"strategy not found: {self.strategy_name}")
        if unique_id is None:
            unique_id = int(time.time())

        parts = [f"var {function.variable} := {function.name}(token_);" for function in self.selected_functions()]
        parts.append(
            f"var output := if(({equations}), ScannerAPI({unique_id}, {self.strategy_id}, {selected_param}, token_), 0);\n"
        )
        parts.append("output")
        self.unfolded_formula = "".join(parts)

        item = SavedScanner(unique_id=unique_id, name=name, expanded_equation=self.unfolded_formula)
        self.saved.append(item)
        return item

    def delete(self, index: int) -> SavedScanner:
        """Remove and return the saved scanner at ``index``."""
        if not 0 <= index < len(self.saved):
            raise IndexError(f"no saved scanner at index {index}")
        return self.saved.pop(index)

    def export(self, path: PathLike) -> bool:
        """Write the saved scanners as JSON; with none saved, delete the file.

        Returns True when a file was written.
        """
        target = Path(path)
        if not self.saved:
            target.unlink(missing_ok=True)
            return False
        root = [
            {"ExpandedEquation": item.expanded_equation, "ID": item.unique_id, "Name": item.name}
            for item in self.saved
        ]
        try:
            target.write_text(json.dumps(root, separators=(",", ":"), ensure_ascii=False), encoding="utf-8")
        except OSError:
            return False
        return True

    def import_file(self, path: PathLike) -> int:
        """Append the scanners stored at ``path``; returns how many were read.

        A missing file imports nothing.
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError:
            return 0
        root = json.loads(text)
        values = root.values() if isinstance(root, dict) else root
        count = 0
        for value in values:
            self.saved.append(
                SavedScanner(
                    unique_id=int(value["ID"]),
                    name=str(value["Name"]),
                    expanded_equation=str(value["ExpandedEquation"]),
                )
            )
            count += 1
        return count