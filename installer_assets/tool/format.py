"""Library for formatting the dependency graph of a target."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import sys
from typing import Generator, TextIO

import yaml

from installer_assets.asset import Asset

PADDING = 4
NO_DEPENDENCIES = "-"


@dataclass(frozen=True)
class GraphEntry:
    """An asset and the names of its direct dependencies."""

    name: str
    dependencies: tuple[str, ...]

    @classmethod
    def from_asset_type(cls, asset_type: type[Asset]) -> "GraphEntry":
        asset = asset_type()
        return cls(
            name=asset.name(),
            dependencies=tuple(dep().name() for dep in asset.dependencies()),
        )


def align_columns(rows: Sequence[Sequence[str]]) -> Generator[str, None, None]:
    """Yield the rows with every column padded to its widest value."""
    if not rows or not rows[0]:
        return
    widths = [max(len(row[i]) for row in rows) + PADDING for i in range(len(rows[0]))]
    for row in rows:
        yield "".join(value.ljust(width) for value, width in zip(row, widths)).rstrip()


class TableFormatter:
    """Prints graph entries as human readable columns."""

    HEADERS = ("NAME", "DEPENDENCIES")

    def format(self, entries: Iterable[GraphEntry]) -> Generator[str, None, None]:
        rows = [
            (entry.name, ", ".join(entry.dependencies) or NO_DEPENDENCIES)
            for entry in entries
        ]
        if not rows:
            return
        yield from align_columns([self.HEADERS, *rows])

    def print(
        self, entries: Iterable[GraphEntry], file: TextIO | None = None
    ) -> None:
        for line in self.format(entries):
            print(line, file=file or sys.stdout)


class YamlFormatter:
    """Prints graph entries as a yaml list."""

    def print(
        self, entries: Iterable[GraphEntry], file: TextIO | None = None
    ) -> None:
        data = [
            {"name": entry.name, "dependencies": list(entry.dependencies)}
            for entry in entries
        ]
        print(
            yaml.dump(data, sort_keys=False, explicit_start=True),
            end="",
            file=file or sys.stdout,
        )
