"""Per-epoch metric sinks usable as trainer callbacks."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Mapping

from ..core.types import EpochReport, RunResult


class _SplitSink:
    """File-backed sink that keeps the reports of a single split."""

    def __init__(self, path: str | Path, split: str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.split = split

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.write(EpochReport(int(epoch), self.split, metrics))

    __call__ = on_epoch

    def write_history(self, result: RunResult) -> Path:
        """Write every report of this sink's split from a finished run."""

        for report in result.history:
            if report.split == self.split:
                self.write(report)
        return self.path

    def write(self, report: EpochReport) -> None:
        raise NotImplementedError


class JsonlSink(_SplitSink):
    """Append-only JSONL writer; each line carries the run ``seed``."""

    def __init__(
        self,
        path: str | Path,
        *,
        split: str = "train",
        seed: int | None = None,
    ) -> None:
        super().__init__(path, split)
        self.path.write_text("")
        self.seed = seed

    def write(self, report: EpochReport) -> None:
        record = report.record()
        record["seed"] = self.seed
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")


class CsvSink(_SplitSink):
    """CSV writer whose columns are fixed by the first report written."""

    def __init__(self, path: str | Path, *, split: str = "train") -> None:
        super().__init__(path, split)
        self.fieldnames: list[str] | None = None

    def write(self, report: EpochReport) -> None:
        row = report.record()
        if self.fieldnames is None:
            self.fieldnames = ["epoch", "split"] + sorted(k for k in row if k not in ("epoch", "split"))
            self.path.write_text("")
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=self.fieldnames, extrasaction="ignore")
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(row)


__all__ = ["JsonlSink", "CsvSink"]
