"""Headless-safe plotting of training curves."""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping, Tuple


class PlotAdapter:
    """Collect per-epoch losses and optionally emit a matplotlib figure on ``close``."""

    def __init__(
        self,
        run_dir: str | Path,
        enable_plots: bool = False,
        *,
        split: str = "train",
        metric: str = "loss",
    ) -> None:
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self.split = split
        self.metric = metric
        self.history: List[Tuple[int, float]] = []
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if self.metric not in metrics:
            return
        self.history.append((int(epoch), float(metrics[self.metric])))

    def close(self) -> Path | None:
        if not self.enable_plots or not self.history:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        epochs, values = zip(*self.history)
        fig, ax = plt.subplots()
        ax.plot(epochs, values)
        ax.set_xlabel("Epoch")
        ax.set_ylabel(self.metric.capitalize())
        ax.set_title(f"{self.split.capitalize()} curve")
        plot_path = self.run_dir / f"{self.split}_{self.metric}.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path

    __call__ = on_epoch


__all__ = ["PlotAdapter"]
