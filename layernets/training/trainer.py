"""Mini-batch gradient descent with momentum for constructed networks."""

from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from itertools import islice
from typing import Callable, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

import numpy as np

from ..core.types import Array, EpochReport, GradientBundle, RunResult, Sample
from ..layers.base import child_rng
from ..network.sequential import Network
from .backprop import Backprop, GradientSolver, SampleGradient
from .config import TrainerConfig
from .losses import REGISTRY, Loss
from .metrics import compute_metrics, default_metrics


def add_gradients(total: GradientBundle, other: GradientBundle) -> GradientBundle:
    """Sum ``other`` into ``total`` in place; ``None`` entries contribute nothing."""

    for idx, grad in enumerate(other):
        if grad is None:
            continue
        current = total[idx]
        if current is None:
            total[idx] = {name: np.array(value, dtype=np.float64) for name, value in grad.items()}
            continue
        for name, value in grad.items():
            if name in current:
                current[name] += value
            else:
                current[name] = np.array(value, dtype=np.float64)
    return total


def as_solver(solver: Union[GradientSolver, Loss, str]) -> GradientSolver:
    """Wrap a loss, or the registered name of one, in a :class:`Backprop` solver."""

    if isinstance(solver, str):
        solver = REGISTRY.resolve(solver)
    if isinstance(solver, Loss):
        return Backprop(solver)
    return solver


class MomentumState:
    """Per-layer velocity ``v`` updated as ``v = momentum * v + g``."""

    def __init__(self) -> None:
        self.velocity: GradientBundle = []

    def reset(self, network: Network) -> None:
        self.velocity = network.zero_gradients()

    def update(self, gradients: GradientBundle, momentum: float) -> GradientBundle:
        for idx, grad in enumerate(gradients):
            if grad is None:
                continue
            velocity = self.velocity[idx]
            if velocity is None:
                velocity = self.velocity[idx] = {
                    name: np.zeros_like(value, dtype=np.float64) for name, value in grad.items()
                }
            for name, value in grad.items():
                v = velocity.setdefault(name, np.zeros_like(value, dtype=np.float64))
                v *= momentum
                v += value
        return self.velocity


class BatchedTrainer:
    """Drive a gradient solver over a sample stream in fixed-size batches.

    Options live on :attr:`config` and may be adjusted between runs; they are
    validated at the start of every :meth:`train` call.
    """

    def __init__(
        self,
        config: TrainerConfig | None = None,
        callbacks: Sequence[object] | None = None,
        split_loggers: Mapping[str, Sequence[object]] | None = None,
        **overrides: object,
    ) -> None:
        config = config or TrainerConfig()
        self.config = config.replace(**overrides) if overrides else config
        self.callbacks = list(callbacks or [])
        self.split_loggers = {split: list(items) for split, items in (split_loggers or {}).items()}
        self.momentum = MomentumState()

    def train(
        self,
        solver: Union[GradientSolver, Loss, str],
        network: Network,
        train_data: Iterable[Sample],
        test_data: Iterable[Sample] = (),
        stop: Optional[Callable[[], bool]] = None,
    ) -> RunResult:
        """Train ``network`` in place and return a summary of the run.

        ``train_data`` may be infinite; each epoch pulls ``samples_per_epoch``
        samples from it. A batch cut short by an exhausted stream is
        discarded and the run ends. ``stop`` is polled between batches.
        """

        config = self.config
        config.validate()
        solver = as_solver(solver)

        rng = np.random.default_rng(config.seed)
        self.momentum.reset(network)
        stream = iter(train_data)
        test_samples = list(test_data)
        metric_names = list(config.metrics) or default_metrics(solver.task_type)

        history: List[EpochReport] = []
        batches = 0
        samples = 0
        epochs_done = 0
        stopped = False
        exhausted = False
        executor = ThreadPoolExecutor(max_workers=config.workers) if config.workers > 1 else None
        try:
            for epoch in range(1, config.epoch_count + 1):
                losses: List[float] = []
                remaining = config.samples_per_epoch
                while remaining > 0:
                    if stop is not None and stop():
                        stopped = True
                        break
                    wanted = min(config.batch_size, remaining)
                    batch = list(islice(stream, wanted))
                    if len(batch) < wanted:
                        exhausted = True
                        break
                    batch_gradient, batch_losses = self._accumulate(
                        solver, network, batch, rng, executor
                    )
                    self._apply(network, batch_gradient)
                    losses.extend(batch_losses)
                    batches += 1
                    samples += wanted
                    remaining -= wanted

                if losses:
                    epochs_done = epoch
                    train_metrics = {"loss": float(np.mean(losses))}
                    history.append(EpochReport(epoch, "train", train_metrics))
                    self._emit_epoch("train", epoch, train_metrics)
                    test_metrics = None
                    if test_samples:
                        test_metrics = self.evaluate(solver, network, test_samples, metric_names)
                        history.append(EpochReport(epoch, "test", test_metrics))
                        self._emit_epoch("test", epoch, test_metrics)
                    self._log(epoch, train_metrics, test_metrics)
                if stopped or exhausted:
                    break
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        return RunResult(
            epochs=epochs_done,
            batches=batches,
            samples=samples,
            stopped=stopped,
            history=history,
        )

    def evaluate(
        self,
        solver: Union[GradientSolver, Loss, str],
        network: Network,
        samples: Sequence[Sample],
        metric_names: Sequence[str] = (),
    ) -> Mapping[str, float]:
        """Inference-mode mean loss plus ``metric_names`` over ``samples``."""

        solver = as_solver(solver)
        losses: List[float] = []
        predictions: List[Array] = []
        targets: List[Array] = []
        for inputs, target in samples:
            loss_value, prediction = solver.score(network, inputs, target)
            losses.append(loss_value)
            predictions.append(np.asarray(prediction))
            targets.append(np.asarray(target))
        metrics = {"loss": float(np.mean(losses)) if losses else 0.0}
        if predictions and metric_names:
            metrics.update(compute_metrics(metric_names, np.stack(predictions), np.stack(targets)))
        return metrics

    # ------------------------------------------------------------------
    # Internal helpers

    def _accumulate(
        self,
        solver: GradientSolver,
        network: Network,
        batch: Sequence[Sample],
        rng: np.random.Generator,
        executor: Executor | None,
    ) -> tuple[GradientBundle, List[float]]:
        rngs = [child_rng(rng) for _ in batch]
        if executor is None:
            results: Iterator[SampleGradient] = (
                solver.gradient(network, inputs, target, sample_rng)
                for (inputs, target), sample_rng in zip(batch, rngs)
            )
        else:
            futures = [
                executor.submit(solver.gradient, network, inputs, target, sample_rng)
                for (inputs, target), sample_rng in zip(batch, rngs)
            ]
            results = (future.result() for future in futures)

        total: GradientBundle = [None] * len(network)
        losses: List[float] = []
        for result in results:
            add_gradients(total, result.gradients)
            losses.append(result.loss)
        return total, losses

    def _apply(self, network: Network, batch_gradient: GradientBundle) -> None:
        add_gradients(batch_gradient, network.regularization_gradients())
        velocity = self.momentum.update(batch_gradient, self.config.momentum)
        network.apply_gradients(velocity, self.config.learning_rate)

    def _emit_epoch(self, split: str, epoch: int, metrics: Mapping[str, float]) -> None:
        listeners = list(self.callbacks) + list(self.split_loggers.get(split, []))
        for callback in listeners:
            # Sinks bound to another split ignore this report.
            bound = getattr(callback, "split", None)
            if isinstance(bound, str) and bound != split:
                continue
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)

    def _log(
        self,
        epoch: int,
        train_metrics: Mapping[str, float],
        test_metrics: Mapping[str, float] | None,
    ) -> None:
        every = self.config.log_every
        if not every or epoch % every:
            return
        line = f"Epoch {epoch}, loss: {train_metrics['loss']:.4f}"
        if test_metrics is not None:
            extras = ", ".join(f"{name}: {value:.4f}" for name, value in test_metrics.items())
            line += f" | test {extras}"
        print(line)


__all__ = ["BatchedTrainer", "MomentumState", "add_gradients", "as_solver"]
