# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Trellis — Optimizers & Learning-Rate Schedules                      ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Learning rate schedulers.

A scheduler drives any object with a read/write ``learning_rate``
attribute (a :class:`LearningRateController`), normally one of the
optimizers in :mod:`trellis.optim`.  Call :meth:`LRScheduler.step` once
per epoch.

``last_epoch`` is the index of the last epoch on which decay applies.
The default ``-1`` means "unbounded"; in that mode every ``step()``
writes the learning rate captured at construction back to the
controller, so the rate never decays and outside changes are undone.
"""
from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from ..utils.log import get_logger

logger = logging.getLogger(__name__)

UNBOUNDED = -1


def _check_step_size(step_size):
    if isinstance(step_size, bool) or not isinstance(step_size, int) \
            or step_size <= 0:
        raise ValueError(
            f"step_size must be a positive integer, got {step_size!r}")


@runtime_checkable
class LearningRateController(Protocol):
    """Anything exposing a mutable scalar learning rate."""

    learning_rate: float


class LRScheduler:
    """Base class for learning rate schedulers.

    With ``verbose=True`` every update is logged at INFO level.  If the
    ``trellis`` loggers are not yet enabled for INFO, construction calls
    :func:`trellis.utils.get_logger` so the messages reach stdout.
    """

    _state_keys: tuple[str, ...] = (
        'epoch', 'initial_lr', 'gamma', 'last_epoch', 'verbose')

    def __init__(self, optimizer: LearningRateController, gamma: float = 0.1,
                 last_epoch: int = UNBOUNDED, verbose: bool = False):
        if optimizer is None:
            raise ValueError("optimizer must not be None")
        self.optimizer = optimizer
        self.initial_lr: float = optimizer.learning_rate
        self.gamma = gamma
        self.last_epoch = last_epoch
        self.verbose = verbose
        self.epoch = 0
        if verbose and not logger.isEnabledFor(logging.INFO):
            get_logger(level=logging.INFO)

    @property
    def learning_rate(self) -> float:
        """The controller's current learning rate."""
        return self.optimizer.learning_rate

    def get_last_lr(self) -> list[float]:
        return [self.optimizer.learning_rate]

    def step(self):
        raise NotImplementedError

    def _set_lr(self, lr: float):
        self.optimizer.learning_rate = lr
        if self.verbose:
            logger.info("Learning rate updated to: %s", lr)

    def _decay(self):
        self._set_lr(self.optimizer.learning_rate * self.gamma)

    # ---- Checkpointing ----

    def state_dict(self) -> dict:
        """Return every scheduler field except the controller."""
        return {k: getattr(self, k) for k in self._state_keys}

    def load_state_dict(self, state_dict: dict):
        """Restore fields saved by :meth:`state_dict` of the same scheduler type."""
        keys = set(state_dict)
        expected = set(self._state_keys)
        if keys != expected:
            unknown = sorted(keys - expected)
            missing = sorted(expected - keys)
            raise ValueError(
                f"{type(self).__name__} state dict mismatch: "
                f"unknown keys {unknown}, missing keys {missing}")
        self._validate_state(state_dict)
        for k in self._state_keys:
            setattr(self, k, state_dict[k])

    def _validate_state(self, state_dict: dict):
        epoch = state_dict['epoch']
        if isinstance(epoch, bool) or not isinstance(epoch, int) or epoch < 0:
            raise ValueError(f"epoch must be a non-negative integer, got {epoch!r}")

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(epoch={self.epoch}, "
                f"gamma={self.gamma}, last_epoch={self.last_epoch}, "
                f"lr={self.learning_rate})")


class StepLR(LRScheduler):
    """Decay LR by gamma every step_size epochs, up to ``last_epoch``."""

    _state_keys = LRScheduler._state_keys + ('step_size',)

    def __init__(self, optimizer: LearningRateController, step_size: int,
                 gamma: float = 0.1, last_epoch: int = UNBOUNDED,
                 verbose: bool = False):
        _check_step_size(step_size)
        super().__init__(optimizer, gamma=gamma, last_epoch=last_epoch,
                         verbose=verbose)
        self.step_size = step_size

    def _validate_state(self, state_dict: dict):
        super()._validate_state(state_dict)
        _check_step_size(state_dict['step_size'])

    def step(self):
        self.epoch += 1

        if self.last_epoch == UNBOUNDED:
            self._set_lr(self.initial_lr)
        elif self.epoch % self.step_size == 0 and self.epoch <= self.last_epoch:
            self._decay()


class ExponentialLR(LRScheduler):
    """Decay LR by gamma every epoch, up to ``last_epoch``."""

    def step(self):
        self.epoch += 1

        if self.last_epoch == UNBOUNDED:
            self._set_lr(self.initial_lr)
        elif self.epoch <= self.last_epoch:
            self._decay()
