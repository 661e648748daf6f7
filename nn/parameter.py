# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Trellis — Optimizers & Learning-Rate Schedules                      ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""nn.Parameter — learnable NumPy array with a gradient slot."""
from __future__ import annotations

from typing import Any

import numpy as np


class Parameter:
    """A learnable array that optimizers update in place.

    The parameter owns a private copy of ``data``.  Gradients are
    supplied by the caller (there is no autograd engine here) and must
    match the parameter's shape.
    """

    __slots__ = ('_data', '_grad', '_requires_grad', '_version')

    def __init__(self, data: Any = None, dtype: np.dtype | None = None,
                 requires_grad: bool = True):
        if data is None:
            arr = np.empty(0, dtype=np.float32)
        elif isinstance(data, Parameter):
            arr = data._data.copy()
        else:
            arr = np.array(data, copy=True)
        if dtype is not None:
            arr = arr.astype(dtype)
        elif not np.issubdtype(arr.dtype, np.floating):
            arr = arr.astype(np.float32)

        self._data: np.ndarray = arr
        self._grad: np.ndarray | None = None
        self._requires_grad: bool = requires_grad
        self._version: int = 0

    # ------------------------------------------------------------------ #
    #  Properties                                                        #
    # ------------------------------------------------------------------ #

    @property
    def data(self) -> np.ndarray:
        return self._data

    @data.setter
    def data(self, value):
        arr = np.asarray(value, dtype=self._data.dtype)
        if arr.shape != self._data.shape:
            raise ValueError(
                f"data shape {arr.shape} does not match parameter shape "
                f"{self._data.shape}")
        self._data = arr.copy()
        self._version += 1

    @property
    def grad(self) -> np.ndarray | None:
        return self._grad

    @grad.setter
    def grad(self, value):
        if value is None:
            self._grad = None
            return
        g = np.asarray(value, dtype=self._data.dtype)
        if g.shape != self._data.shape:
            raise ValueError(
                f"grad shape {g.shape} does not match parameter shape "
                f"{self._data.shape}")
        self._grad = g

    @property
    def requires_grad(self) -> bool:
        return self._requires_grad

    @requires_grad.setter
    def requires_grad(self, val: bool):
        self._requires_grad = val

    @property
    def shape(self) -> tuple:
        return self._data.shape

    @property
    def ndim(self) -> int:
        return self._data.ndim

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    def numel(self) -> int:
        return int(self._data.size)

    def zero_grad(self, set_to_none: bool = True):
        if set_to_none:
            self._grad = None
        elif self._grad is not None:
            self._grad = np.zeros_like(self._data)

    def numpy(self) -> np.ndarray:
        """Return a copy of the parameter values."""
        return self._data.copy()

    def __repr__(self) -> str:
        return f"Parameter containing:\n{self._data!r}"
