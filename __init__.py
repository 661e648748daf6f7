# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Trellis — Optimizers & Learning-Rate Schedules                      ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""
Trellis — NumPy optimizers and learning-rate schedules with a torch-style API.

Usage::

    import numpy as np
    import trellis.nn as nn
    import trellis.optim as optim
    from trellis.optim.lr_scheduler import StepLR

    w = nn.Parameter(np.zeros(4))
    optimizer = optim.SGD([w], lr=0.1, momentum=0.9)
    scheduler = StepLR(optimizer, step_size=10, gamma=0.5, last_epoch=100)

    for epoch in range(100):
        optimizer.zero_grad()
        w.grad = compute_gradient(w.data)
        optimizer.step()
        scheduler.step()
"""
from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Pictofeed, LLC"

# ── Sub-packages ──
from . import nn
from . import optim
from . import utils

from .nn import Parameter

__all__ = [
    "__version__",
    "__author__",
    'Parameter',
    'nn', 'optim', 'utils',
]
