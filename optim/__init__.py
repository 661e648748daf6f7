# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Trellis — Optimizers & Learning-Rate Schedules                      ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""trellis.optim — Optimizers and LR schedulers."""
from __future__ import annotations

from .optimizer import Optimizer, SGD, Adam, AdamW, Adagrad, RMSprop
from .lr_scheduler import LearningRateController
from . import lr_scheduler

__all__ = ['Optimizer', 'SGD', 'Adam', 'AdamW', 'Adagrad', 'RMSprop',
           'LearningRateController', 'lr_scheduler']
