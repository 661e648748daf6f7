# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Trellis — Optimizers & Learning-Rate Schedules                      ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""trellis.nn — Learnable parameters and gradient utilities."""
from __future__ import annotations

from .parameter import Parameter

# Utils (nn.utils.clip_grad_norm_)
from . import utils

__all__ = ['Parameter', 'utils']
