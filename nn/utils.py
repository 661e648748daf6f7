# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Trellis — Optimizers & Learning-Rate Schedules                      ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""nn.utils — gradient clipping."""
from __future__ import annotations

import math
import numpy as np

from .parameter import Parameter


def clip_grad_norm_(parameters, max_norm: float,
                    norm_type: float = 2.0) -> float:
    """Clip the total gradient norm of an iterable of parameters in place.

    Returns the total norm before clipping.
    """
    if isinstance(parameters, Parameter):
        parameters = [parameters]
    params = [p for p in parameters if p._grad is not None]
    if not params:
        return 0.0
    max_norm = float(max_norm)
    norm_type = float(norm_type)
    if max_norm < 0.0:
        raise ValueError(f"Invalid max_norm: {max_norm}")

    if norm_type == math.inf:
        total_norm = float(max(np.max(np.abs(p._grad), initial=0.0)
                               for p in params))
    elif norm_type == 2.0:
        total_norm_sq = 0.0
        for p in params:
            g = p._grad.ravel()
            total_norm_sq += float(np.dot(g, g))
        total_norm = math.sqrt(total_norm_sq)
    else:
        total = 0.0
        for p in params:
            total += float(np.sum(np.abs(p._grad) ** norm_type))
        total_norm = total ** (1.0 / norm_type)

    clip_coef = max_norm / (total_norm + 1e-6)
    if clip_coef < 1.0:
        for p in params:
            # New array so a caller's gradient buffer is never mutated.
            p._grad = p._grad * clip_coef

    return total_norm
