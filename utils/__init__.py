# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Trellis — Optimizers & Learning-Rate Schedules                      ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""trellis.utils — Utility modules."""
from __future__ import annotations

from . import log
from .log import get_logger

__all__ = ['log', 'get_logger']
