"""Service layer for samplepush.

Provides the service that orchestrates a push run.
"""

from __future__ import annotations

from .push import PushService

__all__ = ["PushService"]
