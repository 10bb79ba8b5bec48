"""Notifications: operator-facing messages ("say")."""

from pgn_mule.notifications.channels import (
    LogNotifier,
    Notifier,
    ZulipNotifier,
    create_notifier,
)

__all__ = ["LogNotifier", "Notifier", "ZulipNotifier", "create_notifier"]
