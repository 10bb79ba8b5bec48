"""Admin: text-command adapter for the administrative command bus."""

from pgn_mule.admin.commands import CommandHandler

__all__ = ["CommandHandler"]
