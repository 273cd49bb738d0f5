"""
CLI Commands - 命令行子命令
"""

from src.business.cli.commands.history import history
from src.business.cli.commands.notify import notify
from src.business.cli.commands.refresh import refresh
from src.business.cli.commands.trends import trends
from src.business.cli.commands.watch import watch

__all__ = ["history", "notify", "refresh", "trends", "watch"]
