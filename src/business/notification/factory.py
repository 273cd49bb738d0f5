"""
Channel Factory - 通知渠道工厂

根据配置名称创建通知渠道。
"""

import logging

from src.business.notification.channels import (
    DesktopChannel,
    LogChannel,
    NotificationChannel,
)

logger = logging.getLogger(__name__)

CHANNEL_NAMES = ("desktop", "log", "auto")


def create_channel(name: str = "auto", enabled: bool = True) -> NotificationChannel:
    """创建通知渠道

    Args:
        name: "desktop" / "log" / "auto"（有桌面命令时用桌面，否则用日志）
        enabled: 渠道是否启用，False 时 send() 返回 SILENCED

    Returns:
        NotificationChannel

    Raises:
        ValueError: 未知渠道名称
    """
    if name not in CHANNEL_NAMES:
        raise ValueError(f"Unknown notification channel: {name}. Use one of {CHANNEL_NAMES}")

    if name == "log":
        return LogChannel(enabled=enabled)

    desktop = DesktopChannel(enabled=enabled)
    if name == "desktop" or desktop.is_available:
        return desktop

    logger.info("No desktop notification command found, falling back to log channel")
    return LogChannel(enabled=enabled)
