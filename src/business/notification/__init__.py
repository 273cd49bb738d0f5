"""
Notification System - 通知系统

推送渠道：
- channels: 桌面通知、日志
- create_channel: 按名称创建渠道
"""

from src.business.notification.channels import (
    DesktopChannel,
    LogChannel,
    NotificationChannel,
    SendResult,
    SendStatus,
)
from src.business.notification.factory import create_channel

__all__ = [
    "DesktopChannel",
    "LogChannel",
    "NotificationChannel",
    "SendResult",
    "SendStatus",
    "create_channel",
]
