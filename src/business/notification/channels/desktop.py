"""
Desktop Channel - 桌面通知渠道

通过系统自带命令弹出桌面通知：
- Linux: notify-send (libnotify)
- macOS: osascript
"""

import logging
import shutil
import subprocess
import sys
from typing import Optional

from src.business.notification.channels.base import NotificationChannel, SendResult

logger = logging.getLogger(__name__)


class DesktopChannel(NotificationChannel):
    """桌面通知渠道

    Usage:
        channel = DesktopChannel()
        result = channel.send("📉 AAPL Down", "AAPL has dropped 6.25% today")
    """

    def __init__(
        self,
        enabled: bool = True,
        app_name: str = "Trading 212 Monitor",
        timeout: float = 10.0,
        min_interval: float = 0.5,
        platform: Optional[str] = None,
    ) -> None:
        """初始化桌面通知渠道

        Args:
            enabled: False 时静默丢弃消息（返回 SILENCED）
            app_name: 通知来源名称
            timeout: 调用系统命令的超时（秒）
            min_interval: 两次通知之间的最小间隔（秒）
            platform: 覆盖 sys.platform（测试用）
        """
        super().__init__(enabled=enabled, min_interval=min_interval)
        self.app_name = app_name
        self.timeout = timeout
        self._platform = platform or sys.platform

    @property
    def name(self) -> str:
        return "desktop"

    @property
    def is_available(self) -> bool:
        return self._command_name() is not None

    def _command_name(self) -> Optional[str]:
        """当前平台可用的通知命令"""
        if self._platform.startswith("linux"):
            return "notify-send" if shutil.which("notify-send") else None
        if self._platform == "darwin":
            return "osascript" if shutil.which("osascript") else None
        return None

    def _build_command(self, title: str, content: str) -> list[str]:
        if self._platform == "darwin":
            script = (
                f"display notification {_applescript_quote(content)} "
                f"with title {_applescript_quote(title)} "
                f"subtitle {_applescript_quote(self.app_name)}"
            )
            return ["osascript", "-e", script]
        return ["notify-send", "--app-name", self.app_name, title, content]

    def _deliver(self, title: str, content: str) -> SendResult:
        """调用系统命令弹出桌面通知"""
        if not self.is_available:
            return SendResult.failed(f"No desktop notification command on {self._platform}")

        command = self._build_command(title, content)
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return SendResult.failed("Notification command timed out")
        except OSError as e:
            logger.error(f"Desktop notification failed: {e}")
            return SendResult.failed(str(e))

        if completed.returncode != 0:
            return SendResult.failed(
                f"{command[0]} exited with {completed.returncode}",
                stderr=(completed.stderr or "")[:500],
            )

        return SendResult.delivered()


def _applescript_quote(text: str) -> str:
    """转义为 AppleScript 字符串字面量"""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
