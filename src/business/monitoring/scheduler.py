"""
Polling Scheduler - 定时轮询调度

按固定间隔执行刷新周期，并支持手动触发立即刷新。

手动请求只会唤醒等待中的调度循环，不会打断正在执行的周期，也不会排队。
"""

import logging
import threading
from typing import Callable, Optional

from src.business.monitoring.portfolio_monitor import PortfolioMonitor, RefreshResult

logger = logging.getLogger(__name__)

ResultHandler = Callable[[RefreshResult], None]


class PollingScheduler:
    """定时轮询调度器

    Usage:
        scheduler = PollingScheduler(monitor, interval_seconds=3600, on_result=render)
        signal.signal(signal.SIGUSR1, lambda *_: scheduler.request_refresh())
        scheduler.run()
    """

    def __init__(
        self,
        monitor: PortfolioMonitor,
        interval_seconds: float,
        on_result: Optional[ResultHandler] = None,
    ) -> None:
        """初始化调度器

        Args:
            monitor: 持仓监控器
            interval_seconds: 轮询间隔（秒）
            on_result: 每个周期结束后的回调
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")

        self.monitor = monitor
        self.interval_seconds = interval_seconds
        self.on_result = on_result
        self._wake = threading.Event()
        self._stopped = threading.Event()
        self.cycles = 0

    def request_refresh(self) -> None:
        """请求立即刷新（可在信号处理函数中调用）"""
        logger.info("Manual refresh requested")
        self._wake.set()

    def stop(self) -> None:
        """停止调度循环"""
        self._stopped.set()
        self._wake.set()

    @property
    def is_running(self) -> bool:
        return not self._stopped.is_set()

    def run_once(self) -> RefreshResult:
        """执行一个周期并调用回调

        周期内的任何异常都只记录日志，转换为带 error 的结果，
        保证下一个周期照常执行。
        """
        try:
            result = self.monitor.refresh()
        except Exception as e:
            logger.exception("Refresh cycle failed unexpectedly")
            result = RefreshResult(error=f"Unexpected error: {e!r}")
        self.cycles += 1

        if self.on_result is not None:
            try:
                self.on_result(result)
            except Exception:
                logger.exception("Result handler failed")
        return result

    def wait(self) -> bool:
        """等待下一个周期

        Returns:
            True 表示被手动请求提前唤醒
        """
        woke = self._wake.wait(timeout=self.interval_seconds)
        self._wake.clear()
        return woke

    def run(self, initial: bool = True, max_cycles: Optional[int] = None) -> None:
        """运行调度循环，直到 stop() 或达到 max_cycles

        Args:
            initial: 是否立即执行第一个周期
            max_cycles: 最多执行的周期数（None 表示不限）
        """
        logger.info(f"Starting data polling every {self.interval_seconds:g} seconds")

        if initial and self.is_running:
            self.run_once()

        while self.is_running:
            if max_cycles is not None and self.cycles >= max_cycles:
                break
            self.wait()
            if not self.is_running:
                break
            self.run_once()

        logger.info("Polling stopped")
