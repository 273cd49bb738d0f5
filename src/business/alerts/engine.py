"""
Alert Engine - 预警引擎

根据日涨跌幅和多日趋势判断是否触发预警，并按自然日去重。

规则:
- 去重键为 (ticker, kind, day)，状态只会从"未触发"变为"已触发"
- 去重集合只存在于进程内存中，进程重启即清空
- 每条新预警都会返回给调用方并推送到通知渠道；推送失败只记录日志，
  不撤回预警也不影响后续预警
"""

import logging
from typing import Callable, Iterable, Optional

from src.business.alerts.models import AlertEvent, AlertKind, alert_key
from src.business.notification.channels.base import NotificationChannel
from src.engine.models.performance import EnrichedPosition, TrendDirection, TrendResult

logger = logging.getLogger(__name__)

AlertCallback = Callable[[list[AlertEvent]], None]


class AlertEngine:
    """预警引擎

    Usage:
        engine = AlertEngine(channel=DesktopChannel())
        events = engine.check_daily_alerts(enriched, -5.0, 10.0, "2024-03-15")
        events += engine.check_trend_alerts(trends, "2024-03-15")
    """

    def __init__(
        self,
        channel: Optional[NotificationChannel] = None,
        on_alerts: Optional[AlertCallback] = None,
    ) -> None:
        """初始化预警引擎

        Args:
            channel: 通知渠道，None 表示不推送
            on_alerts: 每批非空预警的回调（例如界面刷新）
        """
        self._channel = channel
        self._on_alerts = on_alerts
        self._triggered: set[str] = set()

    @property
    def channel(self) -> Optional[NotificationChannel]:
        return self._channel

    # ==========================================================================
    # 预警检查
    # ==========================================================================

    def check_daily_alerts(
        self,
        enriched: Iterable[EnrichedPosition],
        loss_threshold: Optional[float],
        gain_threshold: Optional[float],
        today: str,
    ) -> list[AlertEvent]:
        """检查日涨跌幅预警

        Args:
            enriched: 带日涨跌数据的持仓
            loss_threshold: 跌幅阈值（负数，如 -5），None 表示关闭
            gain_threshold: 涨幅阈值（正数，如 10），None 表示关闭
            today: 当日日期 (YYYY-MM-DD)

        Returns:
            本次新触发的预警
        """
        events: list[AlertEvent] = []

        for position in enriched:
            if not position.has_previous_data:
                continue

            pct = position.daily_change_percent
            short = position.short_ticker

            if loss_threshold is not None and pct <= loss_threshold:
                event = self._trigger(
                    AlertKind.DAILY_LOSS,
                    position.ticker,
                    today,
                    lambda: AlertEvent(
                        kind=AlertKind.DAILY_LOSS,
                        ticker=position.ticker,
                        short_ticker=short,
                        day=today,
                        change_percent=pct,
                        threshold=loss_threshold,
                        current_price=position.current_price,
                        title=f"📉 {short} Down",
                        message=f"{short} is down {pct:.2f}% today",
                        body=f"{short} has dropped {abs(pct):.2f}% today",
                    ),
                )
                if event:
                    events.append(event)

            if gain_threshold is not None and pct >= gain_threshold:
                event = self._trigger(
                    AlertKind.DAILY_GAIN,
                    position.ticker,
                    today,
                    lambda: AlertEvent(
                        kind=AlertKind.DAILY_GAIN,
                        ticker=position.ticker,
                        short_ticker=short,
                        day=today,
                        change_percent=pct,
                        threshold=gain_threshold,
                        current_price=position.current_price,
                        title=f"📈 {short} Up",
                        message=f"{short} is up {pct:.2f}% today",
                        body=f"{short} has gained {pct:.2f}% today",
                    ),
                )
                if event:
                    events.append(event)

        self._publish(events)
        return events

    def check_trend_alerts(
        self,
        trends: Iterable[TrendResult],
        today: str,
    ) -> list[AlertEvent]:
        """检查多日趋势预警

        Args:
            trends: 趋势检测结果
            today: 当日日期 (YYYY-MM-DD)

        Returns:
            本次新触发的预警
        """
        events: list[AlertEvent] = []

        for trend in trends:
            if trend.direction == TrendDirection.DOWN:
                kind = AlertKind.DOWNTREND
                title = f"⚠️ {trend.short_ticker} Downtrend"
                message = (
                    f"{trend.short_ticker} has dropped "
                    f"{abs(trend.change_percent):.2f}% over {trend.days} days"
                )
                body = f"Down {abs(trend.change_percent):.2f}% over {trend.days} days"
            else:
                kind = AlertKind.UPTREND
                title = f"🚀 {trend.short_ticker} Uptrend"
                message = (
                    f"{trend.short_ticker} has risen "
                    f"{trend.change_percent:.2f}% over {trend.days} days"
                )
                body = f"Up {trend.change_percent:.2f}% over {trend.days} days"

            event = self._trigger(
                kind,
                trend.ticker,
                today,
                lambda: AlertEvent(
                    kind=kind,
                    ticker=trend.ticker,
                    short_ticker=trend.short_ticker,
                    day=today,
                    change_percent=trend.change_percent,
                    current_price=trend.end_price,
                    days=trend.days,
                    title=title,
                    message=message,
                    body=body,
                ),
            )
            if event:
                events.append(event)

        self._publish(events)
        return events

    # ==========================================================================
    # 去重状态管理
    # ==========================================================================

    def is_triggered(self, ticker: str, kind: AlertKind, day: str) -> bool:
        """该 (ticker, kind, day) 是否已触发过"""
        return alert_key(ticker, kind, day) in self._triggered

    def reset_day(self, today: str) -> int:
        """清除指定日期的去重记录，允许当日预警再次触发

        Returns:
            清除的记录数
        """
        suffix = f":{today}"
        cleared = {key for key in self._triggered if key.endswith(suffix)}
        self._triggered -= cleared
        logger.info(f"Cleared {len(cleared)} alert keys for {today}")
        return len(cleared)

    def reset_all(self) -> None:
        """清除全部去重记录"""
        self._triggered.clear()

    def __len__(self) -> int:
        return len(self._triggered)

    # ==========================================================================
    # 内部方法
    # ==========================================================================

    def _trigger(
        self,
        kind: AlertKind,
        ticker: str,
        day: str,
        build: Callable[[], AlertEvent],
    ) -> Optional[AlertEvent]:
        """未触发时标记并构造事件，已触发返回 None"""
        key = alert_key(ticker, kind, day)
        if key in self._triggered:
            return None
        self._triggered.add(key)
        event = build()
        logger.info(f"Alert triggered: {event.message}")
        return event

    def _publish(self, events: list[AlertEvent]) -> None:
        """推送通知并调用回调"""
        if not events:
            return

        for event in events:
            self._notify(event)

        if self._on_alerts is not None:
            try:
                self._on_alerts(list(events))
            except Exception as e:
                logger.error(f"Alert callback failed: {e}")

    def _notify(self, event: AlertEvent) -> None:
        """推送单条通知，失败只记录日志"""
        if self._channel is None:
            return

        try:
            result = self._channel.send(title=event.title, content=event.body)
        except Exception as e:
            logger.warning(f"Notification via {self._channel.name} raised: {e}")
            return

        if not result.is_success and not result.is_silenced:
            logger.warning(
                f"Notification via {self._channel.name} not delivered "
                f"({result.status.value}): {result.error}"
            )
