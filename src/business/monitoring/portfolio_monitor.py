"""
Portfolio Monitor - 持仓监控刷新流程

一次刷新周期：
1. 拉取持仓和现金（失败则中止，不写任何数据）
2. 按需加载标的元数据缓存（失败只记录警告）
3. 保存当日快照（含保留期清理）
4. 计算日涨跌（对比前一自然日快照）
5. 检测多日趋势
6. 检查预警并推送通知
7. 可选：按汇率换算账户币种市值

使用方式：
    monitor = PortfolioMonitor.from_config(MonitorConfig.load())
    result = monitor.refresh()
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Optional

from src.business.alerts import AlertEngine, AlertEvent
from src.business.config.monitor_config import MonitorConfig
from src.business.notification import NotificationChannel, create_channel
from src.data.models import CashBalance, Position, Snapshot
from src.data.providers import (
    DataProviderError,
    FxRateProvider,
    PortfolioDataSource,
    Trading212Provider,
)
from src.data.store import InstrumentCache, SnapshotStore, StateFile
from src.data.utils.date_key import date_key
from src.engine.models.performance import EnrichedPosition, TrendResult
from src.engine.performance import calc_daily_changes, detect_downtrends, detect_uptrends

logger = logging.getLogger(__name__)


@dataclass
class RefreshResult:
    """一次刷新周期的结果（供展示层只读使用）"""

    enriched_positions: list[EnrichedPosition] = field(default_factory=list)
    cash: Optional[CashBalance] = None
    alerts: list[AlertEvent] = field(default_factory=list)
    trend_results: list[TrendResult] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)
    from_cache: bool = False
    error: Optional[str] = None
    fx_rates: Optional[dict[str, float]] = None
    base_currency: str = "GBP"

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def total_ppl(self) -> float:
        return sum(p.position.ppl for p in self.enriched_positions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "from_cache": self.from_cache,
            "error": self.error,
            "base_currency": self.base_currency,
            "positions": [p.to_dict() for p in self.enriched_positions],
            "cash": self.cash.to_dict() if self.cash else None,
            "alerts": [a.to_dict() for a in self.alerts],
            "trends": [t.to_dict() for t in self.trend_results],
            "fx_rates": self.fx_rates,
        }


class PortfolioMonitor:
    """持仓监控器

    持有快照存储、元数据缓存和预警引擎，进程内只创建一个实例。
    所有刷新都是同步执行的，同一时刻最多一个周期在运行。
    """

    def __init__(
        self,
        source: PortfolioDataSource,
        snapshot_store: SnapshotStore,
        instrument_cache: InstrumentCache,
        alert_engine: AlertEngine,
        config: Optional[MonitorConfig] = None,
        fx_provider: Optional[FxRateProvider] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """初始化持仓监控器

        Args:
            source: 持仓数据源
            snapshot_store: 快照存储
            instrument_cache: 标的元数据缓存
            alert_engine: 预警引擎
            config: 监控配置，None 使用默认值
            fx_provider: 汇率数据源，None 表示不做币种换算
            clock: 返回当前时间的函数（测试用）
        """
        self.config = config or MonitorConfig()
        self.source = source
        self.snapshot_store = snapshot_store
        self.instrument_cache = instrument_cache
        self.alert_engine = alert_engine
        self.fx_provider = fx_provider
        self._tz = self.config.tzinfo
        self._clock = clock or (lambda: datetime.now(self._tz))

    @classmethod
    def from_config(
        cls,
        config: MonitorConfig,
        source: Optional[PortfolioDataSource] = None,
        channel: Optional[NotificationChannel] = None,
    ) -> "PortfolioMonitor":
        """根据配置组装完整的监控器

        Raises:
            ValueError: 凭证缺失或配置非法（未传入 source 时）
        """
        if source is None:
            config.api.validate()
            source = Trading212Provider(config.api.to_provider_config())

        if channel is None:
            channel = create_channel(
                config.notification.channel,
                enabled=config.notification.enabled,
            )

        state_file = StateFile(config.storage_path)
        store = SnapshotStore(
            state_file,
            retention_days=config.storage.retention_days,
            tz=config.tzinfo,
        )
        cache = InstrumentCache(state_file, ttl_hours=config.storage.metadata_ttl_hours)
        fx_provider = FxRateProvider(timeout=config.fx.timeout) if config.fx.enabled else None

        return cls(
            source=source,
            snapshot_store=store,
            instrument_cache=cache,
            alert_engine=AlertEngine(channel=channel),
            config=config,
            fx_provider=fx_provider,
        )

    def now(self) -> datetime:
        return self._clock()

    def today(self, now: Optional[datetime] = None) -> str:
        return date_key(now or self.now(), self._tz)

    # ==========================================================================
    # 刷新周期
    # ==========================================================================

    def refresh(self, now: Optional[datetime] = None) -> RefreshResult:
        """执行一次完整刷新周期

        Args:
            now: 当前时间，None 使用时钟

        Returns:
            RefreshResult；拉取或保存失败时 error 非空，且不产生预警
        """
        now = now or self.now()
        today = self.today(now)
        logger.info("Refreshing portfolio from Trading 212...")

        self.instrument_cache.begin_cycle()

        try:
            positions = self.source.fetch_positions()
            cash = self.source.fetch_cash()
        except DataProviderError as e:
            logger.error(f"Refresh aborted, could not fetch portfolio: {e}")
            return self._error_result(str(e), now)

        self.instrument_cache.ensure_loaded(self.source, now)

        previous = self.snapshot_store.latest_before(today)

        try:
            self.snapshot_store.save_snapshot(positions, now, cash=cash)
        except OSError as e:
            logger.error(f"Refresh aborted, could not save snapshot: {e}")
            return self._error_result(f"Could not save snapshot: {e}", now)

        enriched = self._enrich(positions, previous)
        down, up = self._detect_trends()

        alerts = self.alert_engine.check_daily_alerts(
            enriched,
            self.config.alerts.daily_loss,
            self.config.alerts.daily_gain,
            today,
        )
        alerts += self.alert_engine.check_trend_alerts(down, today)
        if self.config.trend.alert_uptrends:
            alerts += self.alert_engine.check_trend_alerts(up, today)

        enriched, fx_rates = self._convert_to_base(enriched)

        logger.info(
            f"Portfolio refreshed: {len(positions)} positions, "
            f"{len(alerts)} new alerts, {len(down) + len(up)} trends"
        )

        return RefreshResult(
            enriched_positions=enriched,
            cash=cash,
            alerts=alerts,
            trend_results=down + up,
            timestamp=now,
            from_cache=False,
            fx_rates=fx_rates,
            base_currency=self.config.fx.base_currency,
        )

    def load_cached(self, now: Optional[datetime] = None) -> Optional[RefreshResult]:
        """使用本地数据构建结果（启动时数据足够新则无需请求 API）

        Returns:
            from_cache=True 的结果；数据过期或不存在时返回 None
        """
        now = now or self.now()
        if not self.snapshot_store.is_fresh(now, self.config.polling.fresh_data_minutes):
            return None

        latest = self.snapshot_store.window(1)
        if not latest:
            return None

        snapshot = latest[-1]
        previous = self.snapshot_store.latest_before(snapshot.date)
        enriched = self._enrich(list(snapshot.positions), previous)
        down, up = self._detect_trends()

        logger.info(f"Using cached portfolio data from {snapshot.date}")
        return RefreshResult(
            enriched_positions=enriched,
            cash=self.snapshot_store.last_cash,
            alerts=[],
            trend_results=down + up,
            timestamp=self.snapshot_store.last_fetch_time or snapshot.captured_at,
            from_cache=True,
            base_currency=self.config.fx.base_currency,
        )

    def trends(self) -> list[TrendResult]:
        """基于已保存的快照计算当前趋势（不触发预警）"""
        down, up = self._detect_trends()
        return down + up

    # ==========================================================================
    # 内部方法
    # ==========================================================================

    def _enrich(
        self,
        positions: list[Position],
        previous: Optional[Snapshot],
    ) -> list[EnrichedPosition]:
        annotations = {p.ticker: self.instrument_cache.annotate(p.ticker) for p in positions}
        return calc_daily_changes(positions, previous, annotations)

    def _detect_trends(self) -> tuple[list[TrendResult], list[TrendResult]]:
        window = self.snapshot_store.window(self.config.trend.days)
        down = detect_downtrends(window, self.config.trend.downtrend_threshold)
        up = detect_uptrends(window, self.config.trend.uptrend_threshold)
        return down, up

    def _convert_to_base(
        self,
        enriched: list[EnrichedPosition],
    ) -> tuple[list[EnrichedPosition], Optional[dict[str, float]]]:
        """按汇率补充账户币种市值，汇率不可用时原样返回"""
        if self.fx_provider is None or not enriched:
            return enriched, None

        base = self.config.fx.base_currency
        currencies = []
        for position in enriched:
            major, _ = FxRateProvider.normalize_currency(position.instrument_currency)
            if major:
                currencies.append(major)

        rates = self.fx_provider.fetch_rates(currencies, base=base)
        if rates is None:
            return enriched, None

        converted = [
            replace(
                position,
                market_value_base=FxRateProvider.convert_to_base(
                    position.position.market_value,
                    position.instrument_currency,
                    base,
                    rates,
                ),
            )
            for position in enriched
        ]
        return converted, rates

    def _error_result(self, message: str, now: datetime) -> RefreshResult:
        return RefreshResult(
            timestamp=now,
            error=message,
            base_currency=self.config.fx.base_currency,
        )
