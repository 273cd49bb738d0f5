"""
Instrument Cache - 标的元数据缓存

缓存 ticker -> {name, currency_code, isin}，整体 24 小时有效。

规则:
- 缓存整体有效或整体过期，过期后全量重新拉取并整体替换，不做部分合并
- 拉取失败时缓存保持为空，本轮刷新不再重试，下一轮刷新再试
"""

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable

from src.data.models.portfolio import InstrumentMetadata
from src.data.providers.base import DataProviderError, PortfolioDataSource
from src.data.store.state_file import StateFile

logger = logging.getLogger(__name__)

DEFAULT_TTL_HOURS = 24


class CacheState(str, Enum):
    """缓存状态"""

    EMPTY = "empty"  # 尚未加载或已失效
    POPULATED = "populated"  # 已加载（可能为空列表）
    FAILED = "failed"  # 本轮刷新拉取失败


class InstrumentCache:
    """标的元数据缓存

    Usage:
        cache = InstrumentCache(state_file)
        cache.begin_cycle()
        cache.ensure_loaded(source, now)
        meta = cache.get("AAPL_US_EQ")
    """

    def __init__(
        self,
        state_file: StateFile,
        ttl_hours: float = DEFAULT_TTL_HOURS,
    ) -> None:
        """初始化元数据缓存

        Args:
            state_file: 持久化状态文件
            ttl_hours: 缓存有效期（小时）
        """
        self._state_file = state_file
        self._ttl = timedelta(hours=ttl_hours)
        self._entries: dict[str, InstrumentMetadata] = {}
        self._cached_at: datetime | None = None
        self._state = CacheState.EMPTY
        self._load()

    def _load(self) -> None:
        """从状态文件恢复缓存"""
        section = self._state_file.data.get("instrument_cache") or {}
        raw_time = section.get("cached_at")
        raw_entries = section.get("entries") or {}
        if not raw_time:
            return

        try:
            cached_at = datetime.fromisoformat(raw_time)
            entries = {
                ticker: InstrumentMetadata.from_dict({**entry, "ticker": ticker})
                for ticker, entry in raw_entries.items()
            }
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Instrument cache unreadable, ignoring it: {e}")
            return

        self._entries = entries
        self._cached_at = cached_at
        self._state = CacheState.POPULATED
        logger.debug(f"Restored {len(entries)} instruments from disk cache")

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def cached_at(self) -> datetime | None:
        return self._cached_at

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, ticker: str) -> InstrumentMetadata | None:
        """查询单个标的元数据（纯内存）"""
        return self._entries.get(ticker)

    def is_valid(self, now: datetime) -> bool:
        """缓存已加载且未超过 TTL"""
        if self._state != CacheState.POPULATED or self._cached_at is None:
            return False
        return now - self._cached_at < self._ttl

    def replace(self, entries: Iterable[InstrumentMetadata], now: datetime) -> None:
        """整体替换缓存内容并持久化

        Raises:
            OSError: 写入状态文件失败，此时内存中的缓存保持不变
        """
        new_entries = {entry.ticker: entry for entry in entries}
        self._state_file.commit(
            instrument_cache={
                "entries": {t: e.to_dict() for t, e in new_entries.items()},
                "cached_at": now.isoformat(),
            }
        )
        self._entries = new_entries
        self._cached_at = now
        self._state = CacheState.POPULATED

    def invalidate(self) -> None:
        """显式失效，下次 ensure_loaded 时重新拉取"""
        self._entries = {}
        self._cached_at = None
        self._state = CacheState.EMPTY

    def begin_cycle(self) -> None:
        """开始新一轮刷新：清除上一轮的失败标记，允许重试"""
        if self._state == CacheState.FAILED:
            self._state = CacheState.EMPTY

    def ensure_loaded(self, source: PortfolioDataSource, now: datetime) -> bool:
        """按需加载缓存

        有效时直接返回；本轮已失败时不再重试；否则全量拉取并替换。

        Args:
            source: 数据源
            now: 当前时间

        Returns:
            缓存是否可用
        """
        if self.is_valid(now):
            return True

        if self._state == CacheState.FAILED:
            logger.debug("Instrument metadata fetch already failed this cycle, skipping")
            return False

        logger.info("Fetching instruments metadata...")
        try:
            entries = source.fetch_instrument_metadata()
            self.replace(entries, now)
        except (DataProviderError, OSError) as e:
            logger.warning(f"Could not load instruments metadata: {e}")
            self._entries = {}
            self._cached_at = None
            self._state = CacheState.FAILED
            return False

        logger.info(f"Loaded metadata for {len(self._entries)} instruments")
        return True

    def annotate(self, ticker: str) -> tuple[str | None, str | None]:
        """返回 (公司名称, 交易币种)，未知时为 (None, None)"""
        meta = self._entries.get(ticker)
        if meta is None:
            return None, None
        return meta.name, meta.currency_code
