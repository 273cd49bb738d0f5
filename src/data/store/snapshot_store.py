"""
Snapshot Store - 持仓快照存储

按日期保存持仓快照，构成有界的每日时间序列，供日涨跌和多日趋势计算使用。

规则:
- 每个自然日最多一条快照，同日再次保存直接覆盖
- 保存后删除早于 retention_days 的快照
- 派生指标不落盘，全部按需从序列重新计算
"""

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Iterable

from src.data.models.portfolio import CashBalance, Position, Snapshot
from src.data.store.state_file import StateFile
from src.data.utils.date_key import (
    date_key,
    is_valid_date_key,
    parse_date_key,
    shift_date_key,
)

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 90


class SnapshotStore:
    """持仓快照存储

    Usage:
        store = SnapshotStore(StateFile(path))
        store.save_snapshot(positions, now)
        previous = store.latest_before(date_key(now))
        window = store.window(5)
    """

    def __init__(
        self,
        state_file: StateFile,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        tz: tzinfo | None = None,
    ) -> None:
        """初始化快照存储

        Args:
            state_file: 持久化状态文件
            retention_days: 快照保留天数
            tz: 划分自然日使用的时区
        """
        if retention_days < 1:
            raise ValueError(f"retention_days must be >= 1, got {retention_days}")

        self._state_file = state_file
        self._retention_days = retention_days
        self._tz = tz
        self._snapshots: dict[str, Snapshot] = self._load_snapshots()

    @property
    def retention_days(self) -> int:
        return self._retention_days

    def _load_snapshots(self) -> dict[str, Snapshot]:
        """从状态文件解析快照，跳过无法解析的条目"""
        snapshots: dict[str, Snapshot] = {}
        raw = self._state_file.data.get("snapshots", {})

        for key, entry in raw.items():
            if not is_valid_date_key(key):
                logger.warning(f"Dropping snapshot with malformed date key: {key!r}")
                continue
            try:
                snapshot = Snapshot.from_dict({**entry, "date": key})
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Dropping unreadable snapshot {key}: {e}")
                continue
            snapshots[key] = snapshot

        if snapshots:
            logger.debug(f"Loaded {len(snapshots)} snapshots from {self._state_file.path}")
        return snapshots

    # ==========================================================================
    # 写入
    # ==========================================================================

    def save_snapshot(
        self,
        positions: Iterable[Position],
        now: datetime,
        cash: CashBalance | None = None,
    ) -> Snapshot:
        """保存当日快照并执行保留期清理

        Args:
            positions: 当前持仓
            now: 当前时间
            cash: 当前现金余额（可选，作为启动缓存）

        Returns:
            写入的快照

        Raises:
            OSError: 写入状态文件失败，此时内存中的序列保持不变
        """
        today = date_key(now, self._tz)
        snapshot = Snapshot(date=today, positions=tuple(positions), captured_at=now)

        snapshots = dict(self._snapshots)
        snapshots[today] = snapshot

        cutoff = shift_date_key(today, -self._retention_days)
        evicted = [key for key in snapshots if key < cutoff]
        for key in evicted:
            del snapshots[key]
        if evicted:
            logger.info(f"Evicted {len(evicted)} snapshots older than {cutoff}")

        sections = {
            "snapshots": {key: snap.to_dict() for key, snap in snapshots.items()},
            "last_fetch_time": now.isoformat(),
        }
        if cash is not None:
            sections["last_cash"] = cash.to_dict()

        self._state_file.commit(**sections)
        self._snapshots = snapshots

        logger.debug(f"Snapshot saved: {today} ({len(snapshot.positions)} positions)")
        return snapshot

    # ==========================================================================
    # 查询
    # ==========================================================================

    def get(self, key: str) -> Snapshot | None:
        """获取指定日期的快照

        Raises:
            InvalidDateKeyError: 日期格式非法
        """
        parse_date_key(key)
        return self._snapshots.get(key)

    def latest_before(self, key: str) -> Snapshot | None:
        """获取 key 前一个自然日的快照

        严格按日期查找：前一天没有快照时返回 None，不会回退到更早的日期。
        """
        return self._snapshots.get(shift_date_key(key, -1))

    def window(self, last_n_days: int) -> list[Snapshot]:
        """按日期升序返回最近 N 个有数据的日期的快照

        缺失的日期不补齐，因此数据不完整时返回少于 N 条。
        """
        if last_n_days <= 0:
            return []
        keys = sorted(self._snapshots)[-last_n_days:]
        return [self._snapshots[key] for key in keys]

    def today(self, now: datetime) -> Snapshot | None:
        """获取当日快照"""
        return self._snapshots.get(date_key(now, self._tz))

    def dates(self) -> list[str]:
        """所有快照日期（升序）"""
        return sorted(self._snapshots)

    def __len__(self) -> int:
        return len(self._snapshots)

    # ==========================================================================
    # 拉取时间 / 现金缓存
    # ==========================================================================

    @property
    def last_fetch_time(self) -> datetime | None:
        raw = self._state_file.data.get("last_fetch_time")
        if not raw:
            return None
        try:
            return datetime.fromisoformat(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring unreadable last_fetch_time: {raw!r}")
            return None

    @property
    def last_cash(self) -> CashBalance | None:
        raw = self._state_file.data.get("last_cash")
        if not raw:
            return None
        try:
            return CashBalance.from_dict(raw)
        except (TypeError, ValueError, AttributeError):
            logger.warning("Ignoring unreadable last_cash entry")
            return None

    def is_fresh(self, now: datetime, max_age_minutes: float) -> bool:
        """最近一次拉取是否在 max_age_minutes 分钟之内"""
        last_fetch = self.last_fetch_time
        if last_fetch is None:
            return False
        return now - last_fetch < timedelta(minutes=max_age_minutes)
