"""
Portfolio State File - 本地状态文件

使用单个 JSON 文件持久化监控器的全部状态。

文件结构:
    data/portfolio/portfolio-data.json
    {
        "snapshots": {"YYYY-MM-DD": {...}},
        "last_fetch_time": "...",
        "last_cash": {...},
        "instrument_cache": {"entries": {...}, "cached_at": "..."}
    }
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _default_state() -> dict[str, Any]:
    return {
        "snapshots": {},
        "last_fetch_time": None,
        "last_cash": None,
        "instrument_cache": {"entries": {}, "cached_at": None},
    }


class StateFile:
    """本地状态文件

    整个文件作为一条记录读写：
    - 读取失败（不存在/损坏）视为空状态，仅记录警告
    - 写入先落临时文件再 os.replace，保证不会留下半写的文件
    - 写入失败向调用方抛出

    Usage:
        state_file = StateFile("data/portfolio/portfolio-data.json")
        snapshots = dict(state_file.data["snapshots"])
        state_file.commit(snapshots=snapshots, last_fetch_time=now.isoformat())
    """

    def __init__(self, path: str | Path) -> None:
        """初始化状态文件

        Args:
            path: JSON 文件路径
        """
        self._path = Path(path)
        self.data: dict[str, Any] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        """读取状态文件，缺失或损坏时返回空状态"""
        if not self._path.exists():
            logger.debug(f"State file not found, starting empty: {self._path}")
            return _default_state()

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"State file unreadable, starting empty: {self._path} ({e})")
            return _default_state()

        if not isinstance(raw, dict):
            logger.warning(f"State file has unexpected layout, starting empty: {self._path}")
            return _default_state()

        state = _default_state()
        state.update(raw)

        # 各段类型不对时单独重置
        if not isinstance(state.get("snapshots"), dict):
            logger.warning("State file 'snapshots' section is corrupt, resetting it")
            state["snapshots"] = {}
        if not isinstance(state.get("instrument_cache"), dict):
            logger.warning("State file 'instrument_cache' section is corrupt, resetting it")
            state["instrument_cache"] = {"entries": {}, "cached_at": None}

        return state

    def commit(self, **sections: Any) -> None:
        """替换若干段并原子写入

        先写磁盘，成功后才替换内存中的状态，写入失败时内存与磁盘都保持原样。

        Args:
            **sections: 要替换的顶层段，如 snapshots=..., last_fetch_time=...

        Raises:
            OSError: 写入失败
        """
        updated = dict(self.data)
        updated.update(sections)
        self._write(updated)
        self.data = updated

    def _write(self, data: dict[str, Any]) -> None:
        """写入临时文件后 os.replace 到目标路径"""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                # 清理临时文件后继续抛出
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise

            logger.debug(f"State saved -> {self._path}")

        except Exception as e:
            logger.error(f"Failed to save state file {self._path}: {e}")
            raise
