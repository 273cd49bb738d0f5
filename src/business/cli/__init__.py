"""
Business Layer CLI - 业务层命令行工具

提供命令：
- watch: 持续监控（定时轮询）
- refresh: 单次刷新
- history: 查看快照历史
- trends: 查看多日趋势
- notify: 测试通知发送
"""

from src.business.cli.main import cli

__all__ = ["cli"]
