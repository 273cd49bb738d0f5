"""Terminal rendering for portfolio refresh results."""

from src.business.cli.dashboard.renderer import PortfolioRenderer

__all__ = ["PortfolioRenderer"]
