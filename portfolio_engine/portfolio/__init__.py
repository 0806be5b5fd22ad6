"""Portfolio analysis domain package."""

from portfolio_engine.portfolio.models import Holding, Transaction, ValuedHolding, XirrResult
from portfolio_engine.portfolio.portfolio_service import GoalProjection, PortfolioAnalysis, PortfolioService

__all__ = [
    "GoalProjection",
    "Holding",
    "PortfolioAnalysis",
    "PortfolioService",
    "Transaction",
    "ValuedHolding",
    "XirrResult",
]
