"""Portfolio analytics orchestration service."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable

from portfolio_engine.lib.formatters import format_currency
from portfolio_engine.lib.valuation import adjust_for_inflation
from portfolio_engine.portfolio.allocation import AllocationPolicy, classify, value_holdings
from portfolio_engine.portfolio.intelligence import XirrInterpretation, generate_summary, interpret_xirr
from portfolio_engine.portfolio.ledger import portfolio_xirr
from portfolio_engine.portfolio.models import Classification, Holding, Transaction, ValuedHolding, XirrResult
from portfolio_engine.portfolio.projections import corpus_with_step_up
from portfolio_engine.runtime.monitoring import log_engine_event
from portfolio_engine.services.base import ServiceContext
from portfolio_engine.services.price_service import PriceService

LOGGER = logging.getLogger(__name__)


@dataclass
class PortfolioAnalysis:
    xirr: XirrResult
    classification: Classification
    interpretation: XirrInterpretation
    total_value: float
    total_value_formatted: str
    summary: str


@dataclass
class GoalProjection:
    nominal_corpus: float
    real_corpus: float
    months: int
    annual_rate_percent: float


class PortfolioService:
    def __init__(
        self,
        ctx: ServiceContext,
        policy: AllocationPolicy | None = None,
        price_service: PriceService | None = None,
    ) -> None:
        self.ctx = ctx
        self.policy = policy or AllocationPolicy.from_settings(ctx.settings)
        self.price_service = price_service or PriceService(ctx)

    async def value_portfolio(self, holdings: Iterable[Holding]) -> list[ValuedHolding]:
        """Resolve market prices for listed holdings and value the whole list.

        Holdings without a symbol and exchange keep their supplied price.
        A listed holding whose quote fails, or whose price could not be
        converted to the home currency, is valued at ``None``.
        """
        holdings = list(holdings)
        home = self.ctx.settings.home_currency
        listed = [holding for holding in holdings if holding.symbol and holding.exchange]
        if not listed:
            return value_holdings(holdings, home_currency=home)

        batch = await self.price_service.fetch_prices(
            [holding.symbol or "" for holding in listed],
            [holding.exchange or "" for holding in listed],
        )
        if not batch.success:
            LOGGER.warning("price batch failed: holdings=%s error=%s", len(listed), batch.error)
        # Batch keys are stripped symbols; value_holdings looks up the raw one.
        prices = {
            holding.symbol: batch.prices[holding.symbol.strip()]
            for holding in listed
            if holding.symbol and holding.symbol.strip() in batch.prices
        }
        return value_holdings(holdings, prices, home)

    def analyze(
        self,
        transactions: Iterable[Transaction],
        valued_holdings: Iterable[ValuedHolding],
        as_of: date,
    ) -> PortfolioAnalysis:
        started = time.perf_counter()
        valued_holdings = list(valued_holdings)
        home = self.ctx.settings.home_currency
        foreign = sorted({h.currency for h in valued_holdings if h.value is not None and h.currency != home})
        if foreign:
            LOGGER.warning("holdings not in home currency are left out of totals: home=%s currencies=%s", home, foreign)
            valued_holdings = [
                replace(h, value=None) if h.value is not None and h.currency != home else h for h in valued_holdings
            ]

        classification = classify(valued_holdings, self.policy)
        total_value = sum(bucket.total_value for bucket in classification.buckets)
        xirr = portfolio_xirr(transactions, total_value, as_of)
        interpretation = interpret_xirr(xirr)
        summary = generate_summary(classification, xirr, total_value)

        log_engine_event(
            "analyze_portfolio",
            (time.perf_counter() - started) * 1000,
            xirr.converged,
            warning=xirr.error,
            buckets=len(classification.buckets),
            risk_profile=classification.risk_profile,
        )
        return PortfolioAnalysis(
            xirr=xirr,
            classification=classification,
            interpretation=interpretation,
            total_value=total_value,
            total_value_formatted=format_currency(total_value, home),
            summary=summary,
        )

    def project_goal(
        self,
        monthly_sip: float,
        months: int,
        xirr: XirrResult,
        step_up_percent: float = 0.0,
        existing_corpus: float = 0.0,
    ) -> GoalProjection | None:
        """Project a SIP corpus at the portfolio's own return, in nominal and today's money."""
        if not xirr.converged or xirr.rate is None or xirr.rate < 0:
            return None
        rate_percent = xirr.rate * 100.0
        projection = corpus_with_step_up(monthly_sip, rate_percent, step_up_percent, months, existing_corpus)
        real = adjust_for_inflation(
            projection.corpus,
            projection.months,
            annual_rate_percent=self.ctx.settings.inflation_rate_percent,
        )
        return GoalProjection(
            nominal_corpus=projection.corpus,
            real_corpus=real,
            months=projection.months,
            annual_rate_percent=rate_percent,
        )
