"""Ledger file loading, validation and frame-to-record conversion."""

from __future__ import annotations

import logging
import math
import os

import pandas as pd

from portfolio_engine.portfolio.allocation import categorize_scheme
from portfolio_engine.portfolio.ledger import signed_amount
from portfolio_engine.portfolio.models import CATEGORIES, Holding, Transaction, ValidationIssue
from portfolio_engine.portfolio.validation import ADVISORY_CODES, validate_holdings_frame, validate_transactions_frame

LOGGER = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".csv", ".xlsx", ".xls"}


class LedgerValidationError(ValueError):
    def __init__(self, file_path: str, issues: list[ValidationIssue]) -> None:
        self.file_path = file_path
        self.issues = issues
        details = "; ".join(_describe(issue) for issue in issues[:5])
        more = f" (+{len(issues) - 5} more)" if len(issues) > 5 else ""
        super().__init__(f"{file_path} failed validation: {details}{more}")


def _describe(issue: ValidationIssue) -> str:
    where = f"row {issue.row} " if issue.row is not None else ""
    return f"{where}{issue.field}: {issue.message}"


def load_ledger_file(file_path: str) -> pd.DataFrame:
    absolute_path = file_path if os.path.isabs(file_path) else os.path.abspath(file_path)
    ext = os.path.splitext(absolute_path)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValueError("Ledger input must be a CSV or Excel file (.csv, .xlsx or .xls).")
    if ext == ".csv":
        return pd.read_csv(absolute_path)
    return pd.read_excel(absolute_path, sheet_name=0)


def _optional_str(row: pd.Series, column: str) -> str | None:
    if column not in row.index:
        return None
    value = row[column]
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    text = str(value).strip()
    return text or None


def _optional_float(row: pd.Series, column: str) -> float | None:
    if column not in row.index or pd.isna(row[column]):
        return None
    return float(row[column])


def transactions_from_frame(frame: pd.DataFrame, default_currency: str = "INR") -> list[Transaction]:
    """Convert a ledger frame into signed transactions.

    ``Type`` (purchase, redemption, SIP, ...) drives the sign when present;
    otherwise ``Amount`` is taken as already signed.
    """
    dates = pd.to_datetime(frame["Date"]).dt.date
    out: list[Transaction] = []
    for (_, row), day in zip(frame.iterrows(), dates):
        kind = _optional_str(row, "Type")
        out.append(
            Transaction(
                date=day,
                amount=signed_amount(float(row["Amount"]), kind),
                currency=(_optional_str(row, "Currency") or default_currency).upper(),
                kind=kind,
            )
        )
    return out


def holdings_from_frame(frame: pd.DataFrame, default_currency: str = "INR") -> list[Holding]:
    out: list[Holding] = []
    for _, row in frame.iterrows():
        name = str(row["Name"]).strip()
        category = _optional_str(row, "Category")
        if category is None or category.title() not in CATEGORIES:
            category = categorize_scheme(name)
        out.append(
            Holding(
                name=name,
                category=category.title(),  # type: ignore[arg-type]
                quantity=float(row["Quantity"]),
                price=_optional_float(row, "Price"),
                currency=(_optional_str(row, "Currency") or default_currency).upper(),
                symbol=_optional_str(row, "Symbol"),
                exchange=_optional_str(row, "Exchange"),
            )
        )
    return out


def _raise_on_blocking(file_path: str, issues: list[ValidationIssue]) -> None:
    blocking = [issue for issue in issues if issue.code not in ADVISORY_CODES]
    for issue in issues:
        if issue.code in ADVISORY_CODES:
            LOGGER.warning("ledger row advisory: file=%s %s", file_path, _describe(issue))
    if blocking:
        raise LedgerValidationError(file_path, blocking)


def read_transactions(file_path: str, default_currency: str = "INR") -> list[Transaction]:
    """Load, validate and convert a transaction ledger.

    Raises ``LedgerValidationError`` listing every blocking issue; unknown
    ``Type`` values are only logged and their amount sign is used as given.
    """
    frame = load_ledger_file(file_path)
    _raise_on_blocking(file_path, validate_transactions_frame(frame))
    return transactions_from_frame(frame, default_currency)


def read_holdings(file_path: str, default_currency: str = "INR") -> list[Holding]:
    frame = load_ledger_file(file_path)
    _raise_on_blocking(file_path, validate_holdings_frame(frame))
    return holdings_from_frame(frame, default_currency)
