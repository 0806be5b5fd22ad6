"""Ledger and holdings frame validation."""

from __future__ import annotations

import math
import numbers

import pandas as pd

from portfolio_engine.portfolio.ledger import INFLOW_KINDS, OUTFLOW_KINDS
from portfolio_engine.portfolio.models import CATEGORIES, ValidationIssue
from portfolio_engine.services.base import validate_currency

TRANSACTION_COLUMNS = ["Date", "Amount"]
HOLDING_COLUMNS = ["Name", "Quantity"]
# Issues that describe how a row will be read rather than why it cannot be.
ADVISORY_CODES = {"unknown_type"}


def _missing_columns(frame: pd.DataFrame, required: list[str]) -> list[ValidationIssue]:
    return [
        ValidationIssue(field=col, code="missing_column", message=f"Required column is missing: {col}")
        for col in required
        if col not in frame.columns
    ]


def _null_columns(frame: pd.DataFrame, required: list[str]) -> list[ValidationIssue]:
    return [
        ValidationIssue(field=col, code="null_value", message=f"Null values found in {col}.")
        for col in required
        if frame[col].isnull().any()
    ]


def _is_number(value: object) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(float(value))


def _check_currency(row: pd.Series, row_num: int, issues: list[ValidationIssue]) -> None:
    if "Currency" not in row.index or pd.isna(row["Currency"]):
        return
    try:
        validate_currency(str(row["Currency"]))
    except ValueError:
        issues.append(
            ValidationIssue(
                field="Currency",
                row=row_num,
                code="invalid_currency",
                message=f"Currency must be a three-letter ISO code, received {row['Currency']!r}.",
            )
        )


def validate_transactions_frame(frame: pd.DataFrame) -> list[ValidationIssue]:
    issues = _missing_columns(frame, TRANSACTION_COLUMNS)
    if issues:
        return issues
    issues.extend(_null_columns(frame, TRANSACTION_COLUMNS))

    known_kinds = OUTFLOW_KINDS | INFLOW_KINDS
    for idx, row in frame.iterrows():
        row_num = int(idx) + 2
        if pd.isna(pd.to_datetime(row["Date"], errors="coerce")):
            issues.append(
                ValidationIssue(field="Date", row=row_num, code="invalid_date", message=f"Unparseable date: {row['Date']!r}")
            )

        amount = row["Amount"]
        if not _is_number(amount) or float(amount) == 0:
            issues.append(
                ValidationIssue(
                    field="Amount",
                    row=row_num,
                    code="invalid_amount",
                    message="Amount must be a non-zero numeric value.",
                )
            )

        if "Type" in row.index and not pd.isna(row["Type"]):
            if str(row["Type"]).strip().lower() not in known_kinds:
                issues.append(
                    ValidationIssue(
                        field="Type",
                        row=row_num,
                        code="unknown_type",
                        message=f"Unknown transaction type {row['Type']!r}; amount sign is used as given.",
                    )
                )
        _check_currency(row, row_num, issues)
    return issues


def validate_holdings_frame(frame: pd.DataFrame) -> list[ValidationIssue]:
    issues = _missing_columns(frame, HOLDING_COLUMNS)
    if issues:
        return issues
    issues.extend(_null_columns(frame, HOLDING_COLUMNS))

    for idx, row in frame.iterrows():
        row_num = int(idx) + 2
        quantity = row["Quantity"]
        if not _is_number(quantity) or float(quantity) < 0:
            issues.append(
                ValidationIssue(
                    field="Quantity",
                    row=row_num,
                    code="invalid_quantity",
                    message="Quantity must be a non-negative numeric value.",
                )
            )

        if "Price" in row.index and not pd.isna(row["Price"]):
            if not _is_number(row["Price"]) or float(row["Price"]) < 0:
                issues.append(
                    ValidationIssue(
                        field="Price",
                        row=row_num,
                        code="invalid_price",
                        message="Price must be a non-negative numeric value when present.",
                    )
                )

        if "Category" in row.index and not pd.isna(row["Category"]):
            if str(row["Category"]).strip().title() not in CATEGORIES:
                issues.append(
                    ValidationIssue(
                        field="Category",
                        row=row_num,
                        code="invalid_category",
                        message=f"Category must be one of {list(CATEGORIES)}.",
                    )
                )

        has_symbol = "Symbol" in row.index and not pd.isna(row["Symbol"])
        has_exchange = "Exchange" in row.index and not pd.isna(row["Exchange"])
        if has_symbol != has_exchange:
            issues.append(
                ValidationIssue(
                    field="Exchange" if has_symbol else "Symbol",
                    row=row_num,
                    code="incomplete_listing",
                    message="Symbol and Exchange must be provided together.",
                )
            )
        _check_currency(row, row_num, issues)
    return issues
