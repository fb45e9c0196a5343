"""Financial figures for a note.

Subtotal aggregation and brokerage/exchange arithmetic. Every function is
pure and recomputes from its inputs, so callers can call them after any
field change without worrying about stale values.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Protocol

from bussnote.config import HOME_CURRENCY
from bussnote.utils.money import MoneyInput, standard_round, to_decimal, truncate_round

ONE = Decimal("1.00")
HUNDRED = Decimal("100")


class LineItem(Protocol):
    quantity: Decimal
    rate: Decimal


@dataclass(frozen=True)
class InvoiceFigures:
    """Derived monetary fields of a note."""

    subtotal: Decimal
    brokerage_rate: Decimal
    brokerage: Decimal
    exchange_rate: Decimal
    brokerage_in_home_currency: Decimal
    received_brokerage: Decimal
    balance_brokerage: Decimal
    total: Decimal


def calculate_subtotal(items: Iterable[LineItem]) -> Decimal:
    """Sum of quantity x rate over all items, rounded to two decimals."""
    raw = sum((to_decimal(item.quantity) * to_decimal(item.rate) for item in items), Decimal("0"))
    return standard_round(raw)


def effective_exchange_rate(currency: str, exchange_rate: MoneyInput) -> Decimal:
    """Exchange rate actually applied: pinned to 1.00 for the home currency."""
    if currency == HOME_CURRENCY:
        return ONE
    return standard_round(exchange_rate)


def calculate_brokerage(subtotal: MoneyInput, brokerage_rate: MoneyInput) -> Decimal:
    """Brokerage for a percentage rate (2.5 means 2.5 %)."""
    return standard_round(to_decimal(subtotal) * to_decimal(brokerage_rate) / HUNDRED)


def calculate_brokerage_in_home_currency(brokerage: MoneyInput, exchange_rate: MoneyInput) -> Decimal:
    return standard_round(to_decimal(brokerage) * to_decimal(exchange_rate))


def calculate_balance_brokerage(
    brokerage_in_home_currency: MoneyInput, received_brokerage: MoneyInput
) -> Decimal:
    """Brokerage still owed; truncated so tiny negative noise shows as 0.00."""
    return truncate_round(to_decimal(brokerage_in_home_currency) - to_decimal(received_brokerage))


def calculate_figures(
    items: Iterable[LineItem],
    brokerage_rate: MoneyInput,
    exchange_rate: MoneyInput,
    received_brokerage: MoneyInput,
    currency: str = HOME_CURRENCY,
) -> InvoiceFigures:
    """Compute every derived money field of a note from its inputs.

    Args:
        items: Line items with quantity and rate
        brokerage_rate: Brokerage percentage
        exchange_rate: Rate to the home currency (ignored for the home currency)
        received_brokerage: Brokerage already received, in home currency
        currency: Note currency code

    Returns:
        InvoiceFigures with all amounts rounded to two decimals
    """
    subtotal = calculate_subtotal(items)
    rate_pct = standard_round(brokerage_rate)
    brokerage = calculate_brokerage(subtotal, rate_pct)
    rate = effective_exchange_rate(currency, exchange_rate)
    in_home = calculate_brokerage_in_home_currency(brokerage, rate)
    received = standard_round(received_brokerage)

    return InvoiceFigures(
        subtotal=subtotal,
        brokerage_rate=rate_pct,
        brokerage=brokerage,
        exchange_rate=rate,
        brokerage_in_home_currency=in_home,
        received_brokerage=received,
        balance_brokerage=calculate_balance_brokerage(in_home, received),
        total=standard_round(subtotal + brokerage),
    )
