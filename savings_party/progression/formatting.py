"""Money display helpers."""

from savings_party.models.savings import CurrencyOption


def format_currency(amount: float, currency: CurrencyOption) -> str:
    """
    Format an amount for display, e.g. "$1,234.50" or "1,234.50 kr".

    Negative amounts get a leading minus before the symbol.
    """
    sign = "-" if amount < 0 else ""
    number = f"{abs(amount):,.2f}"
    if currency.position == "after":
        return f"{sign}{number} {currency.symbol}"
    return f"{sign}{currency.symbol}{number}"
