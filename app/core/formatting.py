"""Display helpers for trainer-facing payout screens (French storefront)."""

from datetime import datetime
from typing import Optional

CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£", "CHF": "CHF"}


def format_amount_label(amount_cents: int, currency: str = "EUR") -> str:
    """Format cents the fr-FR way: 123456 -> '1 234,56 €'."""
    sign = "-" if amount_cents < 0 else ""
    abs_cents = abs(amount_cents)
    units = f"{abs_cents // 100:,}".replace(",", " ")
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    return f"{sign}{units},{abs_cents % 100:02d} {symbol}"


def format_date_label(value: Optional[datetime]) -> str:
    if value is None:
        return "—"
    return value.strftime("%d/%m/%Y")


def mask_iban(iban: Optional[str]) -> Optional[str]:
    """Keep the first and last four characters, redact the middle."""
    if not iban:
        return None
    clean = "".join(iban.split())
    if len(clean) <= 8:
        return clean
    return f"{clean[:4]}{'•' * (len(clean) - 8)}{clean[-4:]}"
