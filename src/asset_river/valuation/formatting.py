"""
Currency Formatting.

Thin wrapper over Babel's CLDR data so every monetary figure is rendered
the same way across the dashboard, detail views and exports.
"""

from __future__ import annotations

from babel import Locale, UnknownLocaleError
from babel.numbers import UnknownCurrencyError, validate_currency
from babel.numbers import format_currency as _babel_format_currency


def _parse_locale(locale: str) -> Locale:
    """Accept BCP-47 (``en-US``) as well as POSIX (``en_US``) tags."""
    sep = "-" if "-" in locale else "_"
    try:
        return Locale.parse(locale, sep=sep)
    except (UnknownLocaleError, ValueError) as e:
        raise ValueError(f"Unknown locale: {locale}") from e


def format_currency(
    value: float,
    currency: str = "USD",
    locale: str = "en-US",
) -> str:
    """
    Format a monetary amount for display.

    Args:
        value: Amount in currency units
        currency: ISO 4217 code
        locale: Locale tag, e.g. ``en-US`` or ``de_DE``

    Returns:
        Localised string, e.g. ``$1,050.00``

    Raises:
        ValueError: If the locale or currency is unknown
    """
    parsed = _parse_locale(locale)
    code = currency.upper()
    try:
        validate_currency(code)
    except UnknownCurrencyError as e:
        raise ValueError(f"Unknown currency: {currency}") from e
    return _babel_format_currency(value, code, locale=parsed)
