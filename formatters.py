"""
Value Formatting

Explicit number/currency/date formatting rules used when case data is merged
into templates. Nothing here reads the process locale; grouping, decimal
separator, currency symbol and precision are configured on the Formatter.
"""
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_EVEN, ROUND_HALF_UP
from typing import Optional, Union

import config

Number = Union[int, float, Decimal]


@dataclass(frozen=True)
class Formatter:
    """Formatting rules for resolved template values."""
    currency_symbol: str = config.CURRENCY_SYMBOL
    grouping_separator: str = config.GROUPING_SEPARATOR
    decimal_separator: str = config.DECIMAL_SEPARATOR
    max_decimals: int = config.MAX_DECIMALS
    missing: str = config.MISSING_VALUE

    def number(self, value: Optional[Number]) -> str:
        """Group thousands, keep up to max_decimals fraction digits, drop trailing zeros.

        750000 -> "750,000"; 1234.5 -> "1,234.5"
        """
        if value is None:
            return self.missing
        quantum = Decimal(1).scaleb(-self.max_decimals)
        rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_EVEN)
        text = f"{rounded:,.{self.max_decimals}f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return self._localize(text)

    def fixed(self, value: Optional[Number], places: int = 2) -> str:
        """Fixed number of decimals, no grouping: 76.714 -> "76.71"."""
        if value is None:
            return self.missing
        quantum = Decimal(1).scaleb(-places)
        rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
        return f"{rounded:.{places}f}".replace(".", self.decimal_separator)

    def currency(self, value: Optional[Number]) -> str:
        if value is None:
            return self.missing
        formatted = self.number(abs(value))
        sign = "-" if value < 0 else ""
        return f"{sign}{self.currency_symbol}{formatted}"

    def percentage(self, value: Optional[Number]) -> str:
        if value is None:
            return self.missing
        return f"{self.number(value)}%"

    def long_date(self, value: Optional[Union[date, datetime]]) -> str:
        """Long-form date: March 5, 2024."""
        if value is None:
            return self.missing
        return f"{value:%B} {value.day}, {value.year}"

    def text(self, value: Optional[str]) -> str:
        """Plain strings; empty and missing values both become the missing marker."""
        if value is None or value == "":
            return self.missing
        return str(value)

    def _localize(self, text: str) -> str:
        if self.grouping_separator == "," and self.decimal_separator == ".":
            return text
        # Swap through a placeholder so "," and "." can trade places.
        return (
            text.replace(",", "\x00")
            .replace(".", self.decimal_separator)
            .replace("\x00", self.grouping_separator)
        )


DEFAULT_FORMATTER = Formatter()
