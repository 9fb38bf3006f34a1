from enum import Enum


class Currency(str, Enum):
    VND = "VND"
    USD = "USD"
    EUR = "EUR"

    def get_decimals(self) -> int:
        """Number of minor-unit digits used when rounding totals."""
        match self:
            case Currency.VND:
                return 0
            case _:
                return 2
