from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

import config
from models.lineItem import LineItemDTO


class PricingService:

    @staticmethod
    def quantize(amount: Decimal) -> Decimal:
        """Round to the configured currency's minor unit (VND has none)."""
        quantum = Decimal(1).scaleb(-config.CURRENCY.get_decimals())
        return amount.quantize(quantum, rounding=ROUND_HALF_UP)

    @staticmethod
    def line_total(item: LineItemDTO) -> Decimal:
        return PricingService.quantize(item.unit_price * item.quantity)

    @staticmethod
    def calculate_total(items: Iterable[LineItemDTO]) -> Decimal:
        """
        Sum of unit_price * quantity over the given lines.

        Pure function: reads the line snapshots only, never the catalog.
        """
        total = Decimal("0")
        for item in items:
            total += PricingService.line_total(item)
        return PricingService.quantize(total)
