import json
from decimal import Decimal, ROUND_HALF_UP
from functools import lru_cache
from pathlib import Path
from typing import Optional

import config
from enums.store_entity import StoreEntity

L10N_DIR = Path(__file__).resolve().parent.parent / "l10n"


@lru_cache(maxsize=None)
def _load(language: str) -> dict:
    with open(L10N_DIR / f"{language}.json", "r", encoding="UTF-8") as f:
        return json.loads(f.read())


class Localizator:

    @staticmethod
    def get_text(entity: StoreEntity, key: str, lang: Optional[str] = None) -> str:
        """
        Get localized text for given entity and key.

        Args:
            entity: Entity type (CUSTOMER, STAFF, COMMON)
            key: Localization key
            lang: Optional language code ("vi", "en").
                  If None, uses config.STORE_LANGUAGE.

        Returns:
            Localized text string
        """
        language = lang if lang is not None else config.STORE_LANGUAGE
        data = _load(language)
        if entity == StoreEntity.CUSTOMER:
            return data["customer"][key]
        elif entity == StoreEntity.STAFF:
            return data["staff"][key]
        else:
            return data["common"][key]

    @staticmethod
    def get_currency_symbol(lang: Optional[str] = None):
        return Localizator.get_text(StoreEntity.COMMON, f"{config.CURRENCY.value.lower()}_symbol", lang=lang)

    @staticmethod
    def format_price(amount: Decimal | int | float, lang: Optional[str] = None) -> str:
        """
        Format an amount in the configured currency.

        Examples:
            >>> # CURRENCY = VND, STORE_LANGUAGE = "vi"
            >>> Localizator.format_price(Decimal("100000"))
            '100.000 đ'
            >>> # CURRENCY = USD, STORE_LANGUAGE = "en"
            >>> Localizator.format_price(Decimal("12.5"))
            '12.50 $'
        """
        decimals = config.CURRENCY.get_decimals()
        quantum = Decimal(1).scaleb(-decimals)
        value = Decimal(str(amount)).quantize(quantum, rounding=ROUND_HALF_UP)
        text = f"{value:,.{decimals}f}"
        language = lang if lang is not None else config.STORE_LANGUAGE
        if language == "vi":
            # Vietnamese grouping uses dots and a decimal comma
            text = text.replace(",", "_").replace(".", ",").replace("_", ".")
        return f"{text} {Localizator.get_currency_symbol(lang)}"
