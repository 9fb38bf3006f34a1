from enum import Enum


class OrderSource(str, Enum):
    """Channel an order came in through."""
    POS = "pos"
    WEB = "web"
    PHONE = "phone"
    FACEBOOK = "facebook"
    ZALO = "zalo"
    SHOPEE = "shopee"
    LAZADA = "lazada"
    OTHER = "other"
