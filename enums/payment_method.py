from enum import Enum


class PaymentMethod(str, Enum):
    CASH = "cash"        # Paid at the counter
    COD = "cod"          # Cash on delivery
    ONLINE = "online"    # Bank transfer
