from enum import Enum


class StoreEntity(Enum):
    CUSTOMER = 1
    STAFF = 2
    COMMON = 3
