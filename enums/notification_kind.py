from enum import Enum


class NotificationKind(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"
