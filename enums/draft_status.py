from enum import Enum


class DraftStatus(str, Enum):
    OPEN = "OPEN"                # Editable, visible as a tab
    SUBMITTING = "SUBMITTING"    # Order placement call in flight
    CLOSED = "CLOSED"            # Submitted successfully or closed by staff
