"""
Draft State Machine for validating POS draft status transitions.

This module implements a small finite state machine so that every change of a
draft's submission status goes through one place and gets logged.
"""

import logging
from typing import Dict, List, Set

from enums.draft_status import DraftStatus
from exceptions import InvalidDraftStateException

logger = logging.getLogger(__name__)


class DraftStatusTransition:
    """Represents a valid status transition with metadata"""

    def __init__(self, from_status: DraftStatus, to_status: DraftStatus, description: str = ""):
        self.from_status = from_status
        self.to_status = to_status
        self.description = description

    def __repr__(self):
        return f"{self.from_status.value} -> {self.to_status.value}"


class DraftStateMachine:
    """
    Finite state machine for draft status transitions.

    Valid status transitions:
    - OPEN -> SUBMITTING (staff pressed "create order")
    - OPEN -> CLOSED (tab closed by staff)
    - SUBMITTING -> CLOSED (order placed)
    - SUBMITTING -> OPEN (order placement failed, draft is editable again)

    CLOSED is final.
    """

    VALID_TRANSITIONS: List[DraftStatusTransition] = [
        DraftStatusTransition(DraftStatus.OPEN, DraftStatus.SUBMITTING, "Order submitted"),
        DraftStatusTransition(DraftStatus.OPEN, DraftStatus.CLOSED, "Tab closed"),
        DraftStatusTransition(DraftStatus.SUBMITTING, DraftStatus.CLOSED, "Order placed"),
        DraftStatusTransition(DraftStatus.SUBMITTING, DraftStatus.OPEN, "Order placement failed"),
    ]

    _transition_map: Dict[DraftStatus, Set[DraftStatus]] = {}
    _transition_descriptions: Dict[tuple, str] = {}

    @classmethod
    def _build_transition_map(cls):
        """Build internal transition maps"""
        if cls._transition_map:
            return

        for transition in cls.VALID_TRANSITIONS:
            cls._transition_map.setdefault(transition.from_status, set()).add(transition.to_status)
            cls._transition_descriptions[(transition.from_status, transition.to_status)] = transition.description

    @classmethod
    def is_valid_transition(cls, from_status: DraftStatus, to_status: DraftStatus) -> bool:
        """
        Check if a status transition is valid.

        Staying in the same status is allowed (a second submit while one is in
        flight is a no-op transition, not an error).
        """
        cls._build_transition_map()

        if from_status == to_status:
            return True

        return to_status in cls._transition_map.get(from_status, set())

    @classmethod
    def get_valid_transitions(cls, from_status: DraftStatus) -> List[DraftStatus]:
        cls._build_transition_map()
        return list(cls._transition_map.get(from_status, set()))

    @classmethod
    def transition(cls, draft_id: str, from_status: DraftStatus, to_status: DraftStatus) -> DraftStatus:
        """
        Validate and log a transition.

        Returns:
            The new status

        Raises:
            InvalidDraftStateException: if the transition is not allowed
        """
        if not cls.is_valid_transition(from_status, to_status):
            logger.error(f"Invalid status transition for draft {draft_id}: {from_status.value} -> {to_status.value}")
            allowed = ", ".join(s.value for s in cls.get_valid_transitions(from_status)) or "none"
            raise InvalidDraftStateException(draft_id, from_status.value, allowed)

        if from_status != to_status:
            description = cls._transition_descriptions.get((from_status, to_status), "")
            logger.info(f"DRAFT_STATUS_TRANSITION: Draft {draft_id} {from_status.value} -> {to_status.value}: {description}")
        return to_status
