"""
Presence registry: which connections are joined participants
"""

from typing import Dict, List, Optional

from .models import Participant
from .logger import get_logger, log_connection_event

logger = get_logger()


class PresenceRegistry:
    """
    Maps connection ids to joined participants.

    Not synchronized on its own; callers mutate it only from the
    serialized event path of SessionHandler.
    """

    def __init__(self):
        # connection_id -> Participant
        self._participants: Dict[str, Participant] = {}

    def add(self, connection_id: str, name: str) -> Participant:
        """
        Register or rename the participant behind a connection

        Args:
            connection_id: Transport connection identifier
            name: Display name that already passed validation

        Returns:
            The stored Participant
        """
        previous = self._participants.get(connection_id)
        participant = Participant(connection_id=connection_id, name=name)
        self._participants[connection_id] = participant

        if previous is not None:
            log_connection_event(connection_id, "rename", name, f"previous={previous.name}")
        else:
            log_connection_event(connection_id, "join", name, f"online={len(self._participants)}")
        return participant

    def remove(self, connection_id: str) -> Optional[Participant]:
        """
        Remove the participant behind a connection

        Args:
            connection_id: Transport connection identifier

        Returns:
            The removed Participant, or None if the connection never joined
        """
        participant = self._participants.pop(connection_id, None)
        if participant is not None:
            log_connection_event(connection_id, "leave", participant.name, f"online={len(self._participants)}")
        return participant

    def get(self, connection_id: str) -> Optional[Participant]:
        return self._participants.get(connection_id)

    def size(self) -> int:
        return len(self._participants)

    def __len__(self) -> int:
        return len(self._participants)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._participants

    def participants(self) -> List[Participant]:
        """Snapshot of current participants in join order"""
        return list(self._participants.values())
