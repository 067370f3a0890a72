"""
Participants remembered across analyses.

Saved participants live as one JSON list under a single key of the local
key-value store, so names and relationships entered once are filled in again
when the same people are identified in a later clip.
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from eintsofia.domain.models.interaction import Participant, SavedParticipant
from eintsofia.infrastructure.constants.llm_constants import SAVED_PARTICIPANTS_KEY
from eintsofia.infrastructure.persistence.key_value_store import KeyValueStore
from eintsofia.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)

_saved_list = TypeAdapter(List[SavedParticipant])


class ParticipantStats(BaseModel):
    total: int
    most_used: Optional[SavedParticipant] = None


class ParticipantStore:
    """
    Saved participants keyed by case-insensitive name.

    Saving a name that already exists replaces its details and bumps
    ``usage_count``.
    """

    def __init__(
        self,
        kv_store: KeyValueStore,
        clock: Callable[[], datetime] = utc_now,
        key: str = SAVED_PARTICIPANTS_KEY,
    ):
        self.kv_store = kv_store
        self.clock = clock
        self.key = key

    def load_all(self) -> List[SavedParticipant]:
        """Every saved participant; an unreadable entry reads as empty."""
        raw = self.kv_store.get(self.key)
        if raw is None:
            return []
        try:
            return _saved_list.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable saved participants: {e}")
            return []

    def _write(self, saved: List[SavedParticipant]) -> None:
        self.kv_store.set(self.key, _saved_list.dump_json(saved).decode("utf-8"))

    def save(self, participant: Participant) -> SavedParticipant:
        saved = self.load_all()
        stored = self._merge(saved, participant)
        self._write(saved)
        logger.info(f"Saved participant {participant.name} (used {stored.usage_count}x)")
        return stored

    def save_many(self, participants: Iterable[Participant]) -> List[SavedParticipant]:
        saved = self.load_all()
        stored = [self._merge(saved, p) for p in participants]
        self._write(saved)
        logger.info(f"Saved {len(stored)} participants")
        return stored

    def _merge(self, saved: List[SavedParticipant], participant: Participant) -> SavedParticipant:
        # Updates ``saved`` in place
        fields = participant.model_dump(include=set(Participant.model_fields))
        name = participant.name.lower()
        for i, existing in enumerate(saved):
            if existing.name.lower() == name:
                saved[i] = SavedParticipant(
                    **fields, saved_at=self.clock(), usage_count=existing.usage_count + 1
                )
                return saved[i]
        stored = SavedParticipant(**fields, saved_at=self.clock(), usage_count=1)
        saved.append(stored)
        return stored

    def find_match(
        self, description: str, age: Optional[int] = None
    ) -> Optional[SavedParticipant]:
        """
        Saved participant matching ``description``.

        An exact (case-insensitive) name match wins; otherwise the first one
        whose notes contain the (non-empty) description or whose age equals
        ``age``.
        """
        saved = self.load_all()
        needle = description.lower()

        for participant in saved:
            if participant.name.lower() == needle:
                return participant

        for participant in saved:
            notes_match = (
                bool(needle)
                and participant.notes is not None
                and needle in participant.notes.lower()
            )
            age_match = bool(age) and participant.age == age
            if notes_match or age_match:
                return participant
        return None

    def autofill(self, identified: List[Participant]) -> List[Participant]:
        """
        Fill names and relationships of freshly identified participants from saved ones.

        Matching uses the identified notes and age. The identified notes are
        kept, and the saved notes are appended under a heading.
        """
        filled = []
        for participant in identified:
            match = self.find_match(participant.notes or "", participant.age)
            if match is None:
                filled.append(participant)
                continue

            logger.info(f"Auto-filled {participant.id} from saved participant {match.name}")
            notes = participant.notes
            if match.notes:
                notes = f"{participant.notes or ''}\n\nהערות קודמות: {match.notes}"
            filled.append(
                participant.model_copy(
                    update={
                        "name": match.name,
                        "relationship": match.relationship,
                        "notes": notes,
                    }
                )
            )
        return filled

    def clear(self) -> None:
        self.kv_store.delete(self.key)
        logger.info("Cleared all saved participants")

    def stats(self) -> ParticipantStats:
        saved = self.load_all()
        if not saved:
            return ParticipantStats(total=0)
        most_used = saved[0]
        for participant in saved[1:]:
            if participant.usage_count > most_used.usage_count:
                most_used = participant
        return ParticipantStats(total=len(saved), most_used=most_used)
