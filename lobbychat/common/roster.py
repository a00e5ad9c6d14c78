# Roster Management
# Tracks present participants; the roster is replaced wholesale on each users frame

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple
from urllib.parse import quote

AVATAR_BASE = "https://avatars.dicebear.com/api/adventurer-neutral/"


def avatar_url(name: str, base: str = AVATAR_BASE) -> str:
    """Deterministic avatar image URL for a display name."""
    return f"{base}{quote(name, safe='')}.svg"


@dataclass(frozen=True)
class Participant:
    """A present user as shown in the side panel."""
    name: str
    avatar_url: str

    @classmethod
    def for_name(cls, name: str, base: str = AVATAR_BASE) -> 'Participant':
        return cls(name=name, avatar_url=avatar_url(name, base))


class Roster:
    """
    Current set of known participants.

    Never patched incrementally: every users frame carries the full list,
    and replace() swaps it in as given (order and duplicates preserved).
    """

    def __init__(self, avatar_base: str = AVATAR_BASE):
        self.avatar_base = avatar_base
        self._participants: Tuple[Participant, ...] = ()

    def replace(self, names: Iterable[str]) -> Tuple[Participant, ...]:
        """
        Replace the roster with the given names.

        Args:
            names: Full participant list from the latest users frame

        Returns:
            The committed participants
        """
        self._participants = tuple(Participant.for_name(n, self.avatar_base) for n in names)
        return self._participants

    @property
    def participants(self) -> Tuple[Participant, ...]:
        return self._participants

    def profile_for(self, name: str) -> Participant:
        """Roster entry for name, or a derived one for senders not present."""
        for participant in self._participants:
            if participant.name == name:
                return participant
        return Participant.for_name(name, self.avatar_base)

    def __len__(self) -> int:
        return len(self._participants)

    def __iter__(self) -> Iterator[Participant]:
        return iter(self._participants)
