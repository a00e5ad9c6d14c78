# Client Session State Management
# Tracks roster, message log, reactions, theme and composer UI state

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .grouping import group_starts
from .message_log import MessageLog
from .reactions import ReactionLedger
from .roster import AVATAR_BASE, Participant, Roster

EMOJI_PALETTE = (
    "😀", "😂", "😊", "🥰", "😎", "😍", "🙄", "😴",
    "🤔", "🤯", "😱", "🥳", "😭", "😡", "🤢", "👍",
    "👎", "👏", "🙏", "💪", "🤝", "❤️", "💔", "💯",
    "🔥", "💩", "🎉", "✨", "🌈", "⭐", "🎁", "🏆",
)


class Theme(str, Enum):
    """Visual presets; selected locally, never sent to the server."""
    LIGHT = "light"
    DARK = "dark"
    OCEAN = "ocean"
    FOREST = "forest"

    @property
    def label(self) -> str:
        return _THEME_LABELS[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> 'Theme':
        """Theme for a selector value; anything unrecognised means Dark."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.DARK


_THEME_LABELS = {
    Theme.LIGHT: "☀️ Light",
    Theme.DARK: "🌙 Dark",
    Theme.OCEAN: "🌊 Ocean",
    Theme.FOREST: "🌲 Forest",
}


class SessionPhase(str, Enum):
    """Lifecycle of one session, from creation to the first inbound frame."""
    CONNECTING = "connecting"
    REGISTERING = "registering"
    ACTIVE = "active"


@dataclass
class SessionState:
    """Complete client session state. Mutated only by the SessionController."""
    display_name: str
    avatar_base: str = AVATAR_BASE
    phase: SessionPhase = SessionPhase.CONNECTING

    roster: Roster = field(init=False)
    log: MessageLog = field(default_factory=MessageLog)
    reactions: ReactionLedger = field(default_factory=ReactionLedger)

    # Composer / UI
    theme: Theme = Theme.DARK
    emoji_picker_open: bool = False
    composition: str = ""

    # Last failed send, shown as a transient notice until the next good send
    send_error: Optional[str] = None

    def __post_init__(self):
        self.roster = Roster(avatar_base=self.avatar_base)

    def snapshot(self) -> 'SessionSnapshot':
        """Detached, read-only projection of the current state."""
        messages = tuple(self.log)
        views = tuple(
            MessageView(
                position=position,
                sender=message.sender,
                body=message.body,
                avatar_url=self.roster.profile_for(message.sender).avatar_url,
                starts_group=starts,
                is_image=message.is_image,
                reactions=tuple(self.reactions.get(position).items()),
            )
            for position, (message, starts) in enumerate(zip(messages, group_starts(messages)))
        )
        return SessionSnapshot(
            phase=self.phase,
            display_name=self.display_name,
            participants=self.roster.participants,
            messages=views,
            theme=self.theme,
            emoji_picker_open=self.emoji_picker_open,
            composition=self.composition,
            send_error=self.send_error,
        )


@dataclass(frozen=True)
class MessageView:
    """One message as the renderer needs it."""
    position: int
    sender: str
    body: str
    avatar_url: str
    starts_group: bool
    is_image: bool
    reactions: Tuple[Tuple[str, int], ...] = ()


@dataclass(frozen=True)
class SessionSnapshot:
    """What a render pass sees. Never changes after it is issued."""
    phase: SessionPhase
    display_name: str
    participants: Tuple[Participant, ...]
    messages: Tuple[MessageView, ...]
    theme: Theme
    emoji_picker_open: bool
    composition: str
    send_error: Optional[str] = None

    @property
    def active_user_count(self) -> int:
        return len(self.participants)
