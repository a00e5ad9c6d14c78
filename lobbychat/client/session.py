# Session Controller
# State machine driving one chat session from inbound frames and local intents

import logging
from typing import Callable, List, Optional, Union

from ..common.client_state import SessionPhase, SessionSnapshot, SessionState, Theme
from ..common.message_log import ChatMessage, MessageNotFound
from ..common.protocol import (
    ChatFrame, DecodeError, Frame, ProtocolViolation, RegisterFrame, RosterFrame,
    decode, encode,
)
from ..config import SessionConfig
from .transport import SendError, Transport

logger = logging.getLogger(__name__)

RenderListener = Callable[[SessionSnapshot], None]


class SessionController:
    """
    Client-side session core.

    Owns the SessionState and is the only thing that mutates it. Each
    trigger (inbound frame or local intent) runs to completion before the
    next; callers must not invoke it from more than one thread.

    Phases:
    1. CONNECTING: created, display name known
    2. REGISTERING: register frame sent by start()
    3. ACTIVE: first valid inbound frame received

    Handlers return True when they triggered a re-render, mirroring what
    render listeners observe.
    """

    def __init__(self, display_name: str, transport: Transport,
                 config: Optional[SessionConfig] = None):
        """Initialize session for display_name; nothing is sent until start()."""
        self.config = config or SessionConfig()
        self.transport = transport
        self.state = SessionState(
            display_name=display_name,
            avatar_base=self.config.avatar_base,
            theme=self.config.default_theme,
        )
        self.render_listeners: List[RenderListener] = []
        self.registered = False

        # Inbound frame handlers
        self.frame_handlers = {
            RosterFrame: self._handle_roster,
            ChatFrame: self._handle_chat,
            RegisterFrame: self._handle_register,
        }

    @property
    def display_name(self) -> str:
        return self.state.display_name

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    def add_render_listener(self, listener: RenderListener) -> None:
        self.render_listeners.append(listener)

    def snapshot(self) -> SessionSnapshot:
        return self.state.snapshot()

    def start(self) -> None:
        """
        Register with the server.

        Sends exactly one register frame and moves to REGISTERING, unless a
        frame already arrived and made the session ACTIVE. A failed send is
        recorded as the session notice; the session keeps going and becomes
        active on the first inbound frame either way.

        Raises:
            RuntimeError: If the session was already started
        """
        if self.registered:
            raise RuntimeError(f"Session already started (phase={self.state.phase.value})")

        self.registered = True
        self._send(RegisterFrame(display_name=self.display_name))
        if self.state.phase is SessionPhase.CONNECTING:
            self.state.phase = SessionPhase.REGISTERING
        logger.debug("[%s] Registering", self.display_name)

    # Inbound

    def handle_frame(self, text: str) -> bool:
        """
        Process one inbound text frame.

        Malformed frames are dropped with a warning and leave state untouched.

        Returns:
            True if the frame changed state and a render was issued
        """
        try:
            frame = decode(text)
        except ProtocolViolation as e:
            logger.warning("[%s] Ignoring frame with missing payload: %s", self.display_name, e)
            return False
        except DecodeError as e:
            logger.warning("[%s] Dropping malformed frame: %s", self.display_name, e)
            return False

        if self.state.phase is not SessionPhase.ACTIVE:
            self.state.phase = SessionPhase.ACTIVE
            logger.info("[%s] Session active", self.display_name)

        handler = self.frame_handlers[type(frame)]
        if handler(frame):
            self._render()
            return True
        return False

    def _handle_roster(self, frame: RosterFrame) -> bool:
        participants = self.state.roster.replace(frame.names)
        logger.debug("[%s] Roster now %d participant(s)", self.display_name, len(participants))
        return True

    def _handle_chat(self, frame: ChatFrame) -> bool:
        position = self.state.log.append(ChatMessage(sender=frame.sender, body=frame.body))
        logger.debug("[%s] Message #%d from %s", self.display_name, position, frame.sender)
        return True

    def _handle_register(self, frame: RegisterFrame) -> bool:
        logger.debug("[%s] Ignoring inbound register frame for %s", self.display_name, frame.display_name)
        return False

    # Local intents

    def set_composition(self, text: str) -> None:
        """Replace the composition buffer (the text being typed)."""
        self.state.composition = text

    def submit(self) -> bool:
        """
        Send the composed text as a chat message.

        The message is not added to the local log; it shows up when the
        server echoes it back. The buffer is cleared even if the send fails.

        Returns:
            True if a render was issued (only when a send failure is shown)
        """
        text = self.state.composition
        if not text:
            return False

        self.state.composition = ""
        if self._send(ChatFrame(sender=self.display_name, body=text)):
            self.state.send_error = None
            return False

        self._render()
        return True

    def select_theme(self, theme: Union[Theme, str]) -> bool:
        """Switch theme; selector strings go through Theme.parse."""
        self.state.theme = theme if isinstance(theme, Theme) else Theme.parse(theme)
        self._render()
        return True

    def toggle_emoji_picker(self) -> bool:
        self.state.emoji_picker_open = not self.state.emoji_picker_open
        self._render()
        return True

    def pick_emoji(self, emoji: str) -> bool:
        """Append emoji to the composition buffer and close the picker."""
        self.state.composition = f"{self.state.composition} {emoji}"
        self.state.emoji_picker_open = False
        self._render()
        return True

    def react(self, position: int, symbol: str) -> int:
        """
        Add one reaction to the message at position.

        Returns:
            New count for symbol on that message

        Raises:
            MessageNotFound: If no message exists at position
        """
        if position not in self.state.log:
            raise MessageNotFound(f"Cannot react to position {position}: log has {len(self.state.log)} message(s)")

        count = self.state.reactions.increment(position, symbol)
        self._render()
        return count

    def dismiss_notice(self) -> bool:
        """Clear the send-failure notice, if any."""
        if self.state.send_error is None:
            return False
        self.state.send_error = None
        self._render()
        return True

    # Helpers

    def _send(self, frame: Frame) -> bool:
        """Fire-and-forget send; failures are logged and recorded, never raised."""
        try:
            self.transport.send(encode(frame))
            return True
        except SendError as e:
            logger.error("[%s] Send failed: %s", self.display_name, e)
            self.state.send_error = f"Could not send {type(frame).__name__}: {e}"
            return False

    def _render(self) -> None:
        if not self.render_listeners:
            return
        snapshot = self.state.snapshot()
        for listener in list(self.render_listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("[%s] Render listener failed", self.display_name)


def open_session(display_name: str, transport: Transport,
                 config: Optional[SessionConfig] = None,
                 on_render: Optional[RenderListener] = None) -> SessionController:
    """Create a controller, attach an optional render listener, and register."""
    controller = SessionController(display_name, transport, config)
    if on_render is not None:
        controller.add_render_listener(on_render)
    controller.start()
    return controller
