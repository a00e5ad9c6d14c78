# LobbyChat
# Client-side session core for a real-time WebSocket chat

from .client.relay import FrameRelay
from .client.session import SessionController, open_session
from .client.transport import SendError, Transport
from .common.client_state import SessionPhase, SessionSnapshot, Theme
from .common.message_log import ChatMessage, MessageNotFound
from .common.protocol import DecodeError, ProtocolError, ProtocolViolation
from .config import SessionConfig

__version__ = "0.1.0"

__all__ = [
    "ChatMessage",
    "DecodeError",
    "FrameRelay",
    "MessageNotFound",
    "ProtocolError",
    "ProtocolViolation",
    "SendError",
    "SessionConfig",
    "SessionController",
    "SessionPhase",
    "SessionSnapshot",
    "Theme",
    "Transport",
    "open_session",
]
