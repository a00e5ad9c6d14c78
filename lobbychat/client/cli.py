# Interactive Terminal Client
# Runs one chat session over a WebSocket connection from the command line

import argparse
import logging
import queue
import sys
import threading
import time
from typing import List, Optional, Tuple

from ..common.client_state import EMOJI_PALETTE, SessionSnapshot, Theme
from ..common.message_log import MessageNotFound
from ..config import SessionConfig
from .relay import FrameRelay
from .session import SessionController, open_session
from .websocket_transport import WebSocketTransport

HELP = """Commands:
  /theme <light|dark|ocean|forest>  - Change theme
  /emoji                            - Show or hide the emoji picker
  /emoji <symbol>                   - Add an emoji to your next message
  /react <n> [symbol]               - React to message #n (default 👍)
  /users                            - List participants
  /quit                             - Exit

Anything else is sent as a chat message."""


class TerminalRenderer:
    """Prints what changed between snapshots."""

    def __init__(self, emoji_palette: Tuple[str, ...] = EMOJI_PALETTE, out=None):
        self.emoji_palette = emoji_palette
        self.out = out or sys.stdout
        self.shown_messages = 0
        self.roster: Tuple[str, ...] = ()
        self.reactions = {}
        self.theme: Optional[Theme] = None
        self.picker_open = False

    def __call__(self, snapshot: SessionSnapshot) -> None:
        names = tuple(p.name for p in snapshot.participants)
        if names != self.roster:
            self.roster = names
            self._print(f"👥 {snapshot.active_user_count} Active Users: {', '.join(names) or '-'}")

        if self.theme is not None and snapshot.theme is not self.theme:
            self._print(f"🎨 Theme: {snapshot.theme.label}")
        self.theme = snapshot.theme

        for view in snapshot.messages[self.shown_messages:]:
            if view.starts_group:
                self._print(f"{view.sender}:")
            body = f"[image] {view.body}" if view.is_image else view.body
            self._print(f"  #{view.position} {body}")
        self.shown_messages = len(snapshot.messages)

        for view in snapshot.messages:
            if view.reactions and self.reactions.get(view.position) != view.reactions:
                tally = "  ".join(f"{symbol} {count}" for symbol, count in view.reactions)
                self._print(f"  #{view.position} reactions: {tally}")
            self.reactions[view.position] = view.reactions

        if snapshot.emoji_picker_open and not self.picker_open:
            self._print("😊 " + " ".join(self.emoji_palette))
        self.picker_open = snapshot.emoji_picker_open

        if snapshot.send_error:
            self._print(f"⚠️  {snapshot.send_error}")

    def _print(self, line: str) -> None:
        print(line, file=self.out, flush=True)


def dispatch_command(session: SessionController, line: str) -> bool:
    """
    Apply one line of user input to the session.

    Args:
        session: Controller to drive
        line: Stripped input line

    Returns:
        False when the user asked to quit
    """
    if line == "/quit":
        return False

    if line.startswith("/theme "):
        session.select_theme(line[len("/theme "):])

    elif line == "/emoji":
        session.toggle_emoji_picker()

    elif line.startswith("/emoji "):
        session.pick_emoji(line[len("/emoji "):].strip())

    elif line.startswith("/react "):
        parts = line.split()
        try:
            position = int(parts[1])
        except (IndexError, ValueError):
            print("Usage: /react <n> [symbol]")
            return True
        symbol = parts[2] if len(parts) > 2 else session.config.quick_reactions[0]
        try:
            session.react(position, symbol)
        except MessageNotFound as e:
            print(f"❌ {e}")

    elif line == "/users":
        for participant in session.snapshot().participants:
            print(f"  {participant.name}  {participant.avatar_url}")

    elif line.startswith("/"):
        print(HELP)

    else:
        # Emoji picked earlier are already in the buffer; the typed text goes first
        session.set_composition(line + session.state.composition)
        session.submit()

    return True


def read_stdin(events: "queue.Queue") -> None:
    """Forward stdin lines to the session thread; None marks end of input."""
    try:
        for raw in sys.stdin:
            events.put(("line", raw.strip()))
    finally:
        events.put(("line", None))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lobbychat", description="Terminal chat client")
    parser.add_argument("--url", help="WebSocket server URL (env: LOBBYCHAT_SERVER_URL)")
    parser.add_argument("--name", help="Display name (prompted if omitted)")
    parser.add_argument("--theme", help="Initial theme: light, dark, ocean or forest")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SessionConfig.from_env()
    if args.url:
        config.server_url = args.url
    if args.theme:
        config.default_theme = Theme.parse(args.theme)

    print("=" * 60)
    print("                  💬 LOBBYCHAT CLIENT 💬")
    print("=" * 60)
    print(HELP)
    print("=" * 60)

    name = args.name or input("Enter your username: ").strip()
    if not name:
        name = f"user_{int(time.time())}"
        print(f"Using auto-generated name: {name}")

    # Single owner: only this thread touches the session
    events: "queue.Queue" = queue.Queue()
    relay = FrameRelay()
    unsubscribe = relay.subscribe(lambda text: events.put(("frame", text)))

    transport = WebSocketTransport(config.server_url, relay)
    if not transport.connect():
        print(f"❌ Failed to connect to {config.server_url}")
        return 1

    session = open_session(name, transport, config, on_render=TerminalRenderer(config.emoji_palette))
    threading.Thread(target=read_stdin, args=(events,), daemon=True).start()

    try:
        while True:
            kind, payload = events.get()
            if kind == "frame":
                session.handle_frame(payload)
            elif payload is None or not dispatch_command(session, payload):
                break
    except KeyboardInterrupt:
        print()
        print("Interrupted")
    finally:
        unsubscribe()
        transport.close()
        print("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
