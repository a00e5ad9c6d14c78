#!/usr/bin/env python3
"""
Offline Demo: LobbyChat Session Core
====================================

Runs three chat sessions against an in-memory loopback hub, no network
needed.

What it shows:
- Registration and roster updates
- Round-trip message display (sent text appears only once echoed back)
- Grouping of consecutive messages by sender
- Reactions, themes and the emoji picker
- Malformed frames being dropped without ending the session
"""

import logging
import queue
from typing import Dict, List, Optional

from .client.relay import FrameRelay
from .client.session import SessionController, open_session
from .client.transport import SendError
from .common.client_state import SessionSnapshot, Theme
from .common.protocol import ChatFrame, RegisterFrame, RosterFrame, decode, encode
from .config import SessionConfig


class LoopbackHub:
    """
    Stand-in for the remote end: keeps the roster of registered names and
    echoes every chat frame back to all connected clients.
    """

    def __init__(self):
        self.relays: Dict[str, FrameRelay] = {}
        self.names: List[str] = []

    def connect(self, client_id: str) -> 'LoopbackTransport':
        relay = FrameRelay()
        self.relays[client_id] = relay
        return LoopbackTransport(self, client_id, relay)

    def disconnect(self, client_id: str) -> None:
        self.relays.pop(client_id, None)
        if client_id in self.names:
            self.names.remove(client_id)
            self.broadcast(encode(RosterFrame(names=tuple(self.names))))

    def receive(self, client_id: str, text: str) -> None:
        frame = decode(text)
        if isinstance(frame, RegisterFrame):
            self.names.append(frame.display_name)
            self.broadcast(encode(RosterFrame(names=tuple(self.names))))
        elif isinstance(frame, ChatFrame):
            self.broadcast(text)

    def broadcast(self, text: str) -> None:
        for relay in list(self.relays.values()):
            relay.publish(text)


class LoopbackTransport:
    """Transport whose other end is a LoopbackHub."""

    def __init__(self, hub: LoopbackHub, client_id: str, relay: FrameRelay):
        self.hub = hub
        self.client_id = client_id
        self.relay = relay
        self.connected = True

    def send(self, text: str) -> None:
        if not self.connected:
            raise SendError(f"{self.client_id} is disconnected")
        self.hub.receive(self.client_id, text)

    def close(self) -> None:
        self.connected = False
        self.hub.disconnect(self.client_id)


class DemoClient:
    """One session plus its inbox; frames wait in the inbox until pumped."""

    def __init__(self, hub: LoopbackHub, name: str, config: Optional[SessionConfig] = None):
        self.inbox: "queue.Queue[str]" = queue.Queue()
        self.transport = hub.connect(name)
        self.transport.relay.subscribe(self.inbox.put)
        self.renders: List[SessionSnapshot] = []
        self.session: SessionController = open_session(
            name, self.transport, config, on_render=self.renders.append)

    def pump(self) -> int:
        """Feed queued frames to the session; returns how many were handled."""
        handled = 0
        while True:
            try:
                text = self.inbox.get_nowait()
            except queue.Empty:
                return handled
            self.session.handle_frame(text)
            handled += 1


def pump_all(clients: List[DemoClient]) -> None:
    for client in clients:
        client.pump()


def print_transcript(snapshot: SessionSnapshot) -> None:
    print(f"[{snapshot.display_name}] {snapshot.theme.label} | "
          f"{snapshot.active_user_count} Active Users: "
          f"{', '.join(p.name for p in snapshot.participants)}")
    for view in snapshot.messages:
        if view.starts_group:
            print(f"  {view.sender}  ({view.avatar_url})")
        reactions = "  ".join(f"{s} {c}" for s, c in view.reactions)
        print(f"    #{view.position} {view.body}" + (f"   [{reactions}]" if reactions else ""))


def run_demo() -> Dict[str, SessionSnapshot]:
    """
    Scripted three-party chat.

    Returns:
        Final snapshot per participant
    """
    hub = LoopbackHub()
    alice = DemoClient(hub, "alice")
    bob = DemoClient(hub, "bob")
    charlie = DemoClient(hub, "charlie")
    clients = [alice, bob, charlie]
    pump_all(clients)

    print("📡 PHASE 1: Registration")
    for client in clients:
        print(f"  {client.session.display_name}: {client.session.phase.value}")

    print("\n💬 PHASE 2: Messaging")
    for client, text in [(alice, "Hello from Alice!"), (alice, "Anyone here?"),
                         (bob, "Hi everyone, Bob here"), (charlie, "Charlie checking in")]:
        client.session.set_composition(text)
        client.session.submit()
        pump_all(clients)

    print("\n😊 PHASE 3: Emoji, reactions and themes")
    bob.session.toggle_emoji_picker()
    bob.session.set_composition("party time")
    bob.session.pick_emoji("🎉")
    bob.session.submit()
    pump_all(clients)

    for symbol in ("👍", "👍", "❤️"):
        charlie.session.react(0, symbol)
    alice.session.select_theme(Theme.OCEAN)

    print("\n🚨 PHASE 4: Malformed frames are dropped")
    for bad in ['{"messageType":"bogus"}', '{"messageType":"message"}', "not json"]:
        changed = alice.session.handle_frame(bad)
        print(f"  {bad!r}: re-rendered={changed}")

    print("\n📜 Final views")
    snapshots = {}
    for client in clients:
        snapshot = client.session.snapshot()
        snapshots[snapshot.display_name] = snapshot
        print_transcript(snapshot)
    return snapshots


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    print("=" * 70)
    print("                   💬 LOBBYCHAT DEMO 💬")
    print("=" * 70)
    run_demo()
