# Reaction Ledger
# Per-message tally of reaction symbols; counts only go up

from typing import Dict

QUICK_REACTIONS = ("👍", "❤️", "😂")


class ReactionLedger:
    """
    Maps message position -> {symbol: count}.

    Entries are created on first use. Every increment adds exactly one,
    with no per-user dedup: reacting twice counts twice.
    """

    def __init__(self):
        # Map: position -> (symbol -> count), symbols in first-use order
        self.tallies: Dict[int, Dict[str, int]] = {}

    def increment(self, position: int, symbol: str) -> int:
        """
        Count one reaction.

        Returns:
            New count for (position, symbol)
        """
        tally = self.tallies.setdefault(position, {})
        tally[symbol] = tally.get(symbol, 0) + 1
        return tally[symbol]

    def get(self, position: int) -> Dict[str, int]:
        """Copy of the tally for a position (empty if none)."""
        return dict(self.tallies.get(position, {}))
