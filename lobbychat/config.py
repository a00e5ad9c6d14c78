# Client Configuration
# Defaults for a session, overridable from the environment

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .common.client_state import EMOJI_PALETTE, Theme
from .common.reactions import QUICK_REACTIONS
from .common.roster import AVATAR_BASE

DEFAULT_SERVER_URL = "ws://127.0.0.1:8080"


@dataclass
class SessionConfig:
    """
    Settings shared by the controller, transport and CLI.

    Environment overrides (see from_env):
    - LOBBYCHAT_SERVER_URL: WebSocket endpoint
    - LOBBYCHAT_AVATAR_BASE: avatar image service prefix
    - LOBBYCHAT_THEME: initial theme (light/dark/ocean/forest)
    """
    server_url: str = DEFAULT_SERVER_URL
    avatar_base: str = AVATAR_BASE
    default_theme: Theme = Theme.DARK
    emoji_palette: Tuple[str, ...] = EMOJI_PALETTE
    quick_reactions: Tuple[str, ...] = QUICK_REACTIONS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'SessionConfig':
        """
        Build a config from environment variables.

        Args:
            environ: Mapping to read (defaults to os.environ)

        Returns:
            SessionConfig with any set variables applied
        """
        env = os.environ if environ is None else environ
        config = cls()
        if env.get("LOBBYCHAT_SERVER_URL"):
            config.server_url = env["LOBBYCHAT_SERVER_URL"]
        if env.get("LOBBYCHAT_AVATAR_BASE"):
            config.avatar_base = env["LOBBYCHAT_AVATAR_BASE"]
        if env.get("LOBBYCHAT_THEME"):
            config.default_theme = Theme.parse(env["LOBBYCHAT_THEME"])
        return config
