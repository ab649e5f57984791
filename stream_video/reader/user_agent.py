from __future__ import annotations

import re
from typing import Optional
from typing import Protocol

from stream_video.config import SAFARI_BROWSER_PATTERN


class UserAgentClassifier(Protocol):
    def is_legacy_browser(self, user_agent: Optional[str]) -> bool:
        """True when the client cannot accept a 206 answer to its first probe."""
        ...


class RegexUserAgentClassifier:
    """Flags user agents matching a configured pattern (desktop Safari by default)."""

    def __init__(self, pattern: str = SAFARI_BROWSER_PATTERN) -> None:
        self._pattern = re.compile(pattern, re.IGNORECASE)

    def is_legacy_browser(self, user_agent: Optional[str]) -> bool:
        if not user_agent:
            return False
        return self._pattern.search(user_agent) is not None
