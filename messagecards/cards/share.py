"""Share URL shape: <SHARE_BASE_URL>/card/<id>."""
from __future__ import annotations

from typing import Optional
from urllib.parse import urlparse

from messagecards.config import runtime_config

SHARE_PATH_PREFIX = "/card/"


def build_share_url(card_id: str, base_url: Optional[str] = None) -> str:
    base = (base_url or runtime_config.get_share_base_url()).rstrip("/")
    return f"{base}{SHARE_PATH_PREFIX}{card_id}"


def parse_share_url(url: str) -> Optional[str]:
    """Return the card id carried by a share URL, or None if the path does not match."""
    path = urlparse(url or "").path
    if not path.startswith(SHARE_PATH_PREFIX):
        return None
    card_id = path[len(SHARE_PATH_PREFIX):].strip("/")
    if not card_id or "/" in card_id:
        return None
    return card_id
