"""Slug <-> token mapping for callback payloads.

Catalog slugs can be long and contain arbitrary characters, while Telegram
limits callback data to 64 bytes. SlugMapper replaces each slug with a short
token: the first 16 hex characters of its SHA-256 digest. When two slugs
truncate to the same digest, the later one gets the next numeric suffix for
that digest (1, 2, ...). A token is bound to one slug for the lifetime of the
mapper, even after that slug is evicted.

Tokens are deterministic but not stable across restarts (suffix assignment
depends on insertion order). The map is bounded: once it holds max_entries
slugs, the least recently used pair is dropped. A button carrying an evicted
token then resolves to nothing and handlers fall back to the raw token; asking
for the evicted slug again restores its original token. The per-digest issue
record grows only with distinct slugs, which all come from the catalog.

Key class: SlugMapper.
"""

import hashlib
import logging
import threading
from collections import OrderedDict

logger = logging.getLogger(__name__)

TOKEN_LENGTH = 16  # hex chars = 8 bytes of digest


def _compute_token(slug: str) -> str:
    return hashlib.sha256(slug.encode("utf-8")).hexdigest()[:TOKEN_LENGTH].upper()


class SlugMapper:
    """Bidirectional, bounded slug/token map."""

    def __init__(self, max_entries: int = 50_000) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._slug_to_token: OrderedDict[str, str] = OrderedDict()
        self._token_to_slug: dict[str, str] = {}
        # digest -> slugs in the order their tokens were issued; the index is
        # the suffix, so a token is never reissued to another slug
        self._issued: dict[str, list[str]] = {}
        self._lock = threading.Lock()

    def _issue(self, slug: str) -> str:
        # Caller holds the lock
        base = _compute_token(slug)
        owners = self._issued.setdefault(base, [])
        if slug in owners:
            suffix = owners.index(slug)
        else:
            suffix = len(owners)
            owners.append(slug)
            if suffix:
                logger.warning(
                    "Token collision for slug %r (digest %s), using suffix %d",
                    slug,
                    base,
                    suffix,
                )
        return f"{base}{suffix}" if suffix else base

    def get_or_create_token(self, slug: str) -> str:
        """Return the token for ``slug``, creating one if needed."""
        with self._lock:
            token = self._slug_to_token.get(slug)
            if token is not None:
                self._slug_to_token.move_to_end(slug)
                return token

            token = self._issue(slug)
            self._slug_to_token[slug] = token
            self._token_to_slug[token] = slug
            while len(self._slug_to_token) > self.max_entries:
                old_slug, old_token = self._slug_to_token.popitem(last=False)
                del self._token_to_slug[old_token]
                logger.debug("Evicted token %s for slug %r", old_token, old_slug)
            return token

    def get_slug(self, token: str) -> str | None:
        """Return the slug bound to ``token``, or None if unknown."""
        with self._lock:
            return self._token_to_slug.get(token)

    def resolve(self, token: str) -> str:
        """Return the slug for ``token``, or the token itself when unmapped."""
        slug = self.get_slug(token)
        return slug if slug is not None else token

    def __len__(self) -> int:
        with self._lock:
            return len(self._slug_to_token)
