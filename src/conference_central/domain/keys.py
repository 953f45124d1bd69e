"""Hierarchical entity keys."""

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Self

from conference_central.domain.errors import InvalidKeyError

PROFILE = "Profile"
CONFERENCE = "Conference"
SESSION = "Session"

KINDS = frozenset({PROFILE, CONFERENCE, SESSION})


@dataclass(frozen=True)
class EntityKey:
    """Value-typed key whose identity is scoped by its parent chain."""

    kind: str
    id: int | str
    parent: "EntityKey | None" = None

    @classmethod
    def for_profile(cls, user_id: str) -> Self:
        return cls(kind=PROFILE, id=user_id)

    def child(self, kind: str, child_id: int) -> "EntityKey":
        """Return the key of a child entity scoped under this key."""
        return EntityKey(kind=kind, id=child_id, parent=self)

    def path(self) -> list[tuple[str, int | str]]:
        """Return the (kind, id) pairs from the root down to this key."""
        chain: list[tuple[str, int | str]] = []
        key: EntityKey | None = self
        while key is not None:
            chain.append((key.kind, key.id))
            key = key.parent
        chain.reverse()
        return chain

    def is_child_of(self, other: "EntityKey") -> bool:
        return self.parent == other

    def urlsafe(self) -> str:
        """Encode the full key path as an opaque websafe string."""
        raw = json.dumps(self.path(), separators=(",", ":")).encode()
        return base64.urlsafe_b64encode(raw).decode().rstrip("=")

    @classmethod
    def from_urlsafe(cls, value: str) -> "EntityKey":
        """Decode a websafe string produced by ``urlsafe``."""
        padded = value + "=" * (-len(value) % 4)
        try:
            path = json.loads(base64.urlsafe_b64decode(padded.encode()))
        except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
            raise InvalidKeyError(value) from exc
        if not isinstance(path, list) or not path:
            raise InvalidKeyError(value)

        key: EntityKey | None = None
        for segment in path:
            if not (isinstance(segment, list) and len(segment) == 2):
                raise InvalidKeyError(value)
            kind, entity_id = segment
            if kind not in KINDS or isinstance(entity_id, bool):
                raise InvalidKeyError(value)
            if not isinstance(entity_id, (int, str)):
                raise InvalidKeyError(value)
            key = cls(kind=kind, id=entity_id, parent=key)
        return key

    def __str__(self) -> str:
        return "/".join(f"{kind}:{entity_id}" for kind, entity_id in self.path())


def parse_key(value: str, kind: str) -> EntityKey:
    """Decode a websafe key and require it to point at ``kind``.

    Conference and Session ids are allocated integers, and a Session must be
    scoped under a Conference.
    """
    key = EntityKey.from_urlsafe(value)
    if key.kind != kind:
        raise InvalidKeyError(value)
    if kind in (CONFERENCE, SESSION) and not isinstance(key.id, int):
        raise InvalidKeyError(value)
    if kind == SESSION and (key.parent is None or key.parent.kind != CONFERENCE):
        raise InvalidKeyError(value)
    return key
