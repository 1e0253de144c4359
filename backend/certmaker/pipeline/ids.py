"""
CertMaker — Certificate id minting.

Ids look like ``CERT-<HASH8>-<TOKEN8>``. The hash prefix binds the id to the
record; the random token is what keeps ids unique across identical inputs
minted in the same millisecond. Hash, clock and token source are all
injectable so tests can pin exact ids.
"""

from __future__ import annotations

import hashlib
import time
import uuid
from typing import Callable

from certmaker.models.records import AchievementRecord, PersonRecord

HashFunction = Callable[[bytes], str]

HASH_PREFIX_LENGTH = 8
TOKEN_LENGTH = 8


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def current_millis() -> int:
    return time.time_ns() // 1_000_000


def random_token() -> str:
    return uuid.uuid4().hex[:TOKEN_LENGTH].upper()


class IdMinter:
    def __init__(
        self,
        hash_function: HashFunction = sha256_hex,
        clock: Callable[[], int] = current_millis,
        token_factory: Callable[[], str] = random_token,
    ):
        self.hash_function = hash_function
        self.clock = clock
        self.token_factory = token_factory

    def mint(self, person: PersonRecord, achievement: AchievementRecord) -> str:
        payload = f"{person.name}{person.id}{achievement.name}{achievement.instructor}{self.clock()}"
        digest = self.hash_function(payload.encode("utf-8"))
        return f"CERT-{digest[:HASH_PREFIX_LENGTH].upper()}-{self.token_factory()}"
