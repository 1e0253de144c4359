"""Unit tests for certificate id minting."""

import hashlib
import itertools
import re

from certmaker.pipeline.ids import IdMinter, random_token

ID_RE = re.compile(r"^[A-Za-z0-9_-]{10,50}$")


class TestIdMinter:
    def test_deterministic_with_injected_sources(self, person, achievement):
        minter = IdMinter(clock=lambda: 1704844800000, token_factory=lambda: "ABCDEFGH")
        payload = "Ada LovelaceSTU-100Intro to ComputingA. Turing1704844800000"
        expected_prefix = hashlib.sha256(payload.encode()).hexdigest()[:8].upper()
        assert minter.mint(person, achievement) == f"CERT-{expected_prefix}-ABCDEFGH"

    def test_injected_hash_function(self, person, achievement):
        minter = IdMinter(
            hash_function=lambda data: "deadbeefcafebabe",
            clock=lambda: 0,
            token_factory=lambda: "TOKEN123",
        )
        assert minter.mint(person, achievement) == "CERT-DEADBEEF-TOKEN123"

    def test_hash_prefix_binds_record(self, person, achievement):
        minter = IdMinter(clock=lambda: 42, token_factory=lambda: "SAMETOKN")
        other = person.model_copy(update={"id": "STU-101"})
        assert minter.mint(person, achievement) != minter.mint(other, achievement)

    def test_same_millisecond_ids_are_unique(self, person, achievement):
        minter = IdMinter(clock=lambda: 1704844800000)
        ids = {minter.mint(person, achievement) for _ in range(1000)}
        assert len(ids) == 1000
        assert all(ID_RE.match(i) for i in ids)

    def test_token_sequence_drives_suffix(self, person, achievement):
        tokens = itertools.cycle(["AAAAAAAA", "BBBBBBBB"])
        minter = IdMinter(clock=lambda: 1, token_factory=lambda: next(tokens))
        first, second = minter.mint(person, achievement), minter.mint(person, achievement)
        assert first.endswith("-AAAAAAAA")
        assert second.endswith("-BBBBBBBB")
        assert first.split("-")[1] == second.split("-")[1]

    def test_random_token_shape(self):
        token = random_token()
        assert len(token) == 8
        assert token == token.upper()
