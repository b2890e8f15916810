from __future__ import annotations

from accounts.infra.hashing import HmacTokenHasher, WerkzeugPasswordHasher


class TestWerkzeugPasswordHasher:
    def test_verify_accepts_only_the_original_secret(self):
        hasher = WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")
        stored = hasher.hash("password123")

        assert stored != "password123"
        assert hasher.verify("password123", stored)
        assert not hasher.verify("password124", stored)

    def test_hashes_are_salted(self):
        hasher = WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")

        assert hasher.hash("password123") != hasher.hash("password123")


class TestHmacTokenHasher:
    def test_hash_is_deterministic(self):
        hasher = HmacTokenHasher(pepper="pepper")

        assert hasher.hash("token") == hasher.hash("token")
        assert len(hasher.hash("token")) == 64

    def test_pepper_changes_the_hash(self):
        assert HmacTokenHasher(pepper="a").hash("token") != HmacTokenHasher(pepper="b").hash(
            "token"
        )

    def test_verify(self):
        hasher = HmacTokenHasher(pepper="pepper")

        assert hasher.verify("token", hasher.hash("token"))
        assert not hasher.verify("other", hasher.hash("token"))
