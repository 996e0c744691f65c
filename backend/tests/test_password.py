"""Tests for PasswordService."""

import pytest

from learnforge.auth.password import PasswordService


@pytest.fixture(scope="module")
def service():
    # Minimum bcrypt work factor keeps the suite fast
    return PasswordService(rounds=4)


def _mutate(digest: str, index: int) -> str:
    replacement = "A" if digest[index] != "A" else "B"
    return digest[:index] + replacement + digest[index + 1:]


def test_hash_verifies(service):
    digest = service.hash("pw1")
    assert service.verify("pw1", digest)


def test_wrong_password_fails(service):
    digest = service.hash("pw1")
    assert not service.verify("pw2", digest)


def test_same_password_hashes_differently(service):
    first = service.hash("pw1")
    second = service.hash("pw1")

    assert first != second
    assert service.verify("pw1", first)
    assert service.verify("pw1", second)


@pytest.mark.parametrize("index", [-20, -10, -5])
def test_mutated_checksum_fails(service, index):
    digest = service.hash("pw1")
    assert not service.verify("pw1", _mutate(digest, index))


@pytest.mark.parametrize("digest", [None, "", "not-a-hash", "$2b$04$short"])
def test_malformed_digest_returns_false(service, digest):
    assert service.verify("pw1", digest) is False

