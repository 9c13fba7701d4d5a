import json

import pytest

from src.mediashelf.locked.locked_passwords import HashedPasswordVerifier, PasswordHash, hash_password


def test_hash_roundtrip_verifies():
    encoded = hash_password("s3cret", iterations=1_000)

    parsed = PasswordHash.parse(encoded)

    assert parsed.iterations == 1_000
    assert parsed.verify("s3cret") is True
    assert parsed.verify("nope") is False


def test_verifier_from_file(tmp_path):
    path = tmp_path / "locked_credentials.json"
    path.write_text(
        json.dumps({"users": [{"user_id": "alice", "password_hash": hash_password("pw", iterations=1_000)}]}),
        encoding="utf-8",
    )

    verifier = HashedPasswordVerifier.from_file(path)

    assert verifier.verify("alice", "pw") is True
    assert verifier.verify("alice", "bad") is False
    assert verifier.verify("bob", "pw") is False


def test_verifier_rejects_malformed_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text(json.dumps({"users": [{"user_id": "alice"}]}), encoding="utf-8")

    with pytest.raises(ValueError):
        HashedPasswordVerifier.from_file(path)
    with pytest.raises(FileNotFoundError):
        HashedPasswordVerifier.from_file(tmp_path / "absent.json")
