import pytest
from datetime import timedelta
from fastapi import HTTPException
from jamvault.core.security import (
    create_access_token,
    decode_access_token,
    generate_reset_token,
    get_password_hash,
    validate_password_strength,
    verify_password,
)

def test_password_hash_format_and_verify():
    hashed = get_password_hash("Sup3r$ecret")
    key, salt = hashed.split(".")
    assert len(key) == 128
    assert len(salt) == 32
    assert verify_password("Sup3r$ecret", hashed)
    assert not verify_password("wrong", hashed)

def test_same_password_hashes_differently():
    assert get_password_hash("Sup3r$ecret") != get_password_hash("Sup3r$ecret")

@pytest.mark.parametrize("stored", ["", "nodot", "zz.abcd"])
def test_verify_rejects_malformed_hash(stored):
    assert verify_password("anything", stored) is False

@pytest.mark.parametrize("password,message", [
    ("Ab1$", "at least 8"),
    ("ABCDEFG1$", "lowercase"),
    ("abcdefg1$", "uppercase"),
    ("Abcdefgh$", "number"),
    ("Abcdefgh1", "special"),
])
def test_password_policy(password, message):
    with pytest.raises(ValueError, match=message):
        validate_password_strength(password)

def test_password_policy_accepts_strong_password():
    assert validate_password_strength("Sup3r$ecret") == "Sup3r$ecret"

def test_reset_tokens_are_random_hex():
    token = generate_reset_token()
    assert len(token) == 64
    int(token, 16)
    assert token != generate_reset_token()

def test_access_token_round_trip():
    token = create_access_token({"sub": "alice"})
    assert decode_access_token(token)["sub"] == "alice"

def test_expired_access_token_rejected():
    token = create_access_token({"sub": "alice"}, expires_delta=timedelta(minutes=-1))
    with pytest.raises(HTTPException) as exc:
        decode_access_token(token)
    assert exc.value.status_code == 401

def test_garbage_access_token_rejected():
    with pytest.raises(HTTPException):
        decode_access_token("not-a-jwt")
