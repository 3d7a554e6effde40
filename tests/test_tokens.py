from datetime import datetime, timedelta, timezone

import jwt
import pytest

from expense_tracker.errors import TokenExpired, TokenInvalid, TokenMalformed
from expense_tracker.tokens import issue_token, verify_token

SECRET = "server-secret-0123456789abcdef0123456789"


def test_issue_and_verify_roundtrip():
    token = issue_token(42, SECRET)
    assert verify_token(token, SECRET) == 42


def test_token_expires_after_24_hours():
    issued = datetime.now(timezone.utc) - timedelta(hours=24, minutes=1)
    token = issue_token(42, SECRET, now=issued)

    payload = jwt.decode(token, options={"verify_signature": False})
    assert payload["exp"] - payload["iat"] == 24 * 3600
    with pytest.raises(TokenExpired):
        verify_token(token, SECRET)


def test_token_still_valid_just_before_expiry():
    issued = datetime.now(timezone.utc) - timedelta(hours=23, minutes=59)
    assert verify_token(issue_token(7, SECRET, now=issued), SECRET) == 7


def test_wrong_secret_is_rejected():
    token = issue_token(42, "another-secret-0123456789abcdef0123456789")
    with pytest.raises(TokenInvalid):
        verify_token(token, SECRET)


def test_forged_payload_is_rejected():
    header, _, signature = issue_token(42, SECRET).split(".")
    forged_payload = jwt.encode(
        {"id": 1, "iat": datetime.now(timezone.utc), "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        "attacker-secret-0123456789abcdef0123456789",
        algorithm="HS256",
    ).split(".")[1]

    with pytest.raises(TokenInvalid):
        verify_token(".".join([header, forged_payload, signature]), SECRET)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_tokens(token):
    with pytest.raises(TokenMalformed):
        verify_token(token, SECRET)


def test_token_without_user_id_is_malformed():
    now = datetime.now(timezone.utc)
    token = jwt.encode({"iat": now, "exp": now + timedelta(hours=1)}, SECRET, algorithm="HS256")
    with pytest.raises(TokenMalformed):
        verify_token(token, SECRET)


def test_empty_secret_is_a_configuration_error():
    with pytest.raises(ValueError):
        issue_token(1, "")
    with pytest.raises(ValueError):
        verify_token("anything", "")
