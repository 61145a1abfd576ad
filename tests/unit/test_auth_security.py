import jwt as pyjwt

from hobbyhub.config.settings import get_settings
from hobbyhub.core.jwt import create_access_token, create_refresh_token, create_token_pair, decode_token
from hobbyhub.core.security import hash_password, verify_password


def test_password_hash_and_verify():
    raw = "SuperSecurePass123!"
    hashed = hash_password(raw)
    assert hashed != raw
    assert hashed.startswith("$2b$12$")
    assert verify_password(raw, hashed)
    assert not verify_password("wrong", hashed)


def test_verify_rejects_non_bcrypt_hashes():
    assert not verify_password("secret", "")
    assert not verify_password("secret", "pbkdf2_sha256$1$abc$def")


def test_access_token_roundtrip():
    token = create_access_token("42", expires_minutes=5)
    payload = decode_token(token)
    assert payload["sub"] == "42"
    assert payload["type"] == "access"
    assert "exp" in payload and "jti" in payload


def test_refresh_token_only_decodes_as_refresh():
    refresh = create_refresh_token("42")
    assert decode_token(refresh) is None
    assert decode_token(refresh, refresh=True)["sub"] == "42"

    access = create_access_token("42")
    assert decode_token(access, refresh=True) is None


def test_token_pair_tokens_are_unique():
    first, second = create_token_pair("7"), create_token_pair("7")
    assert first["token"] != second["token"]
    assert first["refresh_token"] != second["refresh_token"]


def test_expired_and_tampered_tokens_are_rejected():
    assert decode_token(create_access_token("1", expires_minutes=-1)) is None
    assert decode_token("not-a-token") is None

    forged = pyjwt.encode({"sub": "1", "type": "access"}, "someone-elses-secret", algorithm="HS256")
    assert decode_token(forged) is None


def test_refresh_secret_differs_from_access_secret():
    security = get_settings().security
    assert security.refresh_secret != security.jwt_secret
