"""Unit tests for jewelry_api.core.security: bcrypt password hashing and bearer tokens."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import jwt

from jewelry_api.core.security import (
    HashingError,
    TokenConfig,
    TokenExpired,
    TokenInvalid,
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)

CFG = TokenConfig(secret="unit-test-secret-0123456789abcdef0123", algorithm="HS256", expire_minutes=10080)


class TestPasswordHashing(unittest.TestCase):
    """hash_password/verify_password round trip, salting and failure modes."""

    def test_verify_accepts_own_hash(self) -> None:
        hashed = hash_password("Passw0rd", rounds=4)
        self.assertTrue(verify_password("Passw0rd", hashed))

    def test_hash_is_salted_per_call(self) -> None:
        self.assertNotEqual(hash_password("Passw0rd", rounds=4), hash_password("Passw0rd", rounds=4))

    def test_hash_is_not_plaintext(self) -> None:
        hashed = hash_password("Passw0rd", rounds=4)
        self.assertNotIn("Passw0rd", hashed)
        self.assertTrue(hashed.startswith("$2"))

    def test_wrong_password_returns_false(self) -> None:
        hashed = hash_password("Passw0rd", rounds=4)
        self.assertFalse(verify_password("passw0rd", hashed))

    def test_foreign_hash_format_returns_false(self) -> None:
        self.assertFalse(verify_password("Passw0rd", "Passw0rd"))
        self.assertFalse(verify_password("Passw0rd", ""))
        self.assertFalse(verify_password("Passw0rd", "5f4dcc3b5aa765d61d8327deb882cf99"))

    def test_longer_password_with_same_prefix_rejected(self) -> None:
        base = "Passw0rd" + "a" * 64
        hashed = hash_password(base, rounds=4)
        self.assertTrue(verify_password(base, hashed))
        self.assertFalse(verify_password(base + "XYZ", hashed))
        self.assertFalse(verify_password(base + "DIFFERENT", hashed))

    def test_hash_refuses_over_72_bytes(self) -> None:
        with self.assertRaises(ValueError):
            hash_password("Passw0rd" + "a" * 64 + "XYZ", rounds=4)
        # 30 characters but 90 UTF-8 bytes
        with self.assertRaises(ValueError):
            hash_password("\u20ac" * 30, rounds=4)

    def test_entropy_failure_raises_hashing_error(self) -> None:
        with patch("jewelry_api.core.security.bcrypt.gensalt", side_effect=OSError("no entropy")):
            with self.assertRaises(HashingError):
                hash_password("Passw0rd", rounds=4)


class TestTokens(unittest.TestCase):
    """issue_token/verify_token claims, expiry and signature checks."""

    def test_verify_returns_principal_id(self) -> None:
        claims = verify_token(issue_token(42, CFG), CFG)
        self.assertEqual(claims.principal_id, 42)
        self.assertGreater(claims.expires_at, claims.issued_at)

    def test_default_expiry_is_seven_days(self) -> None:
        claims = verify_token(issue_token(1, CFG), CFG)
        self.assertEqual(claims.expires_at - claims.issued_at, timedelta(days=7))

    def test_token_carries_no_role(self) -> None:
        payload = jwt.decode(issue_token(7, CFG), CFG.secret, algorithms=["HS256"])
        self.assertEqual(set(payload), {"sub", "iat", "exp"})
        self.assertEqual(payload["sub"], "7")

    def test_expired_token_raises_expired_not_invalid(self) -> None:
        issued = datetime.now(UTC) - timedelta(days=8)
        token = issue_token(42, CFG, now=issued)
        with self.assertRaises(TokenExpired):
            verify_token(token, CFG)

    def test_other_secret_is_rejected(self) -> None:
        other = TokenConfig(secret="someone-else-entirely-0123456789abcdef", algorithm="HS256", expire_minutes=60)
        with self.assertRaises(TokenInvalid):
            verify_token(issue_token(42, other), CFG)

    def test_garbage_is_rejected(self) -> None:
        with self.assertRaises(TokenInvalid):
            verify_token("not.a.token", CFG)

    def test_missing_claims_rejected(self) -> None:
        token = jwt.encode({"sub": "1"}, CFG.secret, algorithm="HS256")
        with self.assertRaises(TokenInvalid):
            verify_token(token, CFG)

    def test_non_numeric_subject_rejected(self) -> None:
        now = int(datetime.now(UTC).timestamp())
        token = jwt.encode(
            {"sub": "alice", "iat": now, "exp": now + 60}, CFG.secret, algorithm="HS256"
        )
        with self.assertRaises(TokenInvalid):
            verify_token(token, CFG)

    def test_secret_not_in_repr(self) -> None:
        self.assertNotIn(CFG.secret, repr(CFG))


if __name__ == "__main__":
    unittest.main()
