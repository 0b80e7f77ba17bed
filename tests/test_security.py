"""Unit tests for cms.core.security: bcrypt hashing, signed session tokens and the ownership rule."""

import base64
import json
import unittest
from datetime import timedelta
from types import SimpleNamespace

import jwt

from cms.core.security import (
    Expired,
    Malformed,
    PasswordHasher,
    SignatureMismatch,
    TokenService,
    Valid,
    can_modify,
    salt_rounds,
)

SECRET = "unit-test-secret-unit-test-secret-0001"


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


class TestPasswordHasher(unittest.TestCase):
    """hash() returns a salted bcrypt hash; verify() accepts only the original password."""

    def setUp(self) -> None:
        self.hasher = PasswordHasher(rounds=4)

    def test_hash_is_not_the_password(self) -> None:
        password = "Secret1!"
        hashed, salt = self.hasher.hash(password)
        self.assertNotEqual(hashed, password)
        self.assertNotIn(password, hashed)
        self.assertTrue(hashed.startswith("$2"))

    def test_verify_accepts_original_password(self) -> None:
        hashed, salt = self.hasher.hash("Secret1!")
        self.assertTrue(self.hasher.verify("Secret1!", hashed, salt))

    def test_verify_rejects_other_password(self) -> None:
        hashed, salt = self.hasher.hash("Secret1!")
        self.assertFalse(self.hasher.verify("Secret1?", hashed, salt))
        self.assertFalse(self.hasher.verify("secret1!", hashed, salt))
        self.assertFalse(self.hasher.verify("", hashed, salt))

    def test_same_password_gets_different_salts_and_hashes(self) -> None:
        hash_a, salt_a = self.hasher.hash("Secret1!")
        hash_b, salt_b = self.hasher.hash("Secret1!")
        self.assertNotEqual(salt_a, salt_b)
        self.assertNotEqual(hash_a, hash_b)

    def test_salt_records_cost_and_carries_16_random_bytes(self) -> None:
        _, salt = self.hasher.hash("Secret1!")
        self.assertEqual(salt_rounds(salt), 4)
        # "$2b$04$" + 22 base64 chars encoding 16 bytes
        self.assertEqual(len(salt), 29)

    def test_verify_with_malformed_stored_values_returns_false(self) -> None:
        hashed, _ = self.hasher.hash("Secret1!")
        self.assertFalse(self.hasher.verify("Secret1!", hashed, "not-a-salt"))
        self.assertFalse(self.hasher.verify("Secret1!", "garbage", "garbage"))

    def test_verify_with_other_salt_returns_false(self) -> None:
        hashed, _ = self.hasher.hash("Secret1!")
        _, other_salt = self.hasher.hash("Secret1!")
        self.assertFalse(self.hasher.verify("Secret1!", hashed, other_salt))

    def test_hash_made_with_older_cost_still_verifies(self) -> None:
        hashed, salt = PasswordHasher(rounds=5).hash("Secret1!")
        self.assertTrue(self.hasher.verify("Secret1!", hashed, salt))
        self.assertTrue(self.hasher.needs_rehash(salt))

    def test_needs_rehash_false_for_current_cost(self) -> None:
        _, salt = self.hasher.hash("Secret1!")
        self.assertFalse(self.hasher.needs_rehash(salt))
        self.assertTrue(self.hasher.needs_rehash("malformed"))

    def test_password_at_bcrypt_limit_verifies(self) -> None:
        password = "x!" * 36
        hashed, salt = self.hasher.hash(password)
        self.assertTrue(self.hasher.verify(password, hashed, salt))

    def test_password_sharing_72_byte_prefix_is_rejected(self) -> None:
        password = "A" * 71 + "!"
        hashed, salt = self.hasher.hash(password)
        self.assertFalse(self.hasher.verify(password + "whatever", hashed, salt))
        self.assertFalse(self.hasher.verify(password + "!totally-different", hashed, salt))

    def test_hash_refuses_password_over_72_bytes(self) -> None:
        with self.assertRaises(ValueError):
            self.hasher.hash("A" * 72 + "!secret-tail")
        # 37 two-byte characters: under 72 characters, over 72 bytes.
        with self.assertRaises(ValueError):
            self.hasher.hash("é" * 37)

    def test_burn_does_not_raise(self) -> None:
        self.hasher.burn("whatever")


class TestTokenIssueAndVerify(unittest.TestCase):
    """verify(issue(uid)) resolves uid; anything else is rejected with a specific result."""

    def setUp(self) -> None:
        self.tokens = TokenService(SECRET, algorithm="HS256", ttl_seconds=3600)

    def test_round_trip_returns_user_id(self) -> None:
        result = self.tokens.verify(self.tokens.issue(42))
        self.assertIsInstance(result, Valid)
        self.assertEqual(result.claims.user_id, 42)
        self.assertTrue(result.claims.token_id)
        self.assertGreater(result.claims.expires_at, result.claims.issued_at)

    def test_default_ttl_sets_expiry(self) -> None:
        result = self.tokens.verify(self.tokens.issue(1))
        lifetime = result.claims.expires_at - result.claims.issued_at
        self.assertEqual(lifetime, timedelta(seconds=3600))

    def test_each_token_has_its_own_id(self) -> None:
        a = self.tokens.verify(self.tokens.issue(1))
        b = self.tokens.verify(self.tokens.issue(1))
        self.assertNotEqual(a.claims.token_id, b.claims.token_id)

    def test_already_expired_token_is_rejected(self) -> None:
        token = self.tokens.issue(7, ttl=timedelta(seconds=-1))
        self.assertIsInstance(self.tokens.verify(token), Expired)

    def test_token_signed_with_other_secret_is_rejected(self) -> None:
        other = TokenService("another-secret-another-secret-00002")
        self.assertIsInstance(self.tokens.verify(other.issue(1)), SignatureMismatch)

    def test_every_single_bit_mutation_is_rejected(self) -> None:
        token = self.tokens.issue(123)
        for index, char in enumerate(token):
            for bit in range(7):
                mutated = token[:index] + chr(ord(char) ^ (1 << bit)) + token[index + 1 :]
                result = self.tokens.verify(mutated)
                self.assertNotIsInstance(
                    result, Valid, f"mutation at index {index}, bit {bit} was accepted"
                )

    def test_payload_swap_is_rejected(self) -> None:
        header, _, signature = self.tokens.issue(1).split(".")
        forged_payload = _b64({"sub": "2", "iat": 0, "exp": 9999999999, "jti": "x"})
        forged = f"{header}.{forged_payload}.{signature}"
        self.assertIsInstance(self.tokens.verify(forged), SignatureMismatch)

    def test_unsigned_none_algorithm_token_is_rejected(self) -> None:
        header = _b64({"alg": "none", "typ": "JWT"})
        payload = _b64({"sub": "1", "iat": 0, "exp": 9999999999, "jti": "x"})
        self.assertIsInstance(self.tokens.verify(f"{header}.{payload}."), Malformed)
        self.assertIsInstance(self.tokens.verify(f"{header}.{payload}.AAAA"), Malformed)

    def test_other_hmac_algorithm_is_rejected(self) -> None:
        token = TokenService(SECRET, algorithm="HS512").issue(1)
        self.assertNotIsInstance(self.tokens.verify(token), Valid)

    def test_missing_required_claim_is_malformed(self) -> None:
        token = jwt.encode({"sub": "1", "exp": 9999999999, "iat": 1}, SECRET, algorithm="HS256")
        self.assertIsInstance(self.tokens.verify(token), Malformed)

    def test_non_numeric_subject_is_malformed(self) -> None:
        token = jwt.encode(
            {"sub": "admin", "exp": 9999999999, "iat": 1, "jti": "abc"},
            SECRET,
            algorithm="HS256",
        )
        self.assertIsInstance(self.tokens.verify(token), Malformed)

    def test_garbage_and_empty_tokens_are_malformed(self) -> None:
        for token in (None, "", "abc", "a.b", "a.b.c.d", "!!.??.**"):
            self.assertIsInstance(self.tokens.verify(token), Malformed, token)

    def test_empty_secret_is_refused(self) -> None:
        with self.assertRaises(ValueError):
            TokenService("")


class TestCanModify(unittest.TestCase):
    """Ownership rule: admin or author."""

    def test_author_may_modify_own_resource(self) -> None:
        self.assertTrue(can_modify(SimpleNamespace(id=1, is_admin=False), 1))

    def test_other_user_may_not(self) -> None:
        self.assertFalse(can_modify(SimpleNamespace(id=2, is_admin=False), 1))

    def test_admin_may_modify_anything(self) -> None:
        self.assertTrue(can_modify(SimpleNamespace(id=3, is_admin=True), 1))

    def test_anonymous_may_not(self) -> None:
        self.assertFalse(can_modify(None, 1))
