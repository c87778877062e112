import unittest

from fastapi import HTTPException

from grantdesk.auth import create_access_token, decode_id_token, user_from_claims
from grantdesk.config import Settings


class IdTokenTests(unittest.TestCase):
    def setUp(self):
        self.settings = Settings(
            auth_jwt_secret="test-secret",
            auth_issuer="https://id.example.com",
            auth_audience="grant-portal",
        )

    def test_valid_token_claims(self):
        token = create_access_token("sub-1", self.settings, email="a@example.com")
        claims = decode_id_token(token, self.settings)
        self.assertEqual(claims["sub"], "sub-1")
        self.assertEqual(claims["aud"], "grant-portal")

    def test_rejects_wrong_audience_and_signature(self):
        token = create_access_token("sub-1", self.settings)
        other_audience = self.settings.model_copy(update={"auth_audience": "other-app"})
        other_secret = self.settings.model_copy(update={"auth_jwt_secret": "nope"})
        for settings in (other_audience, other_secret):
            with self.assertRaises(HTTPException) as ctx:
                decode_id_token(token, settings)
            self.assertEqual(ctx.exception.status_code, 401)

    def test_rejects_expired_token(self):
        expired = self.settings.model_copy(update={"auth_token_ttl_hours": -1})
        token = create_access_token("sub-1", expired)
        with self.assertRaises(HTTPException) as ctx:
            decode_id_token(token, self.settings)
        self.assertEqual(ctx.exception.detail, "Invalid or expired token")

    def test_user_from_standard_and_legacy_claims(self):
        standard = user_from_claims(
            {
                "sub": "1",
                "email": "ada@example.com",
                "given_name": "Ada",
                "family_name": "Lovelace",
                "picture": "https://img.example.com/ada.png",
            }
        )
        self.assertEqual(standard.first_name, "Ada")
        self.assertEqual(standard.last_name, "Lovelace")
        self.assertEqual(standard.profile_image_url, "https://img.example.com/ada.png")

        legacy = user_from_claims(
            {"sub": 2, "first_name": "Grace", "last_name": "Hopper"}
        )
        self.assertEqual(legacy.id, "2")
        self.assertEqual(legacy.full_name, "Grace Hopper")


if __name__ == "__main__":
    unittest.main()
