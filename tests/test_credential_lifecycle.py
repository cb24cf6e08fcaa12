"""Unit tests for CredentialStore and the auth pipelines (mocked collection)."""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import BadRequestException, ConflictException
from common.utils.password import validate_password
from app.auth import pipelines
from app.auth.services.credential_store import (
    CredentialStore,
    RESET_TOKEN_FIELD,
    VERIFY_TOKEN_FIELD,
    to_object_id,
)
from app.auth.services.one_time_tokens import OneTimeTokens


@pytest.fixture
def store(mock_db):
    return CredentialStore(mock_db)


@pytest.fixture
def notifier():
    notifier = MagicMock()
    notifier.send_verification = AsyncMock()
    notifier.send_password_reset = AsyncMock()
    return notifier


# ─────────────────────────────────────────────────────────────────
# CredentialStore
# ─────────────────────────────────────────────────────────────────


class TestCredentialStore:
    @pytest.mark.asyncio
    async def test_duplicate_key_becomes_conflict(self, store, mock_collection):
        mock_collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        with pytest.raises(ConflictException) as exc_info:
            await store.insert({"email": "anna@example.com"})

        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "EMAIL_TAKEN"

    @pytest.mark.asyncio
    async def test_consume_requires_token_still_present(self, store, mock_collection):
        user_id = ObjectId()
        mock_collection.update_one.return_value = MagicMock(modified_count=1)

        consumed = await store.consume_token(
            user_id,
            VERIFY_TOKEN_FIELD,
            "hash",
            set_fields={"emailVerified": True},
            unset_fields=[VERIFY_TOKEN_FIELD],
        )

        assert consumed is True
        query, update = mock_collection.update_one.call_args[0]
        assert query == {"_id": user_id, VERIFY_TOKEN_FIELD: "hash"}
        assert update == {
            "$set": {"emailVerified": True},
            "$unset": {VERIFY_TOKEN_FIELD: ""},
        }

    @pytest.mark.asyncio
    async def test_consume_reports_lost_race(self, store, mock_collection):
        mock_collection.update_one.return_value = MagicMock(modified_count=0)

        consumed = await store.consume_token(ObjectId(), RESET_TOKEN_FIELD, "hash", {}, [RESET_TOKEN_FIELD])

        assert consumed is False

    @pytest.mark.asyncio
    async def test_find_by_id_hides_credentials(self, store, mock_collection, sample_user_id):
        await store.find_by_id(sample_user_id)

        projection = mock_collection.find_one.call_args[1]["projection"]
        assert projection["passwordHash"] == 0
        assert projection["googleTokens"] == 0

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_queried(self, store, mock_collection):
        assert await store.find_by_id("not-an-id") is None
        assert await store.update_fields("not-an-id", {"a": 1}) is False
        mock_collection.find_one.assert_not_called()
        mock_collection.update_one.assert_not_called()

    def test_to_object_id(self):
        oid = ObjectId()
        assert to_object_id(str(oid)) == oid
        assert to_object_id(oid) is oid
        assert to_object_id(None) is None


# ─────────────────────────────────────────────────────────────────
# One-time tokens
# ─────────────────────────────────────────────────────────────────


class TestOneTimeTokens:
    def test_issue_hashes_token(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)

        issued = OneTimeTokens.issue(timedelta(minutes=30), now=now)

        assert len(issued.token) == 64
        assert issued.token_hash == OneTimeTokens.hash_token(issued.token)
        assert issued.expires_at == now + timedelta(minutes=30)

    def test_naive_expiry_treated_as_utc(self):
        now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

        assert OneTimeTokens.is_expired(datetime(2026, 1, 1, 11, 59), now=now) is True
        assert OneTimeTokens.is_expired(datetime(2026, 1, 1, 12, 1), now=now) is False
        assert OneTimeTokens.is_expired(None, now=now) is True


class TestValidatePassword:
    def test_length_is_the_only_rule(self):
        assert validate_password("abcdef") == (True, [])
        assert validate_password("abcde")[0] is False
        assert validate_password(None)[0] is False
        assert validate_password("abcdefgh", min_length=10) == (
            False, ["Password must be at least 10 characters"]
        )


# ─────────────────────────────────────────────────────────────────
# Pipelines
# ─────────────────────────────────────────────────────────────────


class TestSignupPipeline:
    @pytest.mark.asyncio
    async def test_concurrent_duplicate_rejected_by_index(
        self, store, mock_collection, jwt_auth, notifier,
    ):
        # The pre-check sees no user; the unique index catches the race.
        mock_collection.find_one.return_value = None
        mock_collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        with pytest.raises(ConflictException):
            await pipelines.signup_pipeline(
                store=store,
                auth=jwt_auth,
                phone_validator=MagicMock(),
                notifier=notifier,
                name="Anna",
                email="anna@example.com",
                password="secret1",
            )

        notifier.send_verification.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_token_user_id_matches_inserted_id(
        self, store, mock_collection, jwt_auth, notifier,
    ):
        inserted_id = ObjectId()
        mock_collection.find_one.return_value = None
        mock_collection.insert_one.return_value = MagicMock(inserted_id=inserted_id)

        result = await pipelines.signup_pipeline(
            store=store,
            auth=jwt_auth,
            phone_validator=MagicMock(),
            notifier=notifier,
            name=None,
            email="anna@example.com",
            password="secret1",
        )

        claims = await jwt_auth.verify_token(result["token"])
        assert claims["userId"] == str(inserted_id) == result["user"]["id"]

        doc = mock_collection.insert_one.call_args[0][0]
        sent_token = notifier.send_verification.call_args[0][1]
        assert doc[VERIFY_TOKEN_FIELD] == OneTimeTokens.hash_token(sent_token)


class TestResetPasswordPipeline:
    @pytest.mark.asyncio
    async def test_lost_consume_race_is_invalid_token(self, store, mock_collection, jwt_auth):
        mock_collection.find_one.return_value = {
            "_id": ObjectId(),
            "passwordResetExpires": datetime.now(timezone.utc) + timedelta(minutes=5),
        }
        mock_collection.update_one.return_value = MagicMock(modified_count=0)

        with pytest.raises(BadRequestException) as exc_info:
            await pipelines.reset_password_pipeline(
                store=store,
                auth=jwt_auth,
                token="abc",
                new_password="newpass",
            )

        assert exc_info.value.code == "INVALID_TOKEN"

    @pytest.mark.asyncio
    async def test_weak_password_checked_before_token(self, store, mock_collection, jwt_auth):
        with pytest.raises(BadRequestException) as exc_info:
            await pipelines.reset_password_pipeline(
                store=store,
                auth=jwt_auth,
                token="abc",
                new_password="12345",
            )

        assert exc_info.value.code == "WEAK_PASSWORD"
        mock_collection.find_one.assert_not_called()
