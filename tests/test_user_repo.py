"""User repository tests against an in-memory stand-in for a Motor collection."""

from __future__ import annotations

import unittest

from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from app.core.exceptions import StoreFailure
from app.repositories.user_repo import USER_COLL, UserRepository, serialize_user
from tests.helpers import FakeCollection, FakeDatabase


OID = ObjectId("665f1c2e8b3e4a0012345678")


class UserRepositoryTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.coll = FakeCollection(
            [
                {"_id": OID, "name": "Ann", "password": "hash-a", "team": ObjectId("665f1c2e8b3e4a0099999999")},
                {"_id": "u2", "name": "Bob", "password": "hash-b"},
            ]
        )
        self.db = FakeDatabase(self.coll)
        self.repo = UserRepository(self.db)

    async def test_uses_user_collection(self) -> None:
        self.assertEqual(self.db.requested, [USER_COLL])

    async def test_list_users_strips_credential_and_renames_id(self) -> None:
        users = await self.repo.list_users()
        self.assertEqual(
            users,
            [
                {"id": str(OID), "name": "Ann", "team": "665f1c2e8b3e4a0099999999"},
                {"id": "u2", "name": "Bob"},
            ],
        )

    async def test_get_by_object_id_string(self) -> None:
        user = await self.repo.get_user_by_id(str(OID))
        self.assertEqual(user["id"], str(OID))
        self.assertNotIn("password", user)
        self.assertEqual(self.coll.filters[-1], {"_id": {"$in": [OID, str(OID)]}})

    async def test_get_by_plain_string_id(self) -> None:
        user = await self.repo.get_user_by_id("u2")
        self.assertEqual(user, {"id": "u2", "name": "Bob"})
        self.assertEqual(self.coll.filters[-1], {"_id": "u2"})

    async def test_get_with_credential_for_auth_context(self) -> None:
        user = await self.repo.get_user_by_id("u2", with_credential=True)
        self.assertEqual(user, {"id": "u2", "name": "Bob", "password": "hash-b"})

    async def test_get_missing_user_returns_none(self) -> None:
        self.assertIsNone(await self.repo.get_user_by_id("nobody"))

    async def test_driver_errors_become_store_failures(self) -> None:
        self.coll.error = ServerSelectionTimeoutError("no servers")
        with self.assertRaises(StoreFailure):
            await self.repo.list_users()
        with self.assertRaises(StoreFailure):
            await self.repo.get_user_by_id("u2")


class SerializeUserTests(unittest.TestCase):
    def test_document_without_id_is_copied(self) -> None:
        self.assertEqual(serialize_user({"name": "Ann"}), {"name": "Ann"})

    def test_nested_object_ids_become_strings(self) -> None:
        ref = ObjectId("665f1c2e8b3e4a00aaaaaaaa")
        doc = {
            "_id": OID,
            "subscriptions": [ref, ref],
            "address": {"_id": ref, "tags": [{"by": ref}]},
        }
        self.assertEqual(
            serialize_user(doc),
            {
                "id": str(OID),
                "subscriptions": [str(ref), str(ref)],
                "address": {"_id": str(ref), "tags": [{"by": str(ref)}]},
            },
        )


if __name__ == "__main__":
    unittest.main()
