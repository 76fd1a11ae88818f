"""MongoDB-backed user repository."""

from dataclasses import dataclass

from pymongo import ASCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from store_tracker.adapters.mongo_database import USERS_COLLECTION, user_from_document
from store_tracker.domain.errors import ConflictError
from store_tracker.domain.models import NewUser, UserNames, UserRecord
from store_tracker.services.users import UserRepository


@dataclass
class MongoUserRepository(UserRepository):
    """MongoDB implementation for user persistence."""

    database: Database

    @property
    def users(self) -> Collection:
        return self.database[USERS_COLLECTION]

    def find_by_national_id(self, national_id: int) -> UserRecord | None:
        """Return the user for a national id, if present."""
        document = self.users.find_one({"nationalId": national_id})
        if document is None:
            return None
        return user_from_document(document)

    def insert_user(self, user: NewUser) -> UserRecord:
        """Insert a new user document with zero spend."""
        document = {
            "nationalId": user.national_id,
            "firstName": user.first_name,
            "lastName": user.last_name,
            "moneySpent": 0.0,
        }
        try:
            result = self.users.insert_one(document)
        except DuplicateKeyError as exc:
            raise ConflictError(user.national_id) from exc
        return user_from_document({**document, "_id": result.inserted_id})

    def update_user_names(
        self, national_id: int, names: UserNames
    ) -> UserRecord | None:
        """Set the name fields and return the post-update document."""
        document = self.users.find_one_and_update(
            {"nationalId": national_id},
            {"$set": {"firstName": names.first_name, "lastName": names.last_name}},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            return None
        return user_from_document(document)

    def delete_by_national_id(self, national_id: int) -> UserRecord | None:
        """Delete the user document and return what was removed."""
        document = self.users.find_one_and_delete({"nationalId": national_id})
        if document is None:
            return None
        return user_from_document(document)

    def list_users(self) -> list[UserRecord]:
        """Return all users ordered by insertion."""
        cursor = self.users.find({}).sort("_id", ASCENDING)
        return [user_from_document(document) for document in cursor]
