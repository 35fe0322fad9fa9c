"""
MongoDB Storage Implementation

MongoDB is the production backend. Documents keep the field names of the
existing FinancialTracker database (`password`, `userId`, ...) so its data stays
readable.

TRADEOFFS:
- No multi-document transactions; every write is independent
- No retries on request operations; a failed call surfaces immediately
- Aggregations run inside MongoDB as pipelines

The implementation follows the abstract interface, so business logic
never touches the driver directly.
"""

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo.errors import PyMongoError
from tenacity import retry, stop_after_attempt, wait_exponential

from finance_tracker.config import MongoSettings, get_settings
from finance_tracker.models.transaction import (
    CategoryTotal,
    MonthlyTotals,
    Transaction,
    TransactionType,
)
from finance_tracker.models.user import User
from finance_tracker.services.storage.interface import (
    PersistenceError,
    StorageConnectionError,
    TransactionStorageInterface,
    UserStorageInterface,
)


def to_object_id(value: str) -> Any:
    """Use an ObjectId when the id looks like one, the raw string otherwise."""
    return ObjectId(value) if ObjectId.is_valid(value) else value


class MongoClient:
    """
    Low-level MongoDB client wrapper.

    Creates the motor client lazily and hands out collections.
    """

    def __init__(self, settings: Optional[MongoSettings] = None):
        self._settings = settings or get_settings().mongo
        self._client: Optional[AsyncIOMotorClient] = None

    def get_client(self) -> AsyncIOMotorClient:
        if self._client is None:
            self._client = AsyncIOMotorClient(
                self._settings.uri,
                tz_aware=True,
                serverSelectionTimeoutMS=self._settings.server_selection_timeout_ms,
            )
        return self._client

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def connect(self) -> None:
        """
        Verify the server is reachable.

        Only called at startup; request operations are never retried.
        """
        try:
            await self.get_client().admin.command("ping")
        except PyMongoError as e:
            raise StorageConnectionError(f"Failed to connect to MongoDB: {e}")

    def get_database(self) -> AsyncIOMotorDatabase:
        return self.get_client()[self._settings.database]

    def users(self) -> AsyncIOMotorCollection:
        return self.get_database()[self._settings.users_collection]

    def transactions(self) -> AsyncIOMotorCollection:
        return self.get_database()[self._settings.transactions_collection]

    def sessions(self) -> AsyncIOMotorCollection:
        return self.get_database()[self._settings.sessions_collection]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


class MongoUserStorage(UserStorageInterface):
    """Users stored one document each: {_id, email, password}."""

    def __init__(self, client: Optional[MongoClient] = None):
        self._client = client or MongoClient()

    def _document_to_user(self, document: dict) -> User:
        return User(
            id=str(document["_id"]),
            email=document["email"],
            password_hash=document["password"],
        )

    async def save_user(self, user: User) -> User:
        try:
            result = await self._client.users().insert_one({
                "email": user.email,
                "password": user.password_hash,
            })
        except PyMongoError as e:
            raise PersistenceError(f"Failed to save user: {e}")
        return user.model_copy(update={"id": str(result.inserted_id)})

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        try:
            document = await self._client.users().find_one({"_id": to_object_id(user_id)})
        except PyMongoError as e:
            raise PersistenceError(f"Failed to get user: {e}")
        return self._document_to_user(document) if document else None

    async def find_user_by_email(self, email: str) -> Optional[User]:
        try:
            document = await self._client.users().find_one(
                {"email": email},
                sort=[("_id", 1)],
            )
        except PyMongoError as e:
            raise PersistenceError(f"Failed to find user: {e}")
        return self._document_to_user(document) if document else None


class MongoTransactionStorage(TransactionStorageInterface):
    """
    Transactions stored as {_id, userId, type, amount, category, note, date}.
    """

    def __init__(self, client: Optional[MongoClient] = None):
        self._client = client or MongoClient()

    def _transaction_to_document(self, transaction: Transaction) -> dict:
        return {
            "userId": to_object_id(transaction.user_id),
            "type": transaction.type.value,
            "amount": transaction.amount,
            "category": transaction.category,
            "note": transaction.note,
            "date": transaction.date,
        }

    def _document_to_transaction(self, document: dict) -> Transaction:
        return Transaction(
            id=str(document["_id"]),
            user_id=str(document["userId"]),
            type=TransactionType(document["type"]),
            amount=document["amount"],
            category=document["category"],
            note=document.get("note"),
            date=document["date"],
        )

    async def save_transaction(self, transaction: Transaction) -> Transaction:
        try:
            result = await self._client.transactions().insert_one(
                self._transaction_to_document(transaction)
            )
        except PyMongoError as e:
            raise PersistenceError(f"Failed to save transaction: {e}")
        return transaction.model_copy(update={"id": str(result.inserted_id)})

    async def list_transactions(
        self,
        user_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        query: dict[str, Any] = {"userId": to_object_id(user_id)}
        date_filter = {}
        if date_from:
            date_filter["$gte"] = date_from
        if date_to:
            date_filter["$lte"] = date_to
        if date_filter:
            query["date"] = date_filter
        if transaction_type:
            query["type"] = transaction_type.value

        try:
            cursor = self._client.transactions().find(query).sort("date", -1)
            return [self._document_to_transaction(doc) async for doc in cursor]
        except PyMongoError as e:
            raise PersistenceError(f"Failed to list transactions: {e}")

    async def sum_by_category(
        self,
        user_id: str,
        date_from: datetime,
        date_before: datetime,
        transaction_type: TransactionType = TransactionType.EXPENSE,
    ) -> list[CategoryTotal]:
        pipeline = [
            {
                "$match": {
                    "userId": to_object_id(user_id),
                    "type": transaction_type.value,
                    "date": {"$gte": date_from, "$lt": date_before},
                }
            },
            {
                "$group": {
                    "_id": "$category",
                    "totalAmount": {"$sum": {"$toDouble": "$amount"}},
                }
            },
        ]

        try:
            cursor = self._client.transactions().aggregate(pipeline)
            return [
                CategoryTotal(category=row["_id"], amount=float(row["totalAmount"]))
                async for row in cursor
            ]
        except PyMongoError as e:
            raise PersistenceError(f"Failed to aggregate by category: {e}")

    async def totals_by_month(self, user_id: str) -> list[MonthlyTotals]:
        pipeline = [
            {"$match": {"userId": to_object_id(user_id)}},
            {
                "$group": {
                    "_id": {"$dateToString": {"format": "%Y-%m", "date": "$date"}},
                    "totalIncome": {
                        "$sum": {"$cond": [{"$eq": ["$type", "income"]}, "$amount", 0]}
                    },
                    "totalExpenses": {
                        "$sum": {"$cond": [{"$eq": ["$type", "expense"]}, "$amount", 0]}
                    },
                }
            },
            {"$sort": {"_id": -1}},
        ]

        try:
            cursor = self._client.transactions().aggregate(pipeline)
            return [MonthlyTotals.model_validate(row) async for row in cursor]
        except PyMongoError as e:
            raise PersistenceError(f"Failed to aggregate by month: {e}")
