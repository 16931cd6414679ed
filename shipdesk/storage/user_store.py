"""User account storage.

Users are created by the customer-facing application; this service reads
them and applies admin updates. Carrier permissions live in the
``allowed_carriers`` JSON column and are always written back in the
structured vendor form.
"""

import aiosqlite
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Depends

from shipdesk.errors import Conflict, StorageError
from shipdesk.models.user import User, UserStatus
from shipdesk.storage.database import Database, get_database

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class UserStore:
    """Manages user records in SQLite."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize user store.

        Args:
            db: Database to use. Defaults to the process-wide database.
        """
        self.db = db or get_database()

    async def create_user(
        self,
        email: str,
        password_hash: str,
        name: Optional[str] = None,
        available_balance: float = 0.0,
        is_dealer: bool = False,
    ) -> User:
        """Insert a new user.

        Raises:
            Conflict: If a user with that email already exists
        """
        user_id = uuid.uuid4().hex
        now = _now()
        normalized_email = email.strip().lower()

        async with self.db.connection() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO users (
                        id, email, password_hash, name, status,
                        available_balance, is_dealer, allowed_carriers,
                        created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, '[]', ?, ?)
                    """,
                    (
                        user_id,
                        normalized_email,
                        password_hash,
                        name,
                        UserStatus.ACTIVE.value,
                        available_balance,
                        int(is_dealer),
                        now,
                        now,
                    ),
                )
                await conn.commit()
            except aiosqlite.IntegrityError:
                raise Conflict("User already exists")

        logger.info(f"Created user {user_id}")
        user = await self.get_user(user_id)
        if user is None:
            raise RuntimeError("Failed to load user after creation")
        return user

    async def get_user(self, user_id: str) -> Optional[User]:
        async with self.db.connection() as conn:
            cursor = await conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = await cursor.fetchone()
        return self._row_to_user(row) if row else None

    async def list_users(self) -> List[User]:
        """Get every user, oldest first."""
        async with self.db.connection() as conn:
            cursor = await conn.execute("SELECT * FROM users ORDER BY created_at, rowid")
            rows = await cursor.fetchall()
        return [self._row_to_user(row) for row in rows]

    async def update_status(self, user_id: str, status: UserStatus) -> Optional[User]:
        return await self._update_column(user_id, "status", UserStatus(status).value)

    async def update_balance(self, user_id: str, available_balance: float) -> Optional[User]:
        return await self._update_column(user_id, "available_balance", float(available_balance))

    async def update_dealer(self, user_id: str, is_dealer: bool) -> Optional[User]:
        return await self._update_column(user_id, "is_dealer", int(bool(is_dealer)))

    async def save_user(self, user: User) -> Optional[User]:
        """Write every mutable field of a user back in one statement.

        There is no version check: the last writer wins.

        Returns:
            The stored user, or None if it no longer exists
        """
        now = _now()
        async with self.db.connection() as conn:
            cursor = await conn.execute(
                """
                UPDATE users
                   SET name = ?, status = ?, available_balance = ?, is_dealer = ?,
                       allowed_carriers = ?, updated_at = ?
                 WHERE id = ?
                """,
                (
                    user.name,
                    UserStatus(user.status).value,
                    user.available_balance,
                    int(user.is_dealer),
                    self._dump_carriers(user),
                    now,
                    user.id,
                ),
            )
            await conn.commit()
            if cursor.rowcount == 0:
                return None
        return await self.get_user(user.id)

    async def _update_column(self, user_id: str, column: str, value) -> Optional[User]:
        # column names come from the update_* methods above, never from input
        async with self.db.connection() as conn:
            cursor = await conn.execute(
                f"UPDATE users SET {column} = ?, updated_at = ? WHERE id = ?",
                (value, _now(), user_id),
            )
            await conn.commit()
            if cursor.rowcount == 0:
                return None
        return await self.get_user(user_id)

    @staticmethod
    def _dump_carriers(user: User) -> str:
        return json.dumps([c.model_dump(by_alias=True) for c in user.allowed_carriers])

    def _row_to_user(self, row) -> User:
        """Convert database row to User object.

        Legacy bare-string vendors are migrated by the model validators.
        """
        try:
            carriers = json.loads(row["allowed_carriers"] or "[]")
        except json.JSONDecodeError as e:
            logger.error(f"Unreadable allowed_carriers for user {row['id']}")
            raise StorageError() from e

        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            name=row["name"],
            status=row["status"],
            available_balance=row["available_balance"],
            is_dealer=bool(row["is_dealer"]),
            allowed_carriers=carriers,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


def get_user_store(db: Database = Depends(get_database)) -> UserStore:
    """Dependency returning a user store bound to the request's database."""
    return UserStore(db)
