"""Admin account storage."""

import aiosqlite
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends

from shipdesk.auth.models import Admin
from shipdesk.errors import Conflict
from shipdesk.storage.database import Database, get_database

logger = logging.getLogger(__name__)


class AdminStore:
    """Manages admin accounts in SQLite."""

    def __init__(self, db: Optional[Database] = None):
        self.db = db or get_database()

    async def create_admin(self, name: str, email: str, password_hash: str) -> Admin:
        """Insert a new admin.

        Args:
            name: Display name
            email: Login email, stored lower-cased
            password_hash: bcrypt hash of the password

        Returns:
            The created Admin

        Raises:
            Conflict: If an admin with that email already exists
        """
        admin = Admin(
            id=uuid.uuid4().hex,
            name=name,
            email=email.strip().lower(),
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc).isoformat(),
        )

        async with self.db.connection() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO admins (id, name, email, password_hash, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (admin.id, admin.name, admin.email, admin.password_hash, admin.created_at),
                )
                await conn.commit()
            except aiosqlite.IntegrityError:
                raise Conflict("Admin already exists")

        logger.info(f"Registered admin {admin.id}")
        return admin

    async def get_by_email(self, email: str) -> Optional[Admin]:
        async with self.db.connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM admins WHERE email = ?",
                (email.strip().lower(),),
            )
            row = await cursor.fetchone()
        return self._row_to_admin(row) if row else None

    def _row_to_admin(self, row) -> Admin:
        return Admin(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=row["created_at"],
        )


def get_admin_store(db: Database = Depends(get_database)) -> AdminStore:
    return AdminStore(db)
