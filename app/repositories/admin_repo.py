from typing import Optional
from asyncpg import Connection

from app.repositories.base import translate_db_errors


class AdminRepository:

    def __init__(self, conn: Connection):
        self.conn = conn

    async def get_by_username(self, username: str) -> Optional[dict]:
        sql = "SELECT * FROM admins WHERE username = $1;"
        with translate_db_errors("Admin already exists"):
            record = await self.conn.fetchrow(sql, username)
        return dict(record) if record else None

    async def get_by_id(self, admin_id: int) -> Optional[dict]:
        sql = "SELECT * FROM admins WHERE id = $1;"
        with translate_db_errors("Admin already exists"):
            record = await self.conn.fetchrow(sql, admin_id)
        return dict(record) if record else None

    async def create(self, username: str, hashed_password: str) -> dict:
        sql = """
            INSERT INTO admins (username, hashed_password)
            VALUES ($1, $2)
            RETURNING *;
        """
        with translate_db_errors("Admin already exists"):
            record = await self.conn.fetchrow(sql, username, hashed_password)
        return dict(record)
