from typing import Optional, List
from asyncpg import Connection

from app.repositories.base import translate_db_errors

# columns a caller may write; id and created_at are owned by the database
CLIENT_COLUMNS = (
    "mobile",
    "hashed_password",
    "first_name",
    "application_no",
    "phone",
    "relation",
    "permanent_address",
    "temporary_address",
    "dob",
    "photo",
    "license_file",
    "class_of_vehicle",
    "date_of_enrolment",
    "learners_license_no",
    "expiry_of_ll",
    "main_test_date",
    "total_fee",
    "paid_fee",
    "fee_discount",
    "total_classes",
    "classes_attended",
)

CONFLICT_MESSAGE = "Client already exists"


class ClientRepository:
    """Repository for client enrollment records, backed by asyncpg."""

    def __init__(self, conn: Connection):
        self.conn = conn

    # ------------------ Retrieval Methods ------------------ #

    async def get_by_id(self, client_id: int) -> Optional[dict]:
        sql = "SELECT * FROM clients WHERE id = $1;"
        with translate_db_errors(CONFLICT_MESSAGE):
            record = await self.conn.fetchrow(sql, client_id)
        return dict(record) if record else None

    async def get_by_mobile(self, mobile: str) -> Optional[dict]:
        sql = "SELECT * FROM clients WHERE mobile = $1;"
        with translate_db_errors(CONFLICT_MESSAGE):
            record = await self.conn.fetchrow(sql, mobile)
        return dict(record) if record else None

    async def list_all(self) -> List[dict]:
        sql = "SELECT * FROM clients ORDER BY created_at DESC, id DESC;"
        with translate_db_errors(CONFLICT_MESSAGE):
            records = await self.conn.fetch(sql)
        return [dict(record) for record in records]

    # ------------------ Mutation Methods ------------------ #

    async def create(self, data: dict) -> dict:
        columns = [c for c in CLIENT_COLUMNS if c in data]
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        sql = f"""
            INSERT INTO clients ({', '.join(columns)})
            VALUES ({placeholders})
            RETURNING *;
        """
        with translate_db_errors(CONFLICT_MESSAGE):
            record = await self.conn.fetchrow(sql, *(data[c] for c in columns))
        return dict(record)

    async def update(self, client_id: int, data: dict) -> Optional[dict]:
        columns = [c for c in CLIENT_COLUMNS if c in data]
        if not columns:
            return await self.get_by_id(client_id)

        assignments = ", ".join(f"{c} = ${i}" for i, c in enumerate(columns, start=1))
        sql = f"UPDATE clients SET {assignments} WHERE id = ${len(columns) + 1} RETURNING *;"
        with translate_db_errors(CONFLICT_MESSAGE):
            record = await self.conn.fetchrow(sql, *(data[c] for c in columns), client_id)
        return dict(record) if record else None

    async def delete(self, client_id: int) -> bool:
        sql = "DELETE FROM clients WHERE id = $1 RETURNING id;"
        with translate_db_errors(CONFLICT_MESSAGE):
            deleted_id = await self.conn.fetchval(sql, client_id)
        return deleted_id is not None
