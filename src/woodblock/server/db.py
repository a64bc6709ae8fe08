from __future__ import annotations

import time
import uuid
from typing import Any, Dict, List, Optional

import aiosqlite


INIT_SQL = '''
CREATE TABLE IF NOT EXISTS users (
  id TEXT PRIMARY KEY,
  seq INTEGER NOT NULL,
  name TEXT NOT NULL,
  email TEXT NOT NULL UNIQUE,
  password_hash TEXT NOT NULL,
  high_score INTEGER NOT NULL DEFAULT 0,
  created_at REAL NOT NULL
);
'''

USER_COLUMNS = "id, name, email, password_hash, high_score, created_at"


class EmailTaken(Exception):
    pass


def _row_to_user(row) -> Dict[str, Any]:
    return {
        "id": row[0],
        "name": row[1],
        "email": row[2],
        "password_hash": row[3],
        "high_score": row[4],
        "created_at": row[5],
    }


class UserRepository:
    """User documents stored in SQLite."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    async def init(self) -> None:
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(INIT_SQL)
            await db.commit()

    async def create(self, name: str, email: str, password_hash: str) -> Dict[str, Any]:
        user_id = uuid.uuid4().hex
        created_at = time.time()
        async with aiosqlite.connect(self.db_path) as db:
            try:
                await db.execute(
                    "INSERT INTO users (id, seq, name, email, password_hash, high_score, created_at) "
                    "VALUES (?, (SELECT COALESCE(MAX(seq), 0) + 1 FROM users), ?, ?, ?, 0, ?)",
                    (user_id, name, email, password_hash, created_at),
                )
                await db.commit()
            except aiosqlite.IntegrityError as exc:
                raise EmailTaken(email) from exc
        return {
            "id": user_id,
            "name": name,
            "email": email,
            "password_hash": password_hash,
            "high_score": 0,
            "created_at": created_at,
        }

    async def _fetch_one(self, where: str, value: Any) -> Optional[Dict[str, Any]]:
        async with aiosqlite.connect(self.db_path) as db:
            async with db.execute(f"SELECT {USER_COLUMNS} FROM users WHERE {where} = ?", (value,)) as cur:
                row = await cur.fetchone()
        return _row_to_user(row) if row else None

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return await self._fetch_one("email", email)

    async def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        return await self._fetch_one("id", user_id)

    async def raise_high_score(self, user_id: str, score: int) -> Optional[int]:
        """Store `score` only if it beats the current value; return the stored value."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                "UPDATE users SET high_score = ? WHERE id = ? AND high_score < ?",
                (score, user_id, score),
            )
            await db.commit()
            async with db.execute("SELECT high_score FROM users WHERE id = ?", (user_id,)) as cur:
                row = await cur.fetchone()
        return int(row[0]) if row else None

    async def top(self, limit: int = 10) -> List[Dict[str, Any]]:
        async with aiosqlite.connect(self.db_path) as db:
            async with db.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE high_score > 0 "
                "ORDER BY high_score DESC, created_at ASC, seq ASC LIMIT ?",
                (limit,),
            ) as cur:
                rows = await cur.fetchall()
        return [_row_to_user(r) for r in rows]

    async def all(self) -> List[Dict[str, Any]]:
        async with aiosqlite.connect(self.db_path) as db:
            async with db.execute(f"SELECT {USER_COLUMNS} FROM users ORDER BY seq ASC") as cur:
                rows = await cur.fetchall()
        return [_row_to_user(r) for r in rows]
