import uuid

from ..utils.database import get_db, store_call
from ..utils.result import Ok

TODO_COLUMNS = "id, title, completed, created_at, updated_at"
UPDATABLE_FIELDS = ('title', 'completed')


def serialize_todo(row):
    return {
        'id': row['id'],
        'title': row['title'],
        'completed': bool(row['completed']),
        'createdAt': row['created_at'].isoformat() if row.get('created_at') else None,
        'updatedAt': row['updated_at'].isoformat() if row.get('updated_at') else None,
    }


class TodoRepository:
    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        return self._db if self._db is not None else get_db()

    @store_call
    def list(self):
        cursor = self.db.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT {TODO_COLUMNS} FROM todos ORDER BY created_at DESC")
            return Ok(cursor.fetchall())
        finally:
            cursor.close()

    @store_call
    def get(self, todo_id):
        cursor = self.db.cursor(dictionary=True)
        try:
            cursor.execute(f"SELECT {TODO_COLUMNS} FROM todos WHERE id = %s", (todo_id,))
            return Ok(cursor.fetchone())
        finally:
            cursor.close()

    @store_call
    def create(self, title, completed=False):
        todo_id = str(uuid.uuid4())
        db = self.db
        cursor = db.cursor()
        try:
            cursor.execute(
                "INSERT INTO todos (id, title, completed) VALUES (%s, %s, %s)",
                (todo_id, title, completed)
            )
            db.commit()
        finally:
            cursor.close()
        return self.get(todo_id)

    @store_call
    def update(self, todo_id, changes):
        """Apply a partial update. Ok(None) when the todo does not exist."""
        fields = [name for name in UPDATABLE_FIELDS if name in changes]
        if not fields:
            return self.get(todo_id)

        db = self.db
        cursor = db.cursor()
        try:
            assignments = ", ".join(f"{name} = %s" for name in fields)
            params = tuple(changes[name] for name in fields) + (todo_id,)
            cursor.execute(f"UPDATE todos SET {assignments} WHERE id = %s", params)
            db.commit()
        finally:
            cursor.close()
        return self.get(todo_id)

    @store_call
    def delete(self, todo_id):
        """Ok(True) when a row was removed, Ok(False) when the id was unknown."""
        db = self.db
        cursor = db.cursor()
        try:
            cursor.execute("DELETE FROM todos WHERE id = %s", (todo_id,))
            db.commit()
            return Ok(cursor.rowcount > 0)
        finally:
            cursor.close()
