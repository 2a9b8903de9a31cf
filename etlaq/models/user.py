import uuid

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..utils.database import get_db, store_call
from ..utils.result import Ok, Err, CONFLICT

USER_COLUMNS = "id, email, password_hash, name, created_at, updated_at"


def _isoformat(value):
    return value.isoformat() if value is not None else None


def public_user(row, with_timestamps=False):
    """User fields safe to send to a client. The hash never leaves the server."""
    user = {'id': row['id'], 'email': row['email'], 'name': row['name']}
    if with_timestamps:
        user['createdAt'] = _isoformat(row.get('created_at'))
        user['updatedAt'] = _isoformat(row.get('updated_at'))
    return user


class UserRepository:
    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        return self._db if self._db is not None else get_db()

    def _fetch_one(self, query, params):
        cursor = self.db.cursor(dictionary=True)
        try:
            cursor.execute(query, params)
            return cursor.fetchone()
        finally:
            cursor.close()

    @store_call
    def find_by_id(self, user_id):
        return Ok(self._fetch_one(f"SELECT {USER_COLUMNS} FROM users WHERE id = %s", (user_id,)))

    @store_call
    def find_by_email(self, email):
        return Ok(self._fetch_one(f"SELECT {USER_COLUMNS} FROM users WHERE email = %s", (email.lower(),)))

    @store_call
    def create(self, email, password_hash, name):
        user_id = str(uuid.uuid4())
        db = self.db
        cursor = db.cursor()
        try:
            cursor.execute("""
                INSERT INTO users (id, email, password_hash, name)
                VALUES (%s, %s, %s, %s)
            """, (user_id, email, password_hash, name))
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if e.errno == errorcode.ER_DUP_ENTRY:
                return Err(CONFLICT, 'User with this email already exists')
            raise
        finally:
            cursor.close()
        return self.find_by_id(user_id)

    @store_call
    def update_name(self, user_id, name):
        db = self.db
        cursor = db.cursor()
        try:
            cursor.execute("UPDATE users SET name = %s WHERE id = %s", (name, user_id))
            db.commit()
        finally:
            cursor.close()
        return self.find_by_id(user_id)
