import logging
from functools import wraps

import mysql.connector
from flask import g, current_app
from ..models.schema import get_schema
from .result import Err, STORE

logger = logging.getLogger(__name__)


def get_db():
    if 'db' not in g:
        g.db = mysql.connector.connect(**current_app.config['DB_CONFIG'])
    return g.db


def close_db(exception=None):
    db = g.pop('db', None)
    if db is not None:
        db.close()


def init_db():
    db = get_db()
    cursor = db.cursor()
    schemas = get_schema()

    for table_name, schema in schemas.items():
        cursor.execute(schema)
        current_app.logger.info("Table ready: %s", table_name)
    db.commit()
    cursor.close()


def init_app(app):
    app.teardown_appcontext(close_db)


def store_call(f):
    """Turn connector failures inside a repository method into Err(STORE)."""
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except mysql.connector.Error as e:
            logger.error("Store call %s failed: %s", f.__name__, e)
            return Err(STORE, str(e))
    return decorated
