"""
Database connection manager for the facility admin panel.
SQLite with one connection per request.
"""
import sqlite3
import os
from flask import g, current_app


SCHEMA_PATH = os.path.join(os.path.dirname(__file__), 'schema.sql')


def connect_db(db_path):
    """Open a connection with row access by name and foreign keys enforced."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def load_schema(conn):
    """Create all tables on an open connection."""
    with open(SCHEMA_PATH, 'r') as f:
        conn.executescript(f.read())
    conn.commit()


def get_db():
    """Get database connection for current request."""
    if 'db' not in g:
        g.db = connect_db(current_app.config['DATABASE_PATH'])
    return g.db


def close_db(e=None):
    """Close database connection at end of request."""
    db = g.pop('db', None)
    if db is not None:
        db.close()


def init_db(app):
    """Initialize database with schema if not exists."""
    app.teardown_appcontext(close_db)

    db_path = app.config['DATABASE_PATH']

    # Ensure data directory exists
    db_dir = os.path.dirname(db_path)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)

    if not os.path.exists(db_path):
        conn = connect_db(db_path)
        load_schema(conn)
        conn.close()
        print(f"Database initialized at {db_path}")
