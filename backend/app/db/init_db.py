"""
Database initialization script.
"""
from app.core.logging import configure_logging
from app.db.session import init_db

if __name__ == "__main__":
    configure_logging()
    print("Initializing database...")
    init_db()
    print("Database initialized successfully!")
