#!/usr/bin/env python3
"""
Image Parameters Database Setup
Creates the images.files table that stores PNG generation parameters.
"""

import sys

from db_config import SCHEMA_NAME, ConfigurationError, DatabaseConfig, connect, load_config


def create_database(config: DatabaseConfig) -> str:
    """Create the images.files schema if it does not exist yet."""
    conn = connect(config)
    try:
        conn.execute(f'''
            CREATE TABLE IF NOT EXISTS {SCHEMA_NAME}.files (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                filename TEXT UNIQUE NOT NULL,
                parameters TEXT NOT NULL,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        ''')
        conn.commit()
    finally:
        conn.close()

    return config.connection_string


if __name__ == "__main__":
    try:
        db_config = load_config()
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)

    location = create_database(db_config)
    print(f"Image parameters database ready at: {location}")
