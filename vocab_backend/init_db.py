# vocab_backend/init_db.py
import logging

from vocab_backend.app.core.config import config
from vocab_backend.app.core.database import Database

logging.basicConfig(level=config.LOG_LEVEL)


def main():
    print("Creating tables...")
    database = Database(config.DATABASE_URL, echo=config.DATABASE_ECHO).open()
    database.close()
    print("Tables created successfully:", config.DATABASE_URL)


if __name__ == "__main__":
    main()
