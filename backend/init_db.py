# init_db.py (in backend folder)

from sqlalchemy import inspect

from sheetchat.config import DATABASE_URL
from sheetchat.infra.sql_store import create_store_engine, init_db, test_connection


def main():
    """Create the row store table and print its columns"""
    engine = create_store_engine(DATABASE_URL)
    if not test_connection(engine):
        raise SystemExit(1)

    init_db(engine)

    inspector = inspect(engine)
    for table in inspector.get_table_names():
        print(f"\n{table}:")
        for col in inspector.get_columns(table):
            print(f"  - {col['name']}: {col['type']}")


if __name__ == "__main__":
    main()
