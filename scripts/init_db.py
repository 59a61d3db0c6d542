"""
Drop and recreate the boutique schema. Creating order_counters also seeds
the order-number sequence at 0, so the next order is {prefix}-0001.

Usage:
    python -m scripts.init_db
"""

from boutique.config import DB_URL
from boutique.db.engine import get_engine
from boutique.db.schema import metadata

def main():
    engine = get_engine()
    metadata.drop_all(engine)
    metadata.create_all(engine)
    print(f"DB schema created at {DB_URL}: {', '.join(sorted(metadata.tables))}")

if __name__ == "__main__":
    main()
