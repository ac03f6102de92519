#!/usr/bin/env python
"""
Seed the local database with the sample dataset.

This script overwrites the saved snapshot so the dashboard starts from a
known set of licenses, contracts and procedures.
"""

import sys

from saher.db import create_all
from saher.persistence import PersistenceGateway, store_from_snapshot
from saher.seed import seed_database, seed_snapshot


def main() -> int:
    print("Ensuring database tables exist...")
    create_all()

    print("Seeding database with sample records...")
    gateway = PersistenceGateway()
    try:
        count = seed_database(gateway)
    except RuntimeError as e:
        print(f"❌ {e}")
        return 1

    store = store_from_snapshot(seed_snapshot(), clock=gateway.clock)
    for category, rec in store.live_items():
        print(f"Added: {rec.name} ({category.value}, {rec.status.value})")

    print(f"\nAdded {count} records to the database!")
    print("\nDone! You can now run the API server with:")
    print("python -m saher serve")
    return 0


if __name__ == "__main__":
    sys.exit(main())
