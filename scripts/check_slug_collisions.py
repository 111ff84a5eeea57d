"""
Report URL slugs shared by more than one location, specialization or business.

Usage: python scripts/check_slug_collisions.py

Exits non-zero when a collision is found, so it can gate a data import.
"""

import sys

from groomer_directory.data.database import create_session_factory
from groomer_directory.data.repository import DirectoryRepository
from groomer_directory.directory.resolver import EntityResolver


def main():
    session_factory = create_session_factory()
    with session_factory() as session:
        collisions = EntityResolver(DirectoryRepository(session)).find_collisions()

    if not collisions:
        print("No slug collisions found.")
        return

    print(f"Found {len(collisions)} colliding slugs:")
    for slug, owners in sorted(collisions.items()):
        print(f"  /{slug}: {', '.join(owners)}")
    sys.exit(1)


if __name__ == "__main__":
    main()
