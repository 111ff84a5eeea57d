"""
Create the database tables and seed the default specializations.

Usage: python scripts/seed_specializations.py

Does nothing when specializations already exist.
"""

from groomer_directory.config import settings
from groomer_directory.data.database import create_db_engine, create_session_factory, init_db
from groomer_directory.data.repository import DirectoryRepository
from groomer_directory.directory.specializations import DEFAULT_SPECIALIZATIONS, icon_type_for


def seed_specializations(repo: DirectoryRepository) -> int:
    """Insert the defaults into an empty table. Returns the number inserted."""
    existing = repo.count_specializations()
    if existing:
        print(f"Found {existing} existing specializations, nothing to do.")
        return 0

    for spec in DEFAULT_SPECIALIZATIONS:
        repo.add_specialization(
            name=spec["name"],
            description=spec["description"],
            icon_type=icon_type_for(spec["name"]),
        )
    repo.commit()
    print(f"Inserted {len(DEFAULT_SPECIALIZATIONS)} default specializations.")
    return len(DEFAULT_SPECIALIZATIONS)


def main():
    print("--- Seeding Specializations ---")
    settings.setup()
    engine = create_db_engine()
    init_db(engine)
    session_factory = create_session_factory(engine)
    with session_factory() as session:
        seed_specializations(DirectoryRepository(session))


if __name__ == "__main__":
    main()
