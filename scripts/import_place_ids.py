"""
Import Google Place IDs from a CSV export into the businesses table.

Usage: python scripts/import_place_ids.py path/to/businesses_rows.csv

The CSV needs a ``google_place_id`` column and either ``business_id`` or
``name`` to identify the business.
"""

import sys
import pandas as pd
from pathlib import Path

from groomer_directory.data.database import create_session_factory
from groomer_directory.data.repository import DirectoryRepository
from groomer_directory.exceptions import DatabaseError


def _clean(value):
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def import_place_ids(csv_path: Path, repo: DirectoryRepository) -> dict:
    df = pd.read_csv(csv_path, dtype=str)
    print(f"Found {len(df)} records in {csv_path}")

    processed = updated = errors = 0
    for row in df.to_dict(orient="records"):
        processed += 1
        business_id = _clean(row.get("business_id"))
        name = _clean(row.get("name"))
        place_id = _clean(row.get("google_place_id"))

        if not business_id and not name:
            print(f"Row {processed}: Missing business identifier (business_id or name)")
            errors += 1
            continue
        if not place_id:
            print(f"Row {processed}: Missing Google Place ID")
            errors += 1
            continue

        try:
            if business_id:
                changed = 1 if repo.update_place_id(int(business_id), place_id) else 0
            else:
                changed = repo.update_place_id_by_name(name, place_id)
        except (ValueError, DatabaseError) as e:
            print(f"Row {processed}: Error updating business: {e}")
            errors += 1
            continue

        if not changed:
            print(f"Row {processed}: No business found for {business_id or name}")
            errors += 1
            continue
        print(f"Updated business {business_id or name} with Place ID: {place_id}")
        updated += changed

    repo.commit()
    return {"processed": processed, "updated": updated, "errors": errors}


def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/import_place_ids.py path/to/your/csv_file.csv")
        sys.exit(1)

    csv_path = Path(sys.argv[1])
    if not csv_path.exists():
        print(f"File not found: {csv_path}")
        sys.exit(1)

    session_factory = create_session_factory()
    with session_factory() as session:
        summary = import_place_ids(csv_path, DirectoryRepository(session))

    print("\nImport Summary:")
    print(f"Total records processed: {summary['processed']}")
    print(f"Successfully updated: {summary['updated']}")
    print(f"Errors: {summary['errors']}")
    if summary["updated"] == 0:
        print("\nTip: Make sure your CSV has the correct column headers:")
        print("- business_id or name (to identify the business)")
        print("- google_place_id (the Google Place ID to import)")


if __name__ == "__main__":
    main()
