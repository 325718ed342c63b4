"""
Create the schema and, optionally, the seed accounts.
Usage: python -m roledesk.manage_db [--seed]
"""
import argparse
import sys

from sqlalchemy.exc import IntegrityError

from .database import Base, SessionLocal, engine
from .seeders import DataSeeder


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="roledesk.manage_db", description=__doc__.strip().splitlines()[0])
    parser.add_argument("--seed", action="store_true", help="insert the admin, manager and user accounts")
    args = parser.parse_args(argv)

    print("Creating tables (if missing)...")
    Base.metadata.create_all(bind=engine)
    if not args.seed:
        print("Done.")
        return 0

    print("Seeding users...")
    db = SessionLocal()
    try:
        users = DataSeeder().run(db)
        for user in users:
            print(f"  {user.type:<8} {user.email}")
    except IntegrityError as exc:
        print(f"Seeding failed, accounts already exist: {exc.orig}")
        return 1
    finally:
        db.close()
    print("All DB management tasks complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
