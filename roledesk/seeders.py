"""Bootstrap accounts for local and test environments."""

import datetime
import logging

from sqlalchemy.orm import Session

from Security.Password_hash import hash_password
from Security.security_config import SECURITY_SETTINGS
from .enums import UserType
from .models import User

logger = logging.getLogger("roledesk.seeders")

SEED_ACCOUNTS = (
    ("Admin", "admin@example.com", UserType.ADMIN),
    ("Manager", "manager@example.com", UserType.MANAGER),
    ("User", "user@example.com", UserType.USER),
)


class DataSeeder:
    """
    Create one account per user type.

    Not idempotent on purpose: running it against a database that already
    holds the seed emails raises ``sqlalchemy.exc.IntegrityError`` from the
    unique email constraint, and nothing from that run is kept.
    """

    def __init__(self, password: str | None = None):
        self.password = password or SECURITY_SETTINGS["SEED_PASSWORD"]

    def run(self, db: Session) -> list[User]:
        now = datetime.datetime.utcnow()
        users = [
            User(
                name=name,
                email=email,
                password_hash=hash_password(self.password),
                type=user_type,
                email_verified_at=now,
            )
            for name, email, user_type in SEED_ACCOUNTS
        ]
        db.add_all(users)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("Seeded %d users", len(users))
        return users
