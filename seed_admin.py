#!/usr/bin/env python3
"""
Create the admin account, or promote an existing one

Reads ADMIN_EMAIL, ADMIN_PASSWORD and ADMIN_USERNAME from the environment
(or .env).
"""

import logging

from app.core.config import settings
from app.core.database import get_db_session, init_db
from app.core.logging import setup_logging
from app.services.users import UserService

logger = logging.getLogger("seed_admin")


def main() -> None:
    setup_logging()
    init_db()
    with get_db_session() as db:
        user = UserService.seed_admin(
            db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, settings.ADMIN_USERNAME
        )
        logger.info(f"Admin ready: {user.email} ({user.id})")


if __name__ == "__main__":
    main()
