"""Create (or promote) an admin user.

    python -m shared.data.create_admin --email admin@example.com --password secret123 --name "Admin"
"""
import argparse
import sys
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.core.database import Base, SessionLocal, engine
from shared.models import refresh_token, user_login_session
from shared.models.users import Users
from shared.utils.logger import get_logger

logger = get_logger(__name__)


def create_admin(db: Session, email: str, password: str, full_name: str,
                 warehouse_id: Optional[UUID] = None) -> Users:
    user = db.query(Users).filter(
        func.lower(Users.email) == email.lower()).first()

    if user:
        user.role = "admin"
        user.status = "active"
        user.is_deleted = False
        user.set_password(password)
        logger.info("Promoted existing user %s to admin", email)
    else:
        user = Users(
            full_name=full_name,
            email=email.lower(),
            role="admin",
            status="active",
            warehouse_id=warehouse_id,
        )
        user.set_password(password)
        db.add(user)
        logger.info("Created admin user %s", email)

    db.commit()
    db.refresh(user)
    return user


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create a RackTrack admin user")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default="Administrator")
    parser.add_argument("--warehouse-id", type=UUID, default=None)
    args = parser.parse_args(argv)

    if len(args.password) < 8:
        parser.error("password must be at least 8 characters")

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        create_admin(db, args.email, args.password, args.name, args.warehouse_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating admin user")
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
