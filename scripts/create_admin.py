"""Seed an admin account.

Usage: python -m scripts.create_admin --email admin@example.com --password 'Admin@123'
"""
import argparse
import logging
from dotenv import load_dotenv

load_dotenv()

from sqlmodel import Session, select

from app.db.db import create_db_and_tables, engine
from app.models.admin import Admin, AdminRole
from app.utils.auth_helper import hash_password
from app.utils.logging import configure_logging

logger = logging.getLogger("scripts.create_admin")


def create_admin(session: Session, email: str, password: str, username: str,
                 full_name: str, phone: str, role: AdminRole = AdminRole.super_admin) -> Admin:
    email = email.strip().lower()

    existing = session.exec(select(Admin).where(Admin.email == email)).first()
    if existing:
        raise ValueError(f"Admin {email} already exists")

    admin = Admin(
        username=username.strip().lower(),
        email=email,
        full_name=full_name,
        phone=phone,
        role=role,
        password_hash=hash_password(password),
    )
    session.add(admin)
    session.commit()
    session.refresh(admin)
    return admin


def main():
    parser = argparse.ArgumentParser(description="Create an admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--username", default="admin")
    parser.add_argument("--full-name", default="Super Admin")
    parser.add_argument("--phone", default="03000000000")
    parser.add_argument("--role", choices=[r.value for r in AdminRole], default=AdminRole.super_admin.value)
    args = parser.parse_args()

    configure_logging()
    create_db_and_tables()

    with Session(engine) as session:
        admin = create_admin(
            session,
            email=args.email,
            password=args.password,
            username=args.username,
            full_name=args.full_name,
            phone=args.phone,
            role=AdminRole(args.role),
        )
    logger.info("Admin created: %s (%s)", admin.email, admin.role.value)


if __name__ == "__main__":
    main()
