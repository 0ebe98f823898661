"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user NAME EMAIL PASSWORD [--admin]
Example:
  python -m app.scripts.create_user "Ana Silva" ana@example.com your-secure-password --admin
"""
import argparse
import logging
import sys

from email_validator import EmailNotValidError, validate_email

from app.core.database import SessionLocal
from app.core.errors import ConflictError
from app.models.user import Role
from app.services import users
from app.services.validators import check_password, clean_name

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Receitario user.")
    parser.add_argument("name", help="Display name (1-255 chars)")
    parser.add_argument("email", help="Login email")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument("--admin", action="store_true", help="Grant the admin role")
    args = parser.parse_args(argv)

    try:
        name = clean_name(args.name)
        password = check_password(args.password)
    except ValueError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 1
    try:
        email = validate_email(args.email.strip(), check_deliverability=False).normalized
    except EmailNotValidError as e:
        print(f"Invalid email: {e}", file=sys.stderr)
        return 1

    role = Role.ADMIN if args.admin else Role.STANDARD
    db = SessionLocal()
    try:
        user = users.create_user(db, name=name, email=email, password=password, role=role)
        print(f"Created user {user.id} <{user.email}> with role {role.name.lower()}.")
        return 0
    except ConflictError as e:
        print(e.message, file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("User creation failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
