"""
Create a user (e.g. first admin). Run from project root:
  python -m cms.scripts.create_user EMAIL NAME PASSWORD [role]
Example:
  python -m cms.scripts.create_user admin@example.com "Site Admin" 'your-secure-passw0rd!' admin
"""
import argparse
import sys

from cms.core.config import get_settings
from cms.core.database import get_session_factory
from cms.core.errors import ConflictError, InternalError
from cms.core.security import PasswordHasher
from cms.services.auth_service import validate_registration
from cms.services.user_store import CredentialStore


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a CMS user outside the registration endpoint.")
    parser.add_argument("email", help="Login email")
    parser.add_argument("name", help="Display name")
    parser.add_argument("password", help="Password (8 chars to 72 bytes, one special character)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args()

    errors = validate_registration(args.email, args.name, args.password)
    if errors:
        for error in errors:
            print(f"{error.field}: {error.message}", file=sys.stderr)
        return 1

    settings = get_settings()
    db = get_session_factory()()
    try:
        store = CredentialStore(db)
        password_hash, password_salt = PasswordHasher(settings.BCRYPT_ROUNDS).hash(args.password)
        try:
            store.create(args.email, args.name, password_hash, password_salt)
        except (ConflictError, InternalError) as e:
            print(e.message, file=sys.stderr)
            return 1
        if args.role == "admin":
            store.set_admin(args.email, True)
        print(f"Created user '{args.email.strip().lower()}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
