"""
Grant or revoke the admin flag. This is the only way is_admin changes; no endpoint does it.
  python -m cms.scripts.set_admin EMAIL [--revoke]
"""
import argparse
import sys

from cms.core.database import get_session_factory
from cms.services.user_store import CredentialStore


def main() -> int:
    parser = argparse.ArgumentParser(description="Grant or revoke CMS admin rights.")
    parser.add_argument("email", help="Login email of an existing user")
    parser.add_argument("--revoke", action="store_true", help="Remove admin rights instead of granting them")
    args = parser.parse_args()

    db = get_session_factory()()
    try:
        user = CredentialStore(db).set_admin(args.email, not args.revoke)
        if user is None:
            print(f"No user with email '{args.email}'.", file=sys.stderr)
            return 1
        state = "revoked from" if args.revoke else "granted to"
        print(f"Admin rights {state} user {user.id}.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
