"""Command-line administration for the forum store.

Usage:
    python main.py init-db
    python main.py setup-admin <username>
    python main.py invite <email> <Admin|Role1|Role2> [issuer]
    python main.py codes
    python main.py users
"""

import getpass
import logging
import sys
from typing import List

from core.database import SessionLocal, init_db
from core.exceptions import ForumError
from core.logging_config import setup_logging
from utils.invitation_manager import InvitationManager
from utils.registration import RegistrationService
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)


def print_usage() -> None:
    print(__doc__)


def run(argv: List[str]) -> int:
    """Execute one command.

    Returns:
        Process exit status.
    """
    if not argv:
        print_usage()
        return 1

    command, args = argv[0], argv[1:]
    init_db()
    db = SessionLocal()
    try:
        users = UserManager(db)
        invitations = InvitationManager(db)

        if command == "init-db":
            print("Database initialized.")
        elif command == "setup-admin" and len(args) == 1:
            password = getpass.getpass("Password: ")
            if password != getpass.getpass("Repeat password: "):
                print("Passwords do not match.")
                return 1
            RegistrationService(users, invitations).register_first_admin(args[0], password)
            print(f"Administrator '{args[0]}' created.")
        elif command == "invite" and len(args) in (2, 3):
            issuer = args[2] if len(args) == 3 else None
            code = invitations.issue(args[0], args[1], created_by=issuer)
            print(f"Invitation code for {args[0]} ({args[1]}): {code}")
        elif command == "codes":
            for item in invitations.list_codes():
                print(f"{item.code}  {item.role.value:<6} {item.email}  {item.created_at}")
            print(f"{invitations.outstanding_count()} outstanding")
        elif command == "users":
            for account in users.list_accounts():
                roles = ",".join(sorted(r.value for r in account.roles)) or "-"
                print(f"{account.username:<20} {roles:<18} {account.email or ''}")
            print(f"{users.count()} accounts")
        else:
            print_usage()
            return 1
    except (ForumError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    finally:
        db.close()
    return 0


def main() -> None:
    """Main entry point."""
    setup_logging()
    try:
        sys.exit(run(sys.argv[1:]))
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
