#!/usr/bin/env python3
"""
Generate a bcrypt password hash for the API admin password.
Usage: python scripts/hash_password.py [password]
Prompts for the password when none is given.
"""

import getpass
import sys

from rackbeat_sync.auth import hash_password


def main():
    if len(sys.argv) > 2:
        print("Usage: python scripts/hash_password.py [password]")
        sys.exit(1)
    
    if len(sys.argv) == 2:
        password = sys.argv[1]
    else:
        password = getpass.getpass("Admin password: ")
    
    if not password:
        print("Password must not be empty")
        sys.exit(1)
    
    print("\nAdd this to your .env file:\n")
    print(f"ADMIN_PASSWORD_HASH={hash_password(password)}")
    print()


if __name__ == "__main__":
    main()
