"""Print a bearer token for local API testing.

Tokens normally come from the auth service; this signs one with SECRET_KEY so
the API can be exercised locally.

Usage:
    python -m scripts.issue_dev_token <user_id> <admin|user|client> [client_id]
"""

from __future__ import annotations

import sys
from pathlib import Path

from dotenv import load_dotenv

from taskflow.application.dtos.identity import CallerIdentity
from taskflow.domain.enums import UserRole
from taskflow.infrastructure.security.jwt import CallerTokenCodec


def main(argv: list[str]) -> int:
    load_dotenv(Path(__file__).resolve().parent.parent / ".env", override=True)
    if len(argv) < 2 or argv[1] not in UserRole.values():
        print(__doc__, file=sys.stderr)
        return 2
    role = UserRole(argv[1])
    client_id = argv[2] if len(argv) > 2 else None
    if role == UserRole.CLIENT and not client_id:
        print("client tokens need a client_id", file=sys.stderr)
        return 2
    caller = CallerIdentity(argv[0], role, client_id=client_id if role == UserRole.CLIENT else None)
    print(CallerTokenCodec.from_settings().encode(caller))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
