from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from woodblock.storage import LocalStore, Preferences

from .api import DEFAULT_API, ApiError, LeaderboardClient


DEFAULT_DATA_DIR = Path("~/.woodblock")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Wood Block account and leaderboard tools")
    p.add_argument("--api", type=str, default=DEFAULT_API, help="Leaderboard service base URL")
    p.add_argument("--data-dir", type=Path, default=DEFAULT_DATA_DIR)
    sub = p.add_subparsers(dest="command", required=True)

    reg = sub.add_parser("register", help="Create an account and log in")
    reg.add_argument("--name", required=True)
    reg.add_argument("--email", required=True)
    reg.add_argument("--password", required=True)

    login = sub.add_parser("login", help="Log in with an existing account")
    login.add_argument("--email", required=True)
    login.add_argument("--password", required=True)

    sub.add_parser("logout", help="Forget the saved token")
    sub.add_parser("users", help="List registered users")
    sub.add_parser("leaderboard", help="Show the top scores")
    return p


def run(argv: Optional[List[str]] = None, client: Optional[LeaderboardClient] = None) -> int:
    args = build_parser().parse_args(argv)
    preferences = Preferences(LocalStore(args.data_dir))
    client = client or LeaderboardClient(args.api, preferences=preferences)

    try:
        if args.command == "register":
            user = client.register(args.name.strip(), args.email.strip(), args.password.strip())
            preferences.set_high_score(max(preferences.high_score(), int(user.get("highScore", 0))))
            print(f"Account created. Hello, {user['name']}")
        elif args.command == "login":
            user = client.login(args.email.strip(), args.password.strip())
            # Server value is authoritative
            preferences.set_high_score(int(user.get("highScore", 0)))
            print(f"Welcome back, {user['name']}")
        elif args.command == "logout":
            client.logout()
            print("Logged out.")
        elif args.command == "users":
            print(json.dumps(client.users(), indent=2))
        elif args.command == "leaderboard":
            players = client.leaderboard()
            if not players:
                print("No scores yet. Play a game!")
            for idx, p in enumerate(players, start=1):
                print(f"{idx}. {p.get('name') or 'Anonymous'} - {p.get('highScore', 0)}")
    except ApiError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    return 0


def main() -> None:
    logging.basicConfig(level=logging.WARNING)
    sys.exit(run())


if __name__ == "__main__":  # pragma: no cover
    main()
