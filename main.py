#!/usr/bin/env python3
"""
Friendship API command line.

Runs the HTTP server, seeds sample data, and queries the friendship graph.
"""

import argparse
import logging
import sys

from friendship.config import load_config, Config
from friendship.errors import FriendshipError
from friendship.graph import SUPPORTED_DEGREES
from friendship.seed import seed_chain
from friendship.services import ServiceContext, UserService, create_services


def setup_logging(level: str, verbose: bool = False):
    """Configure logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def display_users(users: list):
    """Print users one per line."""
    if not users:
        print("  (none)")
        return
    for u in users:
        print(f"  [{u.id}] {u.name} <{u.email}>")


def cmd_serve(config: Config, args: argparse.Namespace):
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=args.host or config.api.host,
        port=args.port or config.api.port,
        reload=args.reload
    )


def cmd_seed(users: UserService, args: argparse.Namespace):
    created = seed_chain(users)
    print(f"Seeded {len(created)} users:")
    display_users(created)


def cmd_list(users: UserService, args: argparse.Namespace):
    print("Users:")
    display_users(users.find())


def cmd_friends(users: UserService, args: argparse.Namespace):
    user = users.find_one(args.user_id)
    friends = users.get_friends_by_degree(user.id, args.degree)
    print(f"Degree {args.degree} friends of {user.name}:")
    display_users(friends)


def main():
    parser = argparse.ArgumentParser(
        description="Friendship API"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, help="Bind address (default: API_HOST)")
    serve.add_argument("--port", type=int, help="Port (default: API_PORT)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    subparsers.add_parser("seed", help="Create the Alice-Bob-Charlie-David-Eve friendship chain")
    subparsers.add_parser("list", help="List all users")

    friends = subparsers.add_parser("friends", help="Show friends of a user at a given degree")
    friends.add_argument("user_id", help="User id")
    friends.add_argument(
        "--degree", "-d",
        type=int,
        default=1,
        choices=SUPPORTED_DEGREES,
        help="Degree of separation (default: 1)"
    )

    args = parser.parse_args()

    config = load_config()
    setup_logging(config.log_level, args.verbose)
    logger = logging.getLogger(__name__)

    if args.command == "serve":
        cmd_serve(config, args)
        return

    context, users = create_services(ServiceContext.create(config=config))
    commands = {
        "seed": cmd_seed,
        "list": cmd_list,
        "friends": cmd_friends,
    }

    try:
        commands[args.command](users, args)
    except FriendshipError as e:
        logger.error(f"{e.type}: {e.message}")
        sys.exit(1)
    finally:
        context.close()


if __name__ == "__main__":
    main()
