import argparse
import asyncio
import sys

from finpal.config import settings
from finpal.logging import configure_json_logging


def cmd_init_db(args) -> int:
    from finpal.db import init_db

    init_db()
    print("tables created")
    return 0


def cmd_ask(args) -> int:
    from finpal.agent.chat_agent import FinancialChatAgent
    from finpal.db import SessionLocal
    from finpal.services.context import UserNotFound, load_chat_context

    db = SessionLocal()
    try:
        context = load_chat_context(db, args.user_id)
    except UserNotFound:
        print(f"user {args.user_id} not found", file=sys.stderr)
        return 2
    finally:
        db.close()

    agent = FinancialChatAgent()
    reply = asyncio.run(agent.chat(args.message, context))
    print(f"[{reply.intent.value}]")
    print(reply.text)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="finpal")
    ap.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("init-db", help="create database tables")
    p.set_defaults(func=cmd_init_db)

    p = sub.add_parser("ask", help="ask the chat agent a question as a stored user")
    p.add_argument("--user-id", type=int, required=True)
    p.add_argument("message")
    p.set_defaults(func=cmd_ask)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_json_logging(args.log_level or settings.LOG_LEVEL)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
