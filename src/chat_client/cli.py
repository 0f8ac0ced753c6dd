"""Terminal front-end for the conversation controller."""
from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import replace
from typing import List, Optional

from .config import ClientSettings, load_config
from .controller import ConversationController
from .messages import Message

logger = logging.getLogger(__name__)

CLEAR_COMMAND = "/clear"
QUIT_COMMANDS = {"/quit", "/exit"}


def format_message(message: Message) -> str:
    return f"[{message.timestamp}] {message.role}: {message.content}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chat with the AI backend from the terminal.")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML config file (default: $CHAT_CLIENT_CONFIG or config/default.yaml)",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="Backend API base URL, overrides the config file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: from config, INFO)",
    )
    return parser


async def run_repl(controller: ConversationController, reader=input, writer=print) -> None:
    """Read lines until EOF or a quit command.

    ``reader`` runs in a worker thread so the event loop is never blocked.
    """
    writer(f"Session {controller.session_id}. Type {CLEAR_COMMAND} to reset, /quit to leave.")
    while True:
        try:
            line = await asyncio.to_thread(reader, "> ")
        except EOFError:
            break
        command = line.strip()
        if command in QUIT_COMMANDS:
            break
        if command == CLEAR_COMMAND:
            if await controller.clear():
                writer("(conversation cleared)")
            else:
                writer(f"(could not clear, {len(controller.transcript)} messages kept)")
            continue
        controller.input_text = line
        follow_up = await controller.submit()
        if follow_up is not None:
            writer(format_message(follow_up))


async def _main_async(settings: ClientSettings) -> None:
    controller = ConversationController.from_settings(settings)
    try:
        await run_repl(controller)
    finally:
        await controller.aclose()


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    settings = ClientSettings.from_config(load_config(args.config))
    if args.base_url:
        settings = replace(settings, base_url=args.base_url.rstrip("/"))
    if args.log_level:
        settings = replace(settings, log_level=args.log_level.upper())

    logging.basicConfig(
        level=settings.log_level,
        format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
    )
    logger.info("Using backend %s", settings.base_url)

    try:
        asyncio.run(_main_async(settings))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
