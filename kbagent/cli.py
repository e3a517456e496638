#!/usr/bin/env python3
import argparse
import os
import sys

from . import __version__
from .chat_generator import DeepSeekClient
from .config import Settings, load_env_file
from .errors import KBAgentError
from .interface import AppContext, ChatInterface
from .knowledge import load_knowledge_base
from .logger import logger, setup_logging


def parse_arguments(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Support desk chat over a JSON knowledge base')
    parser.add_argument('--kb', help='Path to knowledge base JSON file (default: knowledge_base.json)')
    parser.add_argument('--model', help='Model name (default: deepseek-chat)')
    parser.add_argument('--env-file', help='Path to .env file to load instead of the default locations')
    parser.add_argument('--insecure', action='store_true', default=None,
                        help='Disable TLS certificate verification (testing only)')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        type=str.upper, help='Log level (default: LOG_LEVEL or INFO)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_arguments(argv)
    setup_logging(args.log_level or "INFO")

    load_env_file(args.env_file)
    if args.log_level is None and os.getenv("LOG_LEVEL"):
        setup_logging(os.getenv("LOG_LEVEL"))

    try:
        settings = Settings.from_env(
            kb_path=args.kb,
            model=args.model,
            verify_ssl=False if args.insecure else None,
        )
        knowledge_base = load_knowledge_base(settings.kb_path)
    except KBAgentError as e:
        logger.critical(f"Failed to start: {e}")
        sys.exit(1)

    if not settings.api_key:
        logger.warning("DEEPSEEK_API_KEY is not set, every query will fail")

    with DeepSeekClient.from_settings(settings) as client:
        ctx = AppContext(settings, knowledge_base, client)
        try:
            ChatInterface(ctx).run()
        except KeyboardInterrupt:
            print()
            sys.exit(130)


if __name__ == "__main__":
    main()
