"""Command-line entry point for replaying webhook payloads locally."""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from .config import load_config
from .webhook import build_agent, handle_webhook

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def run_once(args) -> int:
    """Run one stored webhook payload through the agent. Returns the exit code."""
    logger.info("Loading configuration...")
    config = load_config()

    body = Path(args.payload).read_bytes()

    if args.signature:
        # Same path as a real delivery, signature check included
        status, response = handle_webhook(body, {config.webhook.signature_header: args.signature}, config)
        logger.info(f"Webhook response {int(status)}: {json.dumps(response)}")
        return 0 if status < 300 else 1

    outcome = build_agent(config).process(json.loads(body))
    logger.info(f"Workflow finished in state '{outcome.state.value}'")
    if outcome.reason:
        logger.info(f"Reason: {outcome.reason}")
    if outcome.comment:
        logger.info(f"Posted comment {outcome.comment.id}")
    return 1 if outcome.failed else 0


def main():
    """Main entry point with command-line argument parsing."""
    parser = argparse.ArgumentParser(
        description="Replay a Linear agent webhook payload through the reply agent"
    )
    parser.add_argument(
        "--payload",
        required=True,
        help="Path to a JSON file holding the webhook body"
    )
    parser.add_argument(
        "--signature",
        default=None,
        help="linear-signature header value; when given the payload goes through signature verification"
    )

    args = parser.parse_args()

    try:
        sys.exit(run_once(args))
    except Exception as e:
        logger.error(f"Fatal error in run_once: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
