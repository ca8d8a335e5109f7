"""Webhook ingestion: signature check, agent wiring and acknowledgments."""

import hashlib
import hmac
import json
import logging
from http import HTTPStatus
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .agent import Agent
from .config import AppConfig
from .credentials import create_credential_provider
from .linear_client import LinearIssueStore
from .openai_client import create_llm_client

logger = logging.getLogger(__name__)

SUCCESS_RESPONSE = {'status': 'success', 'message': 'Webhook received successfully'}
FAILURE_RESPONSE = {'status': 'error', 'message': 'Failed to process webhook'}
INVALID_SIGNATURE_RESPONSE = {'status': 'error', 'message': 'Invalid signature'}


def verify_signature(body: bytes, signature: Optional[str], secret: str) -> bool:
    """Check the hex HMAC-SHA256 of the raw body against the signature header."""
    if not secret or not signature:
        return False
    expected = hmac.new(secret.encode('utf-8'), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected.encode('utf-8'), signature.strip().encode('utf-8'))


def _header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    for key, value in (headers or {}).items():
        if key.lower() == name.lower():
            return value
    return None


def build_agent(config: AppConfig) -> Agent:
    """Wire a fresh agent for one delivery."""
    credentials = create_credential_provider(config.linear)
    store = LinearIssueStore(config.linear, credentials)
    return Agent(store, create_llm_client(config.llm))


def handle_webhook(
    body: bytes,
    headers: Optional[Mapping[str, str]],
    config: AppConfig,
    agent_factory: Callable[[AppConfig], Agent] = build_agent,
) -> Tuple[int, Dict[str, Any]]:
    """
    Handle one webhook delivery.

    Args:
        body: Raw request body, exactly as signed by Linear.
        headers: Request headers.
        config: Application configuration.
        agent_factory: Builds the agent that processes the payload.

    Returns:
        (HTTP status code, JSON response body). Handled and ignored
        notifications both get the same success acknowledgment; failures
        never expose internal details.
    """
    signature = _header(headers, config.webhook.signature_header)
    if not verify_signature(body, signature, config.webhook.secret):
        logger.warning("Rejected webhook with invalid signature")
        return HTTPStatus.UNAUTHORIZED, dict(INVALID_SIGNATURE_RESPONSE)

    try:
        payload = json.loads(body)
    except ValueError as e:
        logger.error(f"Webhook body is not valid JSON: {e}")
        return HTTPStatus.BAD_REQUEST, dict(FAILURE_RESPONSE)

    logger.info(f"Received webhook {payload.get('webhookId') if isinstance(payload, dict) else ''}")

    try:
        agent = agent_factory(config)
    except Exception as e:
        logger.error(f"Error creating agent: {e}", exc_info=True)
        return HTTPStatus.BAD_REQUEST, dict(FAILURE_RESPONSE)

    outcome = agent.process(payload)
    if outcome.failed:
        return HTTPStatus.BAD_REQUEST, dict(FAILURE_RESPONSE)
    return HTTPStatus.OK, dict(SUCCESS_RESPONSE)
