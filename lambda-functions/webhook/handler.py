"""
Lambda function receiving Linear agent webhooks.
Triggered by API Gateway for every webhook delivery.
"""

import base64
import json
import logging
from typing import Dict, Any

from linear_agent.config import load_config
from linear_agent.webhook import FAILURE_RESPONSE, handle_webhook

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)


def _raw_body(event: Dict[str, Any]) -> bytes:
    """Request body exactly as Linear signed it."""
    body = event.get('body') or ''
    if event.get('isBase64Encoded'):
        return base64.b64decode(body)
    return body.encode('utf-8')


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Handle one Linear webhook delivery.
    """
    try:
        config = load_config()
        status, response = handle_webhook(_raw_body(event), event.get('headers') or {}, config)
        return {
            'statusCode': int(status),
            'headers': {'Content-Type': 'application/json'},
            'body': json.dumps(response)
        }
    except Exception as e:
        logger.error(f"Error in webhook: {str(e)}", exc_info=True)
        return {
            'statusCode': 500,
            'headers': {'Content-Type': 'application/json'},
            'body': json.dumps(FAILURE_RESPONSE)
        }
