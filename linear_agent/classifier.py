"""Classification of raw Linear webhook payloads into notifications."""

import logging
from typing import Any, Dict, Optional

from .errors import MalformedNotificationError
from .models import Comment, Issue, Notification, NotificationType

logger = logging.getLogger(__name__)

AGENT_NOTIFICATION_TYPE = "AppUserNotification"


def _parse_issue(data: Any) -> Optional[Issue]:
    if not isinstance(data, dict) or not data.get("id"):
        return None
    return Issue(
        id=data["id"],
        title=data.get("title") or "",
        description=data.get("description"),
    )


def _parse_comment(data: Any, fallback_id: Optional[str], issue_id: Optional[str]) -> Optional[Comment]:
    if not isinstance(data, dict):
        return None
    comment_id = data.get("id") or fallback_id
    body = data.get("body")
    if not comment_id or body is None:
        return None
    return Comment(
        id=comment_id,
        issue_id=data.get("issueId") or issue_id or "",
        body=body,
        user_id=data.get("userId"),
        parent_id=data.get("parentId"),
    )


def classify_notification(payload: Any) -> Optional[Notification]:
    """
    Classify a webhook payload.
    
    Args:
        payload: The decoded JSON body of a webhook delivery.
        
    Returns:
        The typed Notification, or None when the payload is not something
        the agent acts on.
        
    Raises:
        MalformedNotificationError: If the payload is a recognized
            notification but lacks a field its variant requires.
    """
    if not isinstance(payload, dict):
        logger.info(f"Ignoring non-object webhook body ({type(payload).__name__})")
        return None
    if payload.get("type") != AGENT_NOTIFICATION_TYPE:
        logger.info(f"Ignoring webhook of type {payload.get('type')}")
        return None
    
    data = payload.get("notification")
    if not isinstance(data, dict):
        raise MalformedNotificationError("AppUserNotification payload has no notification object")
    
    raw_type = data.get("type")
    try:
        notification_type = NotificationType(raw_type)
    except ValueError:
        logger.info(f"Ignoring unsupported notification type {raw_type!r}")
        return None
    
    issue = _parse_issue(data.get("issue"))
    issue_id = data.get("issueId") or (issue.id if issue else None)
    
    if notification_type in (NotificationType.ISSUE_ASSIGNED, NotificationType.ISSUE_MENTIONED):
        if not issue_id:
            raise MalformedNotificationError(f"{raw_type} notification has no issue reference")
        return Notification(type=notification_type, issue_id=issue_id, issue=issue)
    
    parent_comment_id = data.get("parentCommentId")
    parent_comment = data.get("parentComment") if isinstance(data.get("parentComment"), dict) else {}
    if not parent_comment_id:
        parent_comment_id = parent_comment.get("id")
    
    # A brand-new top-level comment gives the agent no reason to speak up.
    if notification_type == NotificationType.NEW_COMMENT and not parent_comment_id:
        logger.info("Ignoring new top-level comment without a parent thread")
        return None
    
    comment = _parse_comment(data.get("comment"), data.get("commentId"), issue_id)
    if comment is None:
        raise MalformedNotificationError(f"{raw_type} notification has no comment reference")
    
    issue_id = issue_id or comment.issue_id
    if not issue_id:
        raise MalformedNotificationError(f"{raw_type} notification has no issue reference")
    
    return Notification(
        type=notification_type,
        issue_id=issue_id,
        issue=issue,
        comment=comment,
        parent_comment_id=parent_comment_id,
        parent_author_id=parent_comment.get("userId"),
    )
