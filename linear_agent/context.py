"""Conversation context reconstruction for a notification."""

import logging
from typing import List, Optional

from .linear_client import IssueStore
from .mentions import strip_self_mentions
from .models import (
    AgentIdentity,
    Comment,
    ContextSource,
    Issue,
    Role,
    RoleTaggedMessage,
    SingleMessageContext,
    ThreadContext,
)

logger = logging.getLogger(__name__)


def role_for(author_id: Optional[str], identity: AgentIdentity) -> Role:
    """The agent role is assigned by author ID equality, nothing else."""
    return Role.AGENT if author_id is not None and author_id == identity.id else Role.OTHER


def comment_context(store: IssueStore, comment: Comment, parent_id: Optional[str]) -> ContextSource:
    """
    Pick the context source for a comment notification.
    
    Args:
        store: Issue store used to fetch the thread.
        comment: The inbound comment.
        parent_id: Parent comment of the thread the inbound comment sits in.
        
    Returns:
        A ThreadContext with every reply under ``parent_id`` when that thread
        has comments, otherwise a SingleMessageContext for the inbound comment.
    """
    if parent_id:
        thread = store.list_comments_by_parent(parent_id)
        if thread:
            logger.info(f"Using {len(thread)} comments of thread {parent_id} as context")
            return ThreadContext(parent_id=parent_id, comments=list(thread))
        logger.info(f"Thread {parent_id} has no comments yet, falling back to the inbound comment")
    return SingleMessageContext(
        text=comment.body,
        author_id=comment.user_id,
        origin_comment_id=comment.id,
    )


def issue_context(issue: Issue) -> Optional[SingleMessageContext]:
    """Context for an issue notification, or None if the issue has no description."""
    if not issue.description or not issue.description.strip():
        return None
    return SingleMessageContext(text=issue.description)


def agent_participates(source: ContextSource, identity: AgentIdentity, parent_author_id: Optional[str] = None) -> bool:
    """True if the agent wrote the parent comment or at least one reply under it."""
    if parent_author_id is not None and parent_author_id == identity.id:
        return True
    return isinstance(source, ThreadContext) and identity.id in source.author_ids


def build_messages(source: ContextSource, identity: AgentIdentity) -> List[RoleTaggedMessage]:
    """
    Map a context source to role-tagged messages with self-mentions stripped.
    
    Thread comments keep the order the store returned them in.
    """
    if isinstance(source, ThreadContext):
        return [
            RoleTaggedMessage(
                role=role_for(comment.user_id, identity),
                text=strip_self_mentions(comment.body, identity),
            )
            for comment in source.comments
        ]
    return [
        RoleTaggedMessage(
            role=role_for(source.author_id, identity),
            text=strip_self_mentions(source.text, identity),
        )
    ]
