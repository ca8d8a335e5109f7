"""Data models for notifications, issues and conversation messages."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class NotificationType(str, Enum):
    """Agent-directed notification variants we act on."""
    ISSUE_ASSIGNED = "issueAssignedToYou"
    ISSUE_MENTIONED = "issueMention"
    COMMENT_MENTION = "issueCommentMention"
    NEW_COMMENT = "issueNewComment"


class Role(str, Enum):
    """Who authored a message, relative to the agent."""
    AGENT = "agent"
    OTHER = "other"


@dataclass(frozen=True)
class AgentIdentity:
    """The Linear user the agent acts as."""
    id: str
    name: str
    display_name: str


@dataclass
class Issue:
    """Represents a Linear issue."""
    id: str
    title: str = ""
    description: Optional[str] = None


@dataclass
class Comment:
    """Represents a Linear comment."""
    id: str
    issue_id: str
    body: str
    user_id: Optional[str]      # None for comments posted by integrations
    parent_id: Optional[str] = None


@dataclass
class Notification:
    """A classified, agent-directed webhook notification."""
    type: NotificationType
    issue_id: str
    issue: Optional[Issue] = None
    comment: Optional[Comment] = None
    parent_comment_id: Optional[str] = None
    parent_author_id: Optional[str] = None  # author of the thread's parent comment

    @property
    def is_issue_workflow(self) -> bool:
        return self.type in (NotificationType.ISSUE_ASSIGNED, NotificationType.ISSUE_MENTIONED)


@dataclass(frozen=True)
class RoleTaggedMessage:
    """A single conversation turn handed to the completion backend."""
    role: Role
    text: str


@dataclass
class ThreadContext:
    """Context built from the existing replies under a parent comment."""
    parent_id: str
    comments: List[Comment] = field(default_factory=list)

    @property
    def author_ids(self) -> set:
        return {comment.user_id for comment in self.comments if comment.user_id}


@dataclass
class SingleMessageContext:
    """Context built from one inbound comment or an issue description."""
    text: str
    author_id: Optional[str] = None  # None for issue descriptions
    origin_comment_id: Optional[str] = None


ContextSource = Union[ThreadContext, SingleMessageContext]
