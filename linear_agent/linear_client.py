"""Linear issue/comment store: abstract interface and GraphQL implementation."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests

from .config import LinearConfig
from .credentials import CredentialProvider
from .errors import LinearAPIError
from .models import AgentIdentity, Comment, Issue

logger = logging.getLogger(__name__)

COMMENT_FIELDS = """
    id
    body
    user { id }
    parent { id }
    issue { id }
"""

VIEWER_QUERY = """
query Viewer {
  viewer { id name displayName }
}
"""

ISSUE_QUERY = """
query Issue($id: String!) {
  issue(id: $id) { id title description }
}
"""

THREAD_QUERY = """
query ThreadComments($parentId: ID!, $first: Int!, $after: String) {
  comments(filter: { parent: { id: { eq: $parentId } } }, first: $first, after: $after) {
    nodes {%s}
    pageInfo { hasNextPage endCursor }
  }
}
""" % COMMENT_FIELDS

CREATE_COMMENT_MUTATION = """
mutation CommentCreate($input: CommentCreateInput!) {
  commentCreate(input: $input) {
    success
    comment {%s}
  }
}
""" % COMMENT_FIELDS


class IssueStore(ABC):
    """Abstract access to issues, comments and the acting user."""
    
    @abstractmethod
    def get_issue(self, issue_id: str) -> Issue:
        """Fetch a single issue."""
        pass
    
    @abstractmethod
    def list_comments_by_parent(self, parent_id: str) -> List[Comment]:
        """
        List every comment whose parent is ``parent_id``.
        
        Returns:
            Comments in the order the tracker returns them.
        """
        pass
    
    @abstractmethod
    def create_comment(self, issue_id: str, body: str, parent_id: Optional[str] = None) -> Comment:
        """Post a comment, as a reply to ``parent_id`` when given."""
        pass
    
    @abstractmethod
    def current_agent_identity(self) -> AgentIdentity:
        """Return the user the access token belongs to."""
        pass


def _comment_from_node(node: Dict[str, Any]) -> Comment:
    user = node.get("user") or {}
    parent = node.get("parent") or {}
    issue = node.get("issue") or {}
    return Comment(
        id=node["id"],
        issue_id=issue.get("id", ""),
        body=node.get("body") or "",
        user_id=user.get("id"),
        parent_id=parent.get("id"),
    )


class LinearIssueStore(IssueStore):
    """Linear GraphQL API client."""
    
    def __init__(self, config: LinearConfig, credentials: CredentialProvider, session: Optional[requests.Session] = None):
        """
        Initialize the Linear client.

        The access token is requested from ``credentials`` on the first API
        call and reused for the lifetime of this client.

        Args:
            config: Linear configuration.
            credentials: Source of the OAuth access token or personal API key.
            session: Optional requests session (mainly for tests).
        """
        self.config = config
        self.credentials = credentials
        self.session = session or requests.Session()
        self._authorization: Optional[str] = None

    def _authorization_header(self) -> str:
        if self._authorization is None:
            access_token = self.credentials.get_access_token()
            # Personal API keys are sent as-is, OAuth tokens as bearer tokens
            if access_token.startswith("lin_api_"):
                self._authorization = access_token
            else:
                self._authorization = f"Bearer {access_token}"
        return self._authorization

    def _execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = self.session.post(
            self.config.api_url,
            json={"query": query, "variables": variables or {}},
            headers={
                "Authorization": self._authorization_header(),
                "Content-Type": "application/json",
            },
            timeout=self.config.timeout,
        )
        response.raise_for_status()
        payload = response.json()
        if payload.get("errors"):
            messages = "; ".join(err.get("message", "unknown error") for err in payload["errors"])
            raise LinearAPIError(f"Linear API error: {messages}")
        return payload.get("data") or {}
    
    def get_issue(self, issue_id: str) -> Issue:
        data = self._execute(ISSUE_QUERY, {"id": issue_id})
        node = data.get("issue")
        if not node:
            raise LinearAPIError(f"Issue {issue_id} not found")
        return Issue(
            id=node["id"],
            title=node.get("title") or "",
            description=node.get("description"),
        )
    
    def list_comments_by_parent(self, parent_id: str) -> List[Comment]:
        comments = []
        cursor = None
        while True:
            data = self._execute(THREAD_QUERY, {
                "parentId": parent_id,
                "first": self.config.page_size,
                "after": cursor,
            })
            connection = data.get("comments") or {}
            comments.extend(_comment_from_node(node) for node in connection.get("nodes") or [])
            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")
            if not cursor:
                logger.warning(f"Thread {parent_id} reports more pages but no cursor, stopping")
                break
        logger.debug(f"Fetched {len(comments)} comments under parent {parent_id}")
        return comments
    
    def create_comment(self, issue_id: str, body: str, parent_id: Optional[str] = None) -> Comment:
        comment_input = {"issueId": issue_id, "body": body}
        if parent_id:
            comment_input["parentId"] = parent_id
        data = self._execute(CREATE_COMMENT_MUTATION, {"input": comment_input})
        result = data.get("commentCreate") or {}
        if not result.get("success") or not result.get("comment"):
            raise LinearAPIError(f"Failed to create comment on issue {issue_id}")
        return _comment_from_node(result["comment"])
    
    def current_agent_identity(self) -> AgentIdentity:
        data = self._execute(VIEWER_QUERY)
        viewer = data.get("viewer")
        if not viewer or not viewer.get("id"):
            raise LinearAPIError("Could not resolve the authenticated Linear user")
        return AgentIdentity(
            id=viewer["id"],
            name=viewer.get("name") or "",
            display_name=viewer.get("displayName") or "",
        )
