"""Client-side layer: REST client, optimistic content store and admin session."""

from portfolio_cms.client.api_client import ApiError, PortfolioApiClient
from portfolio_cms.client.data_store import ContentStore, Mutation, MutationState, Outcome
from portfolio_cms.client.session import SessionManager, SessionState
from portfolio_cms.client.token_store import FileTokenStore, MemoryTokenStore, TokenStore

__all__ = [
    "ApiError",
    "ContentStore",
    "FileTokenStore",
    "MemoryTokenStore",
    "Mutation",
    "MutationState",
    "Outcome",
    "PortfolioApiClient",
    "SessionManager",
    "SessionState",
    "TokenStore",
]
