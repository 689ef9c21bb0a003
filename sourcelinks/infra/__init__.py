"""
Infrastructure layer for sourcelinks.

Contains abstractions for external systems:
- GitClient: Reading repository pointers (FETCH_HEAD) from disk

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, FetchHead, GIT_DIR_NAME, FETCH_HEAD_NAME

__all__ = [
    'GitClient',
    'FetchHead',
    'GIT_DIR_NAME',
    'FETCH_HEAD_NAME',
]
