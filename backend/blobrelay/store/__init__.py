from .base import BlobStore, BlobStream
from .github import GitHubContentsStore

__all__ = ["BlobStore", "BlobStream", "GitHubContentsStore"]
