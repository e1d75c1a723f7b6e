"""Gist API client."""

from gist.client.client import GistClient, GistClientError

__all__ = ["GistClient", "GistClientError"]
