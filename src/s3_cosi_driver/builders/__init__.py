"""Builders for backend clients."""

from .provider import create_core_v1_api, create_s3_provider, create_user_client

__all__ = ["create_core_v1_api", "create_s3_provider", "create_user_client"]
