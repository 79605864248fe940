"""
Base Pydantic schemas.

This module contains base schemas with common configuration
that other schemas can inherit from.
"""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    All other schemas should inherit from this class.
    """

    model_config = ConfigDict(from_attributes=True)


class FeedSchema(BaseModel):
    """
    Base schema for payloads parsed from upstream feeds.

    Unknown upstream fields are ignored and parsed records are immutable,
    since every refresh cycle replaces them wholesale.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)
