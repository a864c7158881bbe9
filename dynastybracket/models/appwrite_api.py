"""Pydantic models for Appwrite document API responses."""

from typing import Any, List, Optional

from pydantic import Field

from ..models.match import DictCompatibleBaseModel


class AppwriteDocumentList(DictCompatibleBaseModel):
    """Response for a list documents call"""

    total: int = 0
    documents: List[dict[str, Any]] = Field(default_factory=list)


class AppwriteError(DictCompatibleBaseModel):
    """Error body returned by Appwrite on non-2xx responses"""

    message: str = "Unknown error"
    code: Optional[int] = None
    type: Optional[str] = None


class AppwriteSettings(DictCompatibleBaseModel):
    """Connection and collection settings for the hosted store"""

    endpoint: str = "https://cloud.appwrite.io/v1"
    project_id: str
    api_key: str | None = None
    database_id: str
    countries_collection: str = "countries"
    players_collection: str = "players"
    matches_collection: str = "matches"
    page_limit: int = 100
