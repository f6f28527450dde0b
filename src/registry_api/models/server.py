# coding: utf-8

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from typing_extensions import Annotated


class Repository(BaseModel):
    """Source repository of a server."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    url: StrictStr
    source: StrictStr
    id: Optional[StrictStr] = None
    subfolder: Optional[StrictStr] = None


class ServerDetail(BaseModel):
    """Structural check for a published server descriptor.

    Only the fields the registry indexes are typed; everything else is allowed
    through and stored as sent.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: Annotated[StrictStr, Field(min_length=1, max_length=255)]
    version: Annotated[StrictStr, Field(min_length=1, max_length=255)]
    description: Optional[StrictStr] = None
    title: Optional[StrictStr] = None
    repository: Optional[Repository] = None
    website_url: Optional[StrictStr] = Field(default=None, alias="websiteUrl")
    icons: Optional[List[Dict[str, Any]]] = None
    packages: Optional[List[Dict[str, Any]]] = None
    remotes: Optional[List[Dict[str, Any]]] = None


class ServerResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    server: Dict[str, Any]
    meta: Dict[str, Any] = Field(alias="_meta")


class ServerListMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    count: int
    next_cursor: Optional[StrictStr] = Field(default=None, alias="nextCursor")


class ServerList(BaseModel):
    servers: List[ServerResponse]
    metadata: ServerListMetadata
