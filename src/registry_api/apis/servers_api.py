# coding: utf-8

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Path, Query
from fastapi.exceptions import RequestValidationError
from pydantic import StrictStr, ValidationError
from typing_extensions import Annotated

from registry_api.models.server import ServerDetail, ServerList, ServerResponse
from registry_api.security_api import require_publish_token
from registry_api.services.registry_service import RegistryService

router = APIRouter()

_service = RegistryService()


def get_registry_service() -> RegistryService:
    return _service


@router.get(
    "/v0/servers",
    responses={
        200: {"model": ServerList, "description": "OK"},
    },
    tags=["servers"],
    summary="List servers",
    response_model=None,
)
def list_servers(
    cursor: Annotated[Optional[StrictStr], Query(description="Opaque pagination cursor")] = None,
    limit: Annotated[Optional[int], Query(description="Page size (max 100)")] = None,
    search: Annotated[Optional[StrictStr], Query(description="Substring search")] = None,
    updated_since: Annotated[
        Optional[StrictStr],
        Query(description="Only versions updated at or after this ISO-8601 timestamp"),
    ] = None,
    version: Annotated[
        Optional[StrictStr],
        Query(description="Exact version, or 'latest' (default)"),
    ] = None,
    service: RegistryService = Depends(get_registry_service),
) -> Dict[str, Any]:
    return service.list_servers(
        limit=limit,
        cursor=cursor,
        search=search.strip() if search is not None else None,
        updated_since=updated_since,
        version=version.strip() if version is not None else None,
    )


@router.get(
    "/v0/servers/{serverName:path}/versions",
    responses={
        200: {"model": ServerList, "description": "OK"},
        404: {"description": "Server not found"},
    },
    tags=["servers"],
    summary="List every version of a server",
    response_model=None,
)
def list_server_versions(
    server_name: Annotated[StrictStr, Path(alias="serverName", min_length=1)],
    service: RegistryService = Depends(get_registry_service),
) -> Dict[str, Any]:
    return service.list_server_versions(server_name)


@router.get(
    "/v0/servers/{serverName:path}/versions/{version}",
    responses={
        200: {"model": ServerResponse, "description": "OK"},
        404: {"description": "Server version not found"},
    },
    tags=["servers"],
    summary="Get one server version",
    response_model=ServerResponse,
    response_model_by_alias=True,
)
def get_server_version(
    server_name: Annotated[StrictStr, Path(alias="serverName", min_length=1)],
    version: Annotated[StrictStr, Path(min_length=1)],
    service: RegistryService = Depends(get_registry_service),
) -> Dict[str, Any]:
    return service.get_server_version(server_name, version)


@router.post(
    "/v0/publish",
    responses={
        200: {"model": ServerResponse, "description": "OK"},
        401: {"description": "Missing or invalid bearer token"},
        403: {"description": "Publishing disabled"},
    },
    tags=["publish"],
    summary="Publish a server version",
    response_model=ServerResponse,
    response_model_by_alias=True,
    dependencies=[Depends(require_publish_token)],
)
def publish_server(
    payload: Annotated[Dict[str, Any], Body()],
    service: RegistryService = Depends(get_registry_service),
) -> Dict[str, Any]:
    # validated for structure only; the raw body is what gets stored
    try:
        ServerDetail.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False, include_context=False)) from exc
    result = service.publish(payload)
    return result.response
