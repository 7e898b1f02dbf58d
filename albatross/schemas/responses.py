from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Release(BaseModel):
    """A named, versioned deployment unit tracked by the albatross API."""

    name: str = ""
    namespace: str = ""
    version: int = 0
    updated_at: datetime | None = None
    status: str = ""
    chart: str = ""
    app_version: str = ""


class InstallResponse(BaseModel):
    error: str = ""
    status: str = ""
    release: Release | None = None


class UpgradeResponse(BaseModel):
    error: str = ""
    status: str = ""
    release: Release | None = None


class ListResponse(BaseModel):
    error: str = ""
    releases: list[Release] = Field(default_factory=list)


class StatusResponse(BaseModel):
    error: str = ""
    release: Release = Field(default_factory=Release)


class UninstallResponse(BaseModel):
    error: str = ""
    status: str = ""
    release: Release = Field(default_factory=Release)
