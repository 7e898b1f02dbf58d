from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from albatross.schemas.flags import InstallFlags, UpgradeFlags

Values = dict[str, Any]


class _ChartRequest(BaseModel):
    # Wire keys are capitalized: {"Name", "Chart", "Values", "Flags"}
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="Name")
    chart: str = Field(default="", alias="Chart")
    values: Values = Field(default_factory=dict, alias="Values")

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")


class InstallRequest(_ChartRequest):
    flags: InstallFlags = Field(default_factory=InstallFlags, alias="Flags")


class UpgradeRequest(_ChartRequest):
    flags: UpgradeFlags = Field(default_factory=UpgradeFlags, alias="Flags")
