from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _to_kebab(name: str) -> str:
    return name.replace("_", "-")


class _BaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_kebab,
        populate_by_name=True,
    )


class DiskSpec(_BaseModel):
    """A persisted RAM disk definition."""

    model_config = ConfigDict(frozen=True)
    name: str = Field(..., min_length=1)
    volume_name: Optional[str] = None
    capacity: int = Field(default=0, ge=0)

    # The volume is mounted under the disk name unless told otherwise.
    @model_validator(mode="before")
    @classmethod
    def default_volume_name(cls, data: Any) -> Any:
        if isinstance(data, dict):
            has_volume = "volume_name" in data or "volume-name" in data
            if not has_volume and "name" in data:
                return {**data, "volume-name": data["name"]}
        return data


class Settings(_BaseModel):
    """Top-level ramsync settings.

    An empty ``sync-root`` means no sync folder has been chosen yet.
    """

    sync_root: str = ""
    auto_recreate_disks: bool = False
    volumes_root: str = Field(default="/Volumes", min_length=1)
    rsync_path: str = Field(default="rsync", min_length=1)
    disks: List[DiskSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_disk_names(self) -> Settings:
        seen: set[str] = set()
        for disk in self.disks:
            if disk.name in seen:
                raise ValueError(f"Duplicate disk name '{disk.name}'")
            seen.add(disk.name)
        return self
