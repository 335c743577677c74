"""Asset lookup used by the render compiler."""

from pathlib import Path
from typing import Protocol

from clipgenius.edit_executor.schemas import AssetInfo


class AssetResolver(Protocol):
    """Resolves asset ids to files and stream facts."""

    def source_path(self, asset_id: str) -> Path | None:
        """Return the playable file for an asset, or None if unknown."""
        ...

    def asset_info(self, asset_id: str) -> AssetInfo | None:
        """Return duration and audio presence, or None if unknown."""
        ...


class StaticAssetResolver:
    """Resolver over a fixed set of assets known at export time."""

    def __init__(self) -> None:
        """Initialize an empty resolver."""
        self._paths: dict[str, Path] = {}
        self._info: dict[str, AssetInfo] = {}

    def add(
        self,
        asset_id: str,
        source_path: Path,
        duration_seconds: float,
        has_audio: bool,
    ) -> "StaticAssetResolver":
        """Register an asset and return self for chaining."""
        self._paths[asset_id] = source_path
        self._info[asset_id] = AssetInfo(
            duration_seconds=duration_seconds,
            has_audio=has_audio,
        )
        return self

    def source_path(self, asset_id: str) -> Path | None:
        """Return the registered path for an asset."""
        return self._paths.get(asset_id)

    def asset_info(self, asset_id: str) -> AssetInfo | None:
        """Return the registered stream facts for an asset."""
        return self._info.get(asset_id)
