"""Asset annotator schemas."""

from clipgenius.asset_annotator.schemas.asset import (
    AssetAnnotation,
    MediaAsset,
    MediaProbe,
)
from clipgenius.asset_annotator.schemas.interval import Interval

__all__ = [
    "AssetAnnotation",
    "Interval",
    "MediaAsset",
    "MediaProbe",
]
