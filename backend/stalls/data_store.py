from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import numpy as np
import pandas as pd

from .config import DEFAULT_STALLS_CONFIG, StallsConfig

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000.0

_LIST_COLUMNS = ("dietary_tags", "hygiene_badges")

_df: pd.DataFrame | None = None


def _split_list(value: Any) -> list[str]:
    if not isinstance(value, str):
        return []
    return [v.strip() for v in value.split("|") if v.strip()]


def _load(config: StallsConfig = DEFAULT_STALLS_CONFIG) -> pd.DataFrame:
    df = pd.read_csv(config.stalls_path, dtype={"id": str, "owner_id": str})

    for col in _LIST_COLUMNS:
        df[col] = df[col].apply(_split_list)

    df["is_open"] = df["is_open"].astype(str).str.lower().eq("true")
    df["latitude"] = pd.to_numeric(df["latitude"], errors="coerce")
    df["longitude"] = pd.to_numeric(df["longitude"], errors="coerce")
    df["updated_at"] = df["created_at"]

    logger.info("Loaded %d stalls from %s", len(df), config.stalls_path)
    return df


def get_dataframe() -> pd.DataFrame:
    """Return the in-memory stall DataFrame, loading it on first call."""
    global _df
    if _df is None:
        _df = _load()
    return _df


def reset_store() -> None:
    """Drop the cached frame so the next access reloads the seed file."""
    global _df
    _df = None


def row_to_dict(row: pd.Series) -> dict[str, Any]:
    """Convert a stall row into plain Python values (NaN becomes ``None``)."""
    record: dict[str, Any] = {}
    for key, value in row.items():
        if isinstance(value, np.generic):
            value = value.item()
        if isinstance(value, float) and np.isnan(value):
            value = None
        record[key] = value
    return record


def get_stall(stall_id: str) -> dict[str, Any] | None:
    df = get_dataframe()
    match = df.loc[df["id"] == str(stall_id)]
    if match.empty:
        return None
    return row_to_dict(match.iloc[0])


def get_stalls_for_owner(owner_id: str) -> list[dict[str, Any]]:
    df = get_dataframe()
    owned = df.loc[df["owner_id"] == str(owner_id)].sort_values(
        "created_at", ascending=False
    )
    return [row_to_dict(row) for _, row in owned.iterrows()]


def haversine_m(
    lat: float, long: float, lats: np.ndarray, longs: np.ndarray
) -> np.ndarray:
    """Great-circle distance in metres from one point to many."""
    lat1, long1 = np.radians(lat), np.radians(long)
    lat2, long2 = np.radians(lats), np.radians(longs)
    dlat = lat2 - lat1
    dlong = long2 - long1
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlong / 2) ** 2
    return 2 * EARTH_RADIUS_M * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


def stalls_within(
    lat: float,
    long: float,
    radius_m: float,
    open_only: bool = False,
    config: StallsConfig = DEFAULT_STALLS_CONFIG,
) -> pd.DataFrame:
    """Stalls within *radius_m* of a point, nearest first."""
    df = get_dataframe()
    candidates = df.dropna(subset=["latitude", "longitude"]).copy()
    candidates["distance_meters"] = haversine_m(
        lat,
        long,
        candidates["latitude"].to_numpy(dtype=float),
        candidates["longitude"].to_numpy(dtype=float),
    )

    mask = candidates["distance_meters"] <= radius_m
    if open_only:
        mask = mask & candidates["is_open"]

    nearby = candidates.loc[mask].sort_values("distance_meters")
    return nearby.head(config.max_nearby_results)


def update_stall(stall_id: str, **fields: Any) -> dict[str, Any] | None:
    """Write *fields* onto a stall row and return the updated record."""
    df = get_dataframe()
    mask = df["id"] == str(stall_id)
    if not mask.any():
        return None

    fields.setdefault("updated_at", datetime.now(timezone.utc).isoformat())
    for column, value in fields.items():
        df.loc[mask, column] = value

    return get_stall(stall_id)
