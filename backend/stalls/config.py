from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class StallsConfig:
    data_dir: Path = Path(os.getenv("STALLS_DATA_DIR", str(_DEFAULT_DATA_DIR)))
    stalls_filename: str = "stalls.csv"
    reviews_filename: str = "reviews.csv"
    default_radius_m: int = int(os.getenv("DEFAULT_RADIUS_M", "1000"))
    max_nearby_results: int = 50

    @property
    def stalls_path(self) -> Path:
        return self.data_dir / self.stalls_filename

    @property
    def reviews_path(self) -> Path:
        return self.data_dir / self.reviews_filename


DEFAULT_STALLS_CONFIG = StallsConfig()
