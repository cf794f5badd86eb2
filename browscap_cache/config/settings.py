"""Application settings and configuration schema."""

import os
from typing import Optional

from pydantic import BaseModel


class Settings(BaseModel):
    """Main cache settings."""
    data_dir: Optional[str] = None       # base directory, temp dir when unset
    source_path: Optional[str] = None    # JSONL capability source
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from BROWSCAP_* environment variables."""
        return cls(
            data_dir=os.getenv("BROWSCAP_DATA_DIR") or None,
            source_path=os.getenv("BROWSCAP_SOURCE") or None,
            log_level=os.getenv("BROWSCAP_LOG_LEVEL", "WARNING"),
        )
