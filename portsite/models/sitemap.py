from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ChangeFreq = Literal["always", "hourly", "daily", "weekly", "monthly", "yearly", "never"]


class SitemapEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str  # relative to the site URL, "" for the homepage
    priority: float = Field(..., ge=0, le=1)
    changefreq: ChangeFreq
