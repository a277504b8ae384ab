from typing import Optional

from pydantic import BaseModel


class PlaylistCreate(BaseModel):
    # Blank and missing values are rejected by the core with a 400.
    name: Optional[str] = None
    description: Optional[str] = None


class PlaylistUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
