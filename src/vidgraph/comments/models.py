from typing import Optional

from pydantic import BaseModel


class CommentContent(BaseModel):
    """Body for creating or editing a comment."""
    content: Optional[str] = None
