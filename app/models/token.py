from typing import Optional

from pydantic import BaseModel


class TokenData(BaseModel):
    user_id: str
    email: Optional[str] = None
