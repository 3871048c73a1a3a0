from pydantic import BaseModel, ConfigDict, Field


class Plan(BaseModel):
    """Premium listing plan offered at checkout"""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    price: int = Field(..., gt=0, description="Price in minor currency units")
    valid: int = Field(..., gt=0, description="Validity period in days")
