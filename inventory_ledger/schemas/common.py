from pydantic import BaseModel, Field, ConfigDict


class MessageResponse(BaseModel):
    """Generic acknowledgement."""
    success: bool = True
    message: str = Field(..., alias="mensaje")

    model_config = ConfigDict(populate_by_name=True)
