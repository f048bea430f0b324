# telehealth/schemas/common/common.py
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: str


class MessageResponse(BaseModel):
    message: str
