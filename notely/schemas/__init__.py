# Pydantic schemas package
from notely.schemas.base import CamelModel, ErrorResponse, MessageResponse

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "MessageResponse",
]
