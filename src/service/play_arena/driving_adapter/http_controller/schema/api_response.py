from typing import Generic, Optional, TypeVar

from pydantic import BaseModel


T = TypeVar('T')


class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by every success response; failures use the same shape"""

    success: bool = True
    message: str = 'OK'
    data: Optional[T] = None
