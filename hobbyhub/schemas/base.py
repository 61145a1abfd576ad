from pydantic import BaseModel
from typing import Optional, Generic, TypeVar, List

T = TypeVar('T')


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None


class ListEnvelope(BaseModel, Generic[T]):
    success: bool = True
    count: int
    data: List[T]


class Message(BaseModel):
    success: bool = True
    message: str
