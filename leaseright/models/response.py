from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from leaseright.models.base import CamelModel

T = TypeVar("T")


class ActionResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[Any] = None


class Page(CamelModel, Generic[T]):
    items: List[T]
    page: int
    per_page: int
    total: int
    total_pages: int
