"""
Common Schemas
Shapes shared by several routers
"""

from typing import List, Optional
from pydantic import BaseModel


class PaginationInfo(BaseModel):
    """Page metadata returned by list endpoints"""
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationInfo":
        total_pages = (total + limit - 1) // limit if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1
        )


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error envelope rendered by the exception handlers"""
    error: bool = True
    message: str
    status_code: int
    timestamp: str
    details: Optional[List[str]] = None
