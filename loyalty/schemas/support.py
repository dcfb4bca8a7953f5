"""Support ticket request schemas"""

from typing import Optional

from pydantic import Field

from ..models import TicketPriority, TicketStatus
from .base import RequestSchema


class SupportTicketCreateSchema(RequestSchema):
    subject: str = Field(..., min_length=5, max_length=255)
    message: str = Field(..., min_length=10)
    priority: TicketPriority = TicketPriority.MEDIUM


class SupportTicketUpdateSchema(RequestSchema):
    status: Optional[TicketStatus] = None
    admin_response: Optional[str] = Field(None, min_length=1)
    priority: Optional[TicketPriority] = None
    assigned_to: Optional[int] = None
