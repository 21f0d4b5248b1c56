from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime


class SystemLogResponse(BaseModel):
    """Schema for activity log responses"""
    id: int
    user_id: int
    user_name: Optional[str] = None
    action: str
    description: str
    table_name: Optional[str] = None
    record_id: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
