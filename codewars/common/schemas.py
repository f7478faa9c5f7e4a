from __future__ import annotations
from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime

# ERROR AND STATUS SCHEMAS

class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str
    error_code: str
    details: Optional[Dict[str, Any]] = None

class SuccessResponse(BaseModel):
    """Plain acknowledgment"""
    success: bool = True

class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str
    time_utc: datetime
    uptime_seconds: float
    version: str
    components: Dict[str, str]  # component_name -> status
