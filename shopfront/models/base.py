# shopfront/models/base.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

class WireModel(BaseModel):
    """Base model for payloads coming from the backend"""
    # backend ids arrive as ints or strings depending on the endpoint
    model_config = ConfigDict(from_attributes=True, coerce_numbers_to_str=True, extra="ignore")

class TimeStampedModel(WireModel):
    """Base model with timestamp fields"""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
