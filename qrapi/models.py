from typing import Any, List, Optional
from pydantic import BaseModel, Field

class BulkRequest(BaseModel):
    # Each entry is checked item by item in the bulk processor.
    items: Optional[List[Any]] = Field(
        None,
        description='List of 1-50 objects: [{"type": "url", "data": {"url": "https://..."}}].',
    )
    size: Optional[Any] = Field(None, description="QR size in pixels (100-2000, default 200).")
    format: Optional[Any] = Field(None, description="png | svg | base64 (default png).")
    error_correction: Optional[Any] = Field(None, description="L, M, Q or H (default M).")

class Base64DecodeRequest(BaseModel):
    image: Optional[str] = Field(
        None,
        description="Base64 image, optionally as a data URL (data:image/png;base64,...).",
    )
