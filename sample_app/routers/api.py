"""Demo endpoint used to generate traffic."""

from __future__ import annotations

import random
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel


class ApiResponse(BaseModel):
    message: str
    time: datetime
    random: int


router = APIRouter(tags=["api"])


@router.get("/api", response_model=ApiResponse)
def read_api() -> ApiResponse:
    return ApiResponse(
        message="API response",
        time=datetime.now(timezone.utc),
        random=random.randrange(1000),
    )


__all__ = ["router", "ApiResponse"]
