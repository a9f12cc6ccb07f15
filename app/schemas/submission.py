"""Submission request/response schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from app.core.enums import BmiCategory, ErrorKind


class SubmissionCreate(BaseModel):
    """Documented shape of POST /submit. Validation itself runs in the metrics engine."""

    name: str
    email: Optional[str] = Field(None, description="Required when the deployment collects email")
    sex: str = Field(..., description="male or female (case-insensitive)")
    height_cm: float = Field(..., description="Height in centimetres")
    weight_lbs: float = Field(..., description="Body weight in pounds")
    waist_cm: float = Field(..., description="Waist circumference in centimetres")
    neck_cm: float = Field(..., description="Neck circumference in centimetres")


class MetricsRead(BaseModel):
    bmi: float
    bmi_category: BmiCategory
    waist_height_ratio: float
    body_fat_percentage: Optional[float] = None


class SubmissionResponse(BaseModel):
    success: bool = True
    data: MetricsRead


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    kind: ErrorKind
    field: Optional[str] = None
