from __future__ import annotations

from pydantic import BaseModel


# Inputs accept None so that missing or blank values reach the handlers,
# which answer with a specific "Missing ..." message.
class FetchUrlIn(BaseModel):
    url: str | None = None


class FetchUrlOut(BaseModel):
    success: bool = True
    base64: str
    type: str


class UploadIn(BaseModel):
    filename: str | None = None
    content: str | None = None


class UploadOut(BaseModel):
    success: bool = True
    url: str
    cached: bool | None = None


class ErrorOut(BaseModel):
    success: bool = False
    error: str
