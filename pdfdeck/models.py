from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from pdfdeck.errors import InvalidDocumentError

PDF_MIME_TYPE = "application/pdf"


class Slide(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    content: list[str] = Field(min_length=1)
    speaker_notes: str | None = Field(default=None, alias="speakerNotes")
    # What the slide's illustration should show; absent means no image.
    image_description: str | None = Field(
        default=None, alias="imageDescription")
    # Filled in after the outline stage as a data: URL.
    image_url: str | None = Field(default=None, alias="imageUrl")

    @field_validator("content")
    @classmethod
    def strip_bullets(cls, v: list[str]) -> list[str]:
        bullets = [b.strip() for b in v if b.strip()]
        if not bullets:
            raise ValueError("content needs at least one non-blank bullet")
        return bullets


OUTLINE_ADAPTER: TypeAdapter[list[Slide]] = TypeAdapter(list[Slide])


class AppStatus(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    GENERATING_IMAGES = "GENERATING_IMAGES"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class SessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: AppStatus = AppStatus.IDLE
    slides: list[Slide] | None = None
    error: str | None = None

    @model_validator(mode="after")
    def check_status(self) -> "SessionState":
        if self.status in (AppStatus.GENERATING_IMAGES, AppStatus.SUCCESS) and self.slides is None:
            raise ValueError(f"{self.status.value} requires slides")
        if self.status in (AppStatus.IDLE, AppStatus.LOADING) and self.slides is not None:
            raise ValueError(f"{self.status.value} cannot carry slides")
        if self.status is AppStatus.ERROR and not self.error:
            raise ValueError("ERROR requires a message")
        if self.status is not AppStatus.ERROR and self.error is not None:
            raise ValueError(f"{self.status.value} cannot carry an error")
        return self

    @classmethod
    def idle(cls) -> "SessionState":
        return cls(status=AppStatus.IDLE)

    @classmethod
    def loading(cls) -> "SessionState":
        return cls(status=AppStatus.LOADING)

    @classmethod
    def generating_images(cls, slides: list[Slide]) -> "SessionState":
        return cls(status=AppStatus.GENERATING_IMAGES, slides=list(slides))

    @classmethod
    def success(cls, slides: list[Slide]) -> "SessionState":
        return cls(status=AppStatus.SUCCESS, slides=list(slides))

    @classmethod
    def failed(cls, message: str) -> "SessionState":
        return cls(status=AppStatus.ERROR, error=message)

    @property
    def busy(self) -> bool:
        return self.status in (AppStatus.LOADING, AppStatus.GENERATING_IMAGES)


@dataclass(frozen=True)
class DocumentPayload:
    data: bytes
    filename: str = "document.pdf"
    mime_type: str = PDF_MIME_TYPE

    @classmethod
    def from_upload(cls, data: bytes, filename: str | None, mime_type: str | None) -> "DocumentPayload":
        mime = (mime_type or "").split(";")[0].strip().lower()
        if mime != PDF_MIME_TYPE:
            raise InvalidDocumentError()
        if not data:
            raise InvalidDocumentError("The uploaded PDF is empty.")
        return cls(data=data, filename=filename or "document.pdf", mime_type=PDF_MIME_TYPE)


class GenerateRequest(BaseModel):
    instruction: str = ""
