from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProcessMediaRequest(CamelModel):
    url: str | None = None
    type: str | None = None


class MediaInfoResponse(CamelModel):
    title: str
    duration: str
    thumbnail: str | None = None


class ProcessMediaResponse(CamelModel):
    success: bool = True
    message: str
    file_url: str
    media_info: MediaInfoResponse


class ErrorResponse(CamelModel):
    success: bool = False
    message: str


class DeliverRequest(CamelModel):
    file_path: str | None = None
    metadata: dict[str, Any] | None = None


class DeliverResponse(CamelModel):
    success: bool = True
    message: str
    result: Any = None
