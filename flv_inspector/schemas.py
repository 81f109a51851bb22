from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

FieldValue = Union[bool, int, float, str, None]


class ReportField(BaseModel):
    name: str = Field(..., description="Field name as produced by the reporting adapter.")
    value: FieldValue = Field(None, description="Decoded field value.")


class HeaderReport(BaseModel):
    record: Literal["header"] = "header"
    fields: list[ReportField] = Field(default_factory=list, description="Decoded header fields.")


class TagReport(BaseModel):
    record: Literal["tag"] = "tag"
    index: int = Field(..., description="1-based position of the tag in the stream.")
    offset: int = Field(..., description="Byte offset of the tag type byte.")
    tag_type: str = Field(..., description="Tag type name: audio, video or script.")
    fields: list[ReportField] = Field(default_factory=list, description="Decoded tag and payload fields in order.")


class ErrorReport(BaseModel):
    record: Literal["error"] = "error"
    kind: str = Field(..., description="Failure kind, e.g. BadSignature or TruncatedInput.")
    message: str
    offset: Optional[int] = Field(None, description="Byte offset where decoding failed.")
    tag_index: Optional[int] = Field(None, description="Index of the tag being decoded, if any.")


class SummaryReport(BaseModel):
    record: Literal["summary"] = "summary"
    tag_count: int = 0
    counts: dict[str, int] = Field(default_factory=dict, description="Number of tags per tag type.")
    clean_end: bool = Field(True, description="Whether the stream ended cleanly on a tag boundary.")
