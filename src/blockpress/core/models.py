"""Content block models: typed per-block metadata, parser side tables, TOC entries"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import (
    BaseModel, ConfigDict, SerializeAsAny, ValidationError, ValidationInfo, ValidatorFunctionWrapHandler,
    field_validator, model_validator,
)
from pydantic.alias_generators import to_camel


class BlockType(str, Enum):
    """Closed set of content block types"""
    paragraph = "paragraph"
    heading = "heading"
    image = "image"
    quote = "quote"
    list = "list"
    code = "code"
    gallery = "gallery"
    spacer = "spacer"
    video = "video"
    accordion = "accordion"
    callout = "callout"
    divider = "divider"
    file = "file"


BLOCK_TYPES = {t.value for t in BlockType}


class _Camel(BaseModel):
    """Accepts camelCase or snake_case keys and ignores anything unknown."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class BlockMeta(_Camel):
    """Metadata for block types that carry no fields (quote, divider)."""

    @field_validator("*", mode="wrap")
    @classmethod
    def _default_on_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        """A null or out-of-range value falls back to the field default instead of failing the block."""
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)


class ParagraphMeta(BlockMeta):
    is_drop_cap: Optional[bool] = None


class HeadingMeta(BlockMeta):
    level: int = 2

    @model_validator(mode="after")
    def _clamp_level(self):
        self.level = min(max(self.level, 1), 6)
        return self


class ImageMeta(BlockMeta):
    alt: Optional[str] = None
    caption: Optional[str] = None
    align: Literal["left", "center", "right", "full"] = "full"
    size: Literal["small", "medium", "large", "full"] = "full"


class VideoMeta(BlockMeta):
    video_type: Literal["youtube", "vimeo", "custom"] = "youtube"
    caption: Optional[str] = None


class ListMeta(BlockMeta):
    items: Optional[list[str]] = None
    ordered: bool = False
    list_type: Optional[Literal["bullet", "numbered"]] = None


class CodeMeta(BlockMeta):
    language: str = "text"


class GalleryImage(_Camel):
    url: str
    caption: Optional[str] = None
    alt: Optional[str] = None


class GalleryMeta(BlockMeta):
    images: list[GalleryImage] = []
    gallery_style: Literal["grid", "carousel", "masonry", "fullwidth"] = "grid"
    enable_download: bool = False


class AccordionItem(_Camel):
    question: str = ""
    answer: str = ""


class AccordionMeta(BlockMeta):
    items: list[AccordionItem] = []


class CalloutMeta(BlockMeta):
    callout_type: Literal["info", "warning", "success", "error"] = "info"


class SpacerMeta(BlockMeta):
    height: Literal["small", "medium", "large"] = "medium"


class FileMeta(BlockMeta):
    file_name: Optional[str] = None
    file_size: Optional[str] = None


META_BY_TYPE: dict[BlockType, type[BlockMeta]] = {
    BlockType.paragraph: ParagraphMeta,
    BlockType.heading:   HeadingMeta,
    BlockType.image:     ImageMeta,
    BlockType.quote:     BlockMeta,
    BlockType.list:      ListMeta,
    BlockType.code:      CodeMeta,
    BlockType.gallery:   GalleryMeta,
    BlockType.spacer:    SpacerMeta,
    BlockType.video:     VideoMeta,
    BlockType.accordion: AccordionMeta,
    BlockType.callout:   CalloutMeta,
    BlockType.divider:   BlockMeta,
    BlockType.file:      FileMeta,
}


class ContentBlock(BaseModel):
    """One typed, ordered unit of article content."""
    model_config = ConfigDict(frozen=True)

    id: str
    type: BlockType
    content: str = ""
    metadata: SerializeAsAny[BlockMeta] = BlockMeta()

    @field_validator("id", mode="before")
    @classmethod
    def _numeric_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    @model_validator(mode="before")
    @classmethod
    def _typed_metadata(cls, data: Any) -> Any:
        """Validate the raw metadata record against the model for this block's type."""
        if not isinstance(data, dict):
            return data
        try:
            block_type = BlockType(data.get("type"))
        except ValueError:
            return data
        meta_cls = META_BY_TYPE[block_type]
        raw = data.get("metadata")
        if isinstance(raw, meta_cls):
            return data
        if isinstance(raw, BaseModel):
            raw = raw.model_dump()
        return {**data, "metadata": meta_cls.model_validate(raw or {})}


class TocEntry(BaseModel):
    id: str
    text: str
    level: int


@dataclass
class ProtectedBlock:
    """A complex construct replaced by a placeholder token during parsing; not persisted."""
    token: str
    content: str
    kind: str                       # accordion | video | image | gallery


@dataclass
class ProtectedHtml:
    """Result of the protect pass: substituted HTML plus the token side table."""
    html: str
    blocks: list[ProtectedBlock] = field(default_factory=list)

    def lookup(self, token: str) -> ProtectedBlock | None:
        return next((b for b in self.blocks if b.token == token), None)
