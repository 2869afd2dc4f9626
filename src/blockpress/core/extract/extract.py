"""Convert raw article content (HTML string or structured records) into ContentBlocks"""

from itertools import count
from typing import Any

from pydantic import ValidationError

from blockpress.core.extract.blocks import split_blocks
from blockpress.core.extract.protect import extract_protected
from blockpress.core.media import DEFAULT_CLOUD_NAME
from blockpress.core.models import BLOCK_TYPES, BlockType, ContentBlock
from blockpress.core.utils.logging import get_logger


logger = get_logger(__name__)


def coerce_blocks(records: list) -> list[ContentBlock]:
    """Validate block-shaped records, dropping unknown types and malformed entries."""
    blocks = []
    for record in records:
        if isinstance(record, ContentBlock):
            blocks.append(record)
            continue
        if not isinstance(record, dict) or record.get('type') not in BLOCK_TYPES:
            kind = record.get('type') if isinstance(record, dict) else type(record).__name__
            logger.debug("dropped_record", kind=kind)
            continue
        try:
            blocks.append(ContentBlock.model_validate(record))
        except ValidationError as e:
            logger.warning("invalid_block_record", id=record.get('id'), error=str(e))
    return blocks


def parse_html(html: str, cloud_name: str = DEFAULT_CLOUD_NAME) -> list[ContentBlock]:
    """Protect, then split. Non-blank input that yields nothing becomes one paragraph."""
    ids = count(1)
    protected = extract_protected(html, ids)
    blocks = split_blocks(protected, ids, cloud_name)
    if not blocks and html.strip():
        logger.info("fallback_paragraph", length=len(html))
        return [ContentBlock(id='1', type=BlockType.paragraph, content=html.strip())]
    return blocks


def parse_content(value: Any, cloud_name: str = DEFAULT_CLOUD_NAME) -> list[ContentBlock]:
    """Entry point for article content of any accepted shape.

    None/empty -> []. A list whose items are all ContentBlocks is returned as-is;
    lists of dict records are validated. Strings go through the HTML pipeline.
    """
    if not value:
        return []
    if isinstance(value, list):
        if all(isinstance(b, ContentBlock) for b in value):
            return value
        return coerce_blocks(value)
    if not isinstance(value, str):
        logger.warning("non_string_content", kind=type(value).__name__)
        return []
    return parse_html(value, cloud_name)
