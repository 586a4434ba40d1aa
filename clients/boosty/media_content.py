"""
Typed content extracted from the raw `data` blocks of posts and comments.

Boosty sends content as a list of JSON objects tagged by "type". Each block is
turned into exactly one ContentItem; blocks with an unknown tag or broken
fields become Unknown so that one bad block never hides the rest of a post.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List as ListT, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

VIDEO_QUALITY_PRIORITY = ("ultra_hd", "full_hd", "high", "medium", "low")
# Nesting levels of list entries followed before a list block is given up as Unknown
MAX_LIST_DEPTH = 32


class _Item(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Image(_Item):
    url: str
    id: str


class Video(_Item):
    url: str


class OkVideo(_Item):
    url: str
    title: str
    vid: str


class Audio(_Item):
    url: str
    title: str
    file_type: Optional[str] = None
    size: int = 0


class Text(_Item):
    modificator: str = ""
    content: str


class Smile(_Item):
    small_url: str
    medium_url: str
    large_url: str
    name: str
    is_animated: bool = False


class Link(_Item):
    explicit: bool = False
    content: str
    url: str


class File(_Item):
    url: str
    title: str
    size: int = 0


class List(_Item):
    style: str
    # One group per list entry; nested entries appear as List items inside a group
    items: ListT[ListT["ContentItem"]] = Field(default_factory=list)


class Unknown(_Item):
    block_type: Optional[str] = None


ContentItem = Union[Image, Video, OkVideo, Audio, Text, Smile, Link, File, List, Unknown]

List.model_rebuild()


# Extraction --------------------------------------------------------------------


class _PlayerUrl(BaseModel):
    type: str = ""
    url: str = ""


def pick_higher_quality_for_video(player_urls: Iterable[Mapping[str, Any]]) -> Optional[str]:
    """
    Pick the best non-empty URL by VIDEO_QUALITY_PRIORITY, falling back to the
    first non-empty URL of any quality.
    """
    urls = [_PlayerUrl.model_validate(pu) for pu in player_urls or []]
    for pref in VIDEO_QUALITY_PRIORITY:
        for pu in urls:
            if pu.type == pref and pu.url:
                return pu.url
    for pu in urls:
        if pu.url:
            return pu.url
    return None


def _ok_video(raw: Mapping[str, Any]) -> ContentItem:
    player_urls = raw.get("playerUrls", raw.get("player_urls"))
    if not isinstance(player_urls, list):
        raise ValueError("ok_video block without playerUrls")
    best = pick_higher_quality_for_video(player_urls)
    if best is None:
        raise ValueError("ok_video block without a playable url")
    return OkVideo(url=best, title=raw.get("title", ""), vid=raw["vid"])


def _list_group(entry: Mapping[str, Any], style: str, depth: int) -> ListT[ContentItem]:
    if depth > MAX_LIST_DEPTH:
        raise ValueError(f"list nested deeper than {MAX_LIST_DEPTH} levels")
    group = [_extract_block(b, depth) for b in entry.get("data") or []]
    for nested in entry.get("items") or []:
        nested_group = _list_group(nested, style, depth + 1)
        if nested_group:
            group.append(List(style=style, items=[nested_group]))
    return group


def _list(raw: Mapping[str, Any], depth: int = 0) -> ContentItem:
    style = raw["style"]
    if not isinstance(style, str):
        raise TypeError("list style must be a string")
    entries = raw.get("items") or []
    if not isinstance(entries, list):
        raise TypeError("list items must be an array")
    return List(style=style, items=[_list_group(e, style, depth + 1) for e in entries])


_PARSERS: Dict[str, Callable[[Mapping[str, Any]], ContentItem]] = {
    "image": Image.model_validate,
    "video": Video.model_validate,
    "ok_video": _ok_video,
    "audio": Audio.model_validate,
    "audio_file": Audio.model_validate,
    "text": Text.model_validate,
    "smile": Smile.model_validate,
    "link": Link.model_validate,
    "file": File.model_validate,
    "list": _list,
}


def _extract_block(raw: Any, depth: int) -> ContentItem:
    if not isinstance(raw, Mapping):
        return Unknown()
    block_type = raw.get("type")
    if not isinstance(block_type, str):
        return Unknown()

    parser = _PARSERS.get(block_type)
    if parser is None:
        return Unknown(block_type=block_type)
    try:
        if parser is _list:
            return _list(raw, depth)
        return parser(raw)
    except (ValidationError, KeyError, TypeError, ValueError, AttributeError) as e:
        logger.debug("Malformed %r content block: %s", block_type, e)
        return Unknown(block_type=block_type)


def extract_block(raw: Any) -> ContentItem:
    return _extract_block(raw, 0)


def extract_content(blocks: Optional[Iterable[Any]]) -> ListT[ContentItem]:
    """
    Map raw content blocks to ContentItems, one to one and in order.
    Never raises.
    """
    if blocks is None:
        return []
    return [extract_block(b) for b in blocks]
