"""
Response models for the Boosty API.

Boosty mostly uses camelCase keys; every model accepts both camelCase and the
snake_case field names. Unknown keys are ignored and most fields have
defaults, so schema additions on the platform side do not break parsing.
Content blocks are kept raw and typed on demand via extract_content().
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from . import media_content
from .media_content import ContentItem


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# Shared ------------------------------------------------------------------------


class Flags(ApiModel):
    show_post_donations: bool = False


class User(ApiModel):
    id: int = 0
    name: str = ""
    blog_url: str = ""
    avatar_url: str = ""
    has_avatar: bool = False
    flags: Flags = Field(default_factory=Flags)


class Tag(ApiModel):
    id: int
    title: str


class Reactions(ApiModel):
    dislike: int = 0
    heart: int = 0
    fire: int = 0
    angry: int = 0
    wonder: int = 0
    laught: int = 0
    sad: int = 0
    like: int = 0


class ReactionCounter(ApiModel):
    type: str
    count: int = 0


class CurrencyPrices(ApiModel):
    rub: float = Field(0.0, validation_alias=AliasChoices("RUB", "rub"))
    usd: float = Field(0.0, validation_alias=AliasChoices("USD", "usd"))


# Posts -------------------------------------------------------------------------


class Count(ApiModel):
    comments: int = 0
    likes: int = 0
    reactions: Reactions = Field(default_factory=Reactions)


class ContentCounter(ApiModel):
    type: str
    count: int = 0
    size: int = 0


class Post(ApiModel):
    id: str
    title: str = ""
    int_id: Optional[int] = None
    has_access: bool = False
    data: List[Dict[str, Any]] = Field(default_factory=list)
    teaser: List[Dict[str, Any]] = Field(default_factory=list)
    user: Optional[User] = None
    tags: List[Tag] = Field(default_factory=list)
    count: Count = Field(default_factory=Count)
    content_counters: List[ContentCounter] = Field(default_factory=list)
    currency_prices: CurrencyPrices = Field(default_factory=CurrencyPrices)
    price: int = 0
    donations: float = 0
    created_at: int = 0
    updated_at: int = 0
    publish_time: int = 0
    sort_order: int = 0
    is_pinned: bool = False
    is_blocked: bool = False
    is_deleted: bool = False
    is_published: bool = True
    is_liked: bool = False
    is_record: bool = False
    is_comments_denied: bool = False
    is_waiting_video: bool = False
    show_views_counter: bool = False
    is_showcase_visible: bool = False
    signed_query: str = ""
    advertiser_info: Optional[Any] = None

    def not_available(self) -> bool:
        return not self.has_access or not self.data

    def safe_title(self) -> str:
        if not self.title.strip():
            return f"untitled_{self.id}"
        return self.title

    def extract_content(self) -> List[ContentItem]:
        return media_content.extract_content(self.data)

    def extract_teaser(self) -> List[ContentItem]:
        return media_content.extract_content(self.teaser)


class PostsExtra(ApiModel):
    offset: str = ""
    is_last: bool = False


class PostsResponse(ApiModel):
    data: List[Post] = Field(default_factory=list)
    extra: PostsExtra = Field(default_factory=PostsExtra)


# Comments ----------------------------------------------------------------------


class PostRef(ApiModel):
    id: str


class Author(ApiModel):
    id: int
    name: str = ""
    has_avatar: bool = False
    avatar_url: str = ""


class CommentsExtra(ApiModel):
    is_first: bool = False
    is_last: bool = False


class Replies(ApiModel):
    data: List["Comment"] = Field(default_factory=list)
    extra: CommentsExtra = Field(default_factory=CommentsExtra)


class Comment(ApiModel):
    id: str
    int_id: int
    author: Author
    post: Optional[PostRef] = None
    data: List[Dict[str, Any]] = Field(default_factory=list)
    created_at: int = 0
    updated_at: Optional[int] = None
    is_deleted: bool = False
    is_blocked: bool = False
    is_updated: bool = False
    reply_count: int = 0
    replies: Optional[Replies] = None
    reactions: Reactions = Field(default_factory=Reactions)
    reaction_counters: List[ReactionCounter] = Field(default_factory=list)
    parent_id: Optional[int] = None
    reply_id: Optional[int] = None
    reply_to_user: Optional[Author] = None

    def not_available(self) -> bool:
        return not self.data

    def extract_content(self) -> List[ContentItem]:
        return media_content.extract_content(self.data)


class CommentsResponse(ApiModel):
    data: List[Comment] = Field(default_factory=list)
    extra: CommentsExtra = Field(default_factory=CommentsExtra)


Replies.model_rebuild()
Comment.model_rebuild()
CommentsResponse.model_rebuild()


class CommentBlock(BaseModel):
    """Outgoing comment content block, built with text()/text_end()/smile()."""

    type: str
    content: Optional[str] = None
    modificator: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def text(cls, text: str) -> "CommentBlock":
        return cls(type="text", content=json.dumps([text, "unstyled", []], ensure_ascii=False), modificator="")

    @classmethod
    def text_end(cls) -> "CommentBlock":
        return cls(type="text", content="", modificator="BLOCK_END")

    @classmethod
    def smile(cls, name: str) -> "CommentBlock":
        return cls(type="smile", name=name)

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(exclude_none=True)
        if payload.get("modificator") == "":
            del payload["modificator"]
        return payload


# Showcase ----------------------------------------------------------------------


class Showcase(ApiModel):
    showcase_item_id: int
    item_type: str = ""
    item_id: str = ""
    is_visible: bool = False
    position: int = 0
    post: Optional[Post] = None


class ShowcaseData(ApiModel):
    showcase_items: List[Showcase] = Field(default_factory=list)


class ShowcaseCounters(ApiModel):
    visible_total: int = 0
    visible_posts_count: int = 0
    visible_bundles_count: int = 0


class ShowcaseExtra(ApiModel):
    offset: int = 0
    blog_id: int = 0
    counters: ShowcaseCounters = Field(default_factory=ShowcaseCounters)
    is_enabled: bool = False
    is_last: bool = False


class ShowcaseResponse(ApiModel):
    data: ShowcaseData = Field(default_factory=ShowcaseData)
    extra: ShowcaseExtra = Field(default_factory=ShowcaseExtra)


# Subscriptions -----------------------------------------------------------------


class PromoCount(ApiModel):
    activation: int = 0
    max_activation: Optional[int] = None


class Discount(ApiModel):
    price: int = 0
    percent: int = 0
    currency_prices: Dict[str, float] = Field(default_factory=dict)


class Promo(ApiModel):
    id: int
    type: str = ""
    description: Optional[str] = None
    start_time: int = 0
    end_time: Optional[int] = None
    is_finished: bool = False
    count: PromoCount = Field(default_factory=PromoCount)
    discount: Discount = Field(default_factory=Discount)


class SubscriptionLevel(ApiModel):
    id: int
    name: str = ""
    price: float = 0
    currency_prices: Dict[str, float] = Field(default_factory=dict)
    is_limited: bool = False
    is_archived: bool = False
    is_hidden: bool = False
    deleted: bool = False
    created_at: int = 0
    owner_id: int = 0
    promos: List[Promo] = Field(default_factory=list)
    data: List[Dict[str, Any]] = Field(default_factory=list)

    def extract_content(self) -> List[ContentItem]:
        return media_content.extract_content(self.data)


class BlogOwner(ApiModel):
    id: int
    name: str = ""
    has_avatar: bool = False
    avatar_url: str = ""


class BlogInfo(ApiModel):
    blog_url: str
    title: str = ""
    cover_url: str = ""
    has_adult_content: bool = False
    owner: Optional[BlogOwner] = None


class Subscription(ApiModel):
    id: int
    level_id: int = 0
    name: str = ""
    price: int = 0
    custom_price: int = 0
    period: int = 0
    on_time: int = 0
    off_time: Optional[int] = None
    next_pay_time: Optional[int] = None
    is_pause: bool = False
    is_suspended: bool = False
    is_archived: bool = False
    owner_id: int = 0
    subscription_level: Optional[SubscriptionLevel] = None
    blog: Optional[BlogInfo] = None
    recommended_promo: Optional[Promo] = None


class SubscriptionsResponse(ApiModel):
    data: List[Subscription] = Field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0


# Targets -----------------------------------------------------------------------


class Target(ApiModel):
    id: int
    blogger_url: str = ""
    blogger_id: int = 0
    description: str = ""
    priority: int = 0
    created_at: int = 0
    target_sum: float = 0
    current_sum: float = 0
    finish_time: Optional[int] = None
    type: str = ""
