import json

import pytest

from clients.boosty import ApiClient, ClientOptions, CommentBlock, CommentOrder, TargetType
from clients.boosty.errors import DecodeError
from clients.boosty.media_content import Text

from helpers import BASE_URL, FakeBoosty, api_path, comment_payload, form_of, post_payload, reply

FORM = "application/x-www-form-urlencoded"


# Posts -------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_post():
    fake = FakeBoosty()
    fake.add("GET", api_path("blog/blog/post/p1"), reply(200, post_payload(title="Hello")))
    client = fake.client()

    post = await client.get_post("blog", "p1")

    assert post.id == "p1"
    assert post.title == "Hello"
    assert post.user.blog_url == "blog"
    assert post.count.reactions.heart == 3
    assert post.currency_prices.rub == 300
    assert post.currency_prices.usd == 3.5
    assert post.tags[0].title == "music"


@pytest.mark.asyncio
async def test_get_posts_with_paging():
    fake = FakeBoosty()
    body = {
        "data": [post_payload("p1"), post_payload("p2")],
        "extra": {"offset": "1697000000:2", "isLast": False},
    }
    fake.add("GET", api_path("blog/blog/post/"), reply(200, body))
    client = fake.client()

    response = await client.get_posts_response("blog", 2, offset="1697000001:3")
    posts = await client.get_posts("blog", 2)

    assert [p.id for p in response.data] == ["p1", "p2"]
    assert response.extra.offset == "1697000000:2"
    assert response.extra.is_last is False
    assert [p.id for p in posts] == ["p1", "p2"]

    first, second = fake.calls("GET", api_path("blog/blog/post/"))
    assert first.url.params["limit"] == "2"
    assert first.url.params["offset"] == "1697000001:3"
    assert "offset" not in second.url.params


@pytest.mark.asyncio
async def test_get_post_invalid_shape_is_decode_error():
    fake = FakeBoosty()
    fake.add("GET", api_path("blog/blog/post/p1"), reply(200, {"title": "missing id", "hasAccess": True, "data": [{}]}))
    client = fake.client()

    with pytest.raises(DecodeError):
        await client.get_post("blog", "p1")


# Comments ----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_comments_params():
    fake = FakeBoosty()
    path = api_path("blog/blog/post/p1/comment/")
    fake.add("GET", path, reply(200, {"data": [comment_payload()], "extra": {"isFirst": True, "isLast": True}}))
    client = fake.client()

    response = await client.get_comments("blog", "p1", limit=20, reply_limit=3, order=CommentOrder.TOP)

    (comment,) = response.data
    assert comment.int_id == 10091879
    assert comment.author.name == "user1"
    assert comment.reactions.like == 1
    assert response.extra.is_last is True
    assert isinstance(comment.extract_content()[0], Text)

    (request,) = fake.calls("GET", path)
    assert dict(request.url.params) == {"limit": "20", "reply_limit": "3", "order": "top"}


@pytest.mark.asyncio
async def test_create_comment_sends_blocks_as_form():
    fake = FakeBoosty()
    path = api_path("blog/blog/post/p1/comment/")
    fake.add("POST", path, reply(200, comment_payload(int_id=55)))
    client = fake.client()
    await client.set_bearer_token("tok")

    blocks = [CommentBlock.text("hi"), CommentBlock.smile("Cat"), CommentBlock.text_end()]
    comment = await client.create_comment("blog", "p1", blocks, reply_id=10091879)

    assert comment.int_id == 55
    (request,) = fake.calls("POST", path)
    assert request.headers["content-type"] == FORM
    form = form_of(request)
    assert form["reply_id"] == "10091879"
    assert json.loads(form["data"]) == [
        {"type": "text", "content": json.dumps(["hi", "unstyled", []])},
        {"type": "smile", "name": "Cat"},
        {"type": "text", "content": "", "modificator": "BLOCK_END"},
    ]


@pytest.mark.asyncio
async def test_create_comment_without_reply():
    fake = FakeBoosty()
    path = api_path("blog/blog/post/p1/comment/")
    fake.add("POST", path, reply(200, comment_payload()))
    client = fake.client()

    await client.create_comment("blog", "p1", [CommentBlock.text("top level")])

    (request,) = fake.calls("POST", path)
    assert "reply_id" not in form_of(request)


# Showcase ----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_showcase():
    fake = FakeBoosty()
    path = api_path("blog/blog/showcase/")
    body = {
        "data": {
            "showcaseItems": [
                {"showcaseItemId": 1, "itemType": "post", "itemId": "p1", "isVisible": True, "post": post_payload()}
            ]
        },
        "extra": {"blogId": 9, "isEnabled": True, "counters": {"visibleTotal": 1, "visiblePostsCount": 1}},
    }
    fake.add("GET", path, reply(200, body))
    client = fake.client()

    showcase = await client.get_showcase("blog", limit=10, only_visible=True)

    (item,) = showcase.data.showcase_items
    assert item.post.id == "p1"
    assert showcase.extra.is_enabled is True
    assert showcase.extra.counters.visible_total == 1
    (request,) = fake.calls("GET", path)
    assert request.url.params["limit"] == "10"
    assert request.url.params["only_visible"] == "true"


@pytest.mark.asyncio
@pytest.mark.parametrize("enabled, sent", [(True, "true"), (False, "false")])
async def test_change_showcase_status(enabled, sent):
    fake = FakeBoosty()
    path = api_path("blog/blog/showcase/status/")
    fake.add("PUT", path, reply(200))
    client = fake.client()

    await client.change_showcase_status("blog", enabled)

    (request,) = fake.calls("PUT", path)
    assert form_of(request) == {"is_enabled": sent}


# Subscriptions -----------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_blog_subscription_levels():
    fake = FakeBoosty()
    path = api_path("blog/blog/subscription_level/")
    level = {
        "id": 1,
        "name": "Free",
        "price": 0,
        "currencyPrices": {"RUB": 0, "USD": 0},
        "data": [{"type": "text", "content": "perks", "modificator": ""}],
        "promos": [],
    }
    fake.add("GET", path, reply(200, {"data": [level]}))
    client = fake.client()

    levels = await client.get_blog_subscription_levels("blog", show_free_level=True)

    assert [lv.name for lv in levels] == ["Free"]
    assert levels[0].extract_content() == [Text(content="perks")]
    (request,) = fake.calls("GET", path)
    assert request.url.params["show_free_level"] == "true"


@pytest.mark.asyncio
async def test_get_user_subscriptions():
    fake = FakeBoosty()
    path = api_path("user/subscriptions")
    body = {
        "data": [
            {
                "id": 3,
                "levelId": 1,
                "name": "Tier",
                "price": 300,
                "blog": {"blogUrl": "blog", "title": "Blog", "owner": {"id": 7, "name": "author"}},
            }
        ],
        "total": 1,
        "limit": 30,
    }
    fake.add("GET", path, reply(200, body))
    client = fake.client()

    subs = await client.get_user_subscriptions(limit=30, with_follow=True)

    assert subs.total == 1
    assert subs.data[0].blog.owner.name == "author"
    (request,) = fake.calls("GET", path)
    assert request.url.params["with_follow"] == "true"


# Targets -----------------------------------------------------------------------


TARGET = {
    "id": 42,
    "bloggerUrl": "blog",
    "bloggerId": 7,
    "description": "New mic",
    "targetSum": 5000,
    "currentSum": 1200,
    "type": "money",
}


@pytest.mark.asyncio
async def test_get_blog_targets():
    fake = FakeBoosty()
    fake.add("GET", api_path("target/blog/"), reply(200, {"data": [TARGET]}))
    client = fake.client()

    (target,) = await client.get_blog_targets("blog")
    assert target.id == 42
    assert target.target_sum == 5000
    assert target.current_sum == 1200


@pytest.mark.asyncio
async def test_create_blog_target():
    fake = FakeBoosty()
    path = api_path("target/money")
    fake.add("POST", path, reply(200, TARGET))
    client = fake.client()

    target = await client.create_blog_target("blog", "New mic", 5000, TargetType.MONEY)

    assert target.description == "New mic"
    (request,) = fake.calls("POST", path)
    assert request.headers["content-type"] == FORM
    assert form_of(request) == {"blog_url": "blog", "description": "New mic", "target_sum": "5000"}


@pytest.mark.asyncio
async def test_update_blog_target():
    fake = FakeBoosty()
    path = api_path("target/42")
    fake.add("PUT", path, reply(200, {**TARGET, "targetSum": 6000}))
    client = fake.client()

    target = await client.update_blog_target(42, "New mic", 6000)

    assert target.target_sum == 6000
    (request,) = fake.calls("PUT", path)
    assert form_of(request) == {"description": "New mic", "target_sum": "6000"}


@pytest.mark.asyncio
async def test_delete_blog_target():
    fake = FakeBoosty()
    path = api_path("target/42")
    fake.add("DELETE", path, reply(200))
    client = fake.client()

    assert await client.delete_blog_target(42) is None
    assert len(fake.calls("DELETE", path)) == 1


@pytest.mark.asyncio
async def test_delete_blog_target_invalid_json():
    fake = FakeBoosty()
    fake.add("DELETE", api_path("target/42"), reply(200, text="{oops"))
    client = fake.client()

    with pytest.raises(DecodeError):
        await client.delete_blog_target(42)


# Client surface ----------------------------------------------------------------


def test_headers_as_map():
    client = ApiClient(base_url=BASE_URL, options=ClientOptions(extra_headers={"X-Trace": "1"}))
    headers = client.headers_as_map()

    assert headers["accept"] == "application/json"
    assert headers["cache-control"] == "no-cache"
    assert headers["dnt"] == "1"
    assert headers["x-trace"] == "1"
    assert "authorization" not in headers


@pytest.mark.asyncio
async def test_base_url_override_and_close():
    async with ApiClient(base_url="https://other.test/", options=ClientOptions(timeout=5)) as client:
        assert client.options.base_url == "https://other.test"
        assert client.options.timeout == 5
        assert client.options.api_url("post/1") == "https://other.test/v1/post/1"
