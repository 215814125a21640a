import pytest
import pytest_asyncio

from relaystore import crud
from relaystore.core.exceptions import (
    ConflictingArgumentsError,
    InvalidArgumentError,
    InvalidCursorError,
)
from relaystore.graphql.pagination import OrderSpec, PaginationArgs, paginate
from relaystore.graphql.types.common import OrderDirection
from relaystore.graphql.types.post import Post
from relaystore.graphql.types.user import User, UserWhereInput
from relaystore.graphql.types.video import Video
from relaystore.graphql.utils import encode_cursor
from relaystore.models.user import User as UserModel

NAMES = ["alice", "bob", "carol", "dave", "erin", "frank", "grace"]


@pytest_asyncio.fixture
async def users(create_users):
    return await create_users(*NAMES)


async def _page(db, order=None, filters=(), **kwargs):
    return await paginate(
        db,
        crud.user,
        args=PaginationArgs(**kwargs),
        to_node=User.from_model,
        order=order,
        filters=filters,
    )


def _names(connection) -> list[str]:
    return [edge.node.name for edge in connection.edges]


@pytest.mark.asyncio
async def test_default_page_returns_everything_in_key_order(db_session, users):
    connection = await _page(db_session)

    assert _names(connection) == NAMES
    assert connection.total_count == len(NAMES)
    assert connection.page_info.has_next_page is False
    assert connection.page_info.has_previous_page is False
    assert connection.page_info.start_cursor == connection.edges[0].cursor
    assert connection.page_info.end_cursor == connection.edges[-1].cursor


@pytest.mark.asyncio
async def test_default_limit_applies_without_arguments(db_session, users):
    connection = await paginate(
        db_session,
        crud.user,
        args=PaginationArgs(),
        to_node=User.from_model,
        default_limit=3,
    )

    assert _names(connection) == NAMES[:3]
    assert connection.page_info.has_next_page is True


@pytest.mark.asyncio
async def test_forward_pages_have_no_overlap_and_no_gap(db_session, users):
    seen: list[str] = []
    after = None
    while True:
        connection = await _page(db_session, first=3, after=after)
        seen.extend(_names(connection))
        assert connection.total_count == len(NAMES)
        if not connection.page_info.has_next_page:
            break
        after = connection.page_info.end_cursor

    assert seen == NAMES


@pytest.mark.asyncio
async def test_backward_page_is_in_ascending_order(db_session, users):
    connection = await _page(db_session, last=3)

    assert _names(connection) == NAMES[-3:]
    assert connection.page_info.has_previous_page is True
    assert connection.page_info.has_next_page is False


@pytest.mark.asyncio
async def test_backward_pages_match_the_forward_scan(db_session, users):
    seen: list[str] = []
    before = None
    while True:
        connection = await _page(db_session, last=2, before=before)
        seen[:0] = _names(connection)
        if not connection.page_info.has_previous_page:
            break
        before = connection.page_info.start_cursor

    assert seen == NAMES


@pytest.mark.asyncio
async def test_last_before_cursor_is_the_tail_preceding_it(db_session, users):
    forward = await _page(db_session, first=5)
    cursor = forward.edges[4].cursor  # erin

    connection = await _page(db_session, last=2, before=cursor)

    assert _names(connection) == ["carol", "dave"]


@pytest.mark.asyncio
async def test_after_and_before_select_the_window_between(db_session, users):
    forward = await _page(db_session)
    after, before = forward.edges[1].cursor, forward.edges[5].cursor

    assert _names(await _page(db_session, after=after, before=before)) == NAMES[2:5]
    assert _names(await _page(db_session, first=2, after=after, before=before)) == [
        "carol",
        "dave",
    ]
    assert _names(await _page(db_session, last=2, after=after, before=before)) == [
        "dave",
        "erin",
    ]


@pytest.mark.asyncio
async def test_total_count_is_independent_of_the_window(db_session, users):
    forward = await _page(db_session)
    cursor = forward.edges[3].cursor
    windows = [
        {},
        {"first": 1},
        {"first": 2, "after": cursor},
        {"last": 2},
        {"last": 1, "before": cursor},
        {"first": 0},
    ]

    counts = {(await _page(db_session, **window)).total_count for window in windows}

    assert counts == {len(NAMES)}


@pytest.mark.asyncio
async def test_empty_page_has_no_cursors(db_session, users):
    connection = await _page(db_session, first=0)

    assert connection.edges == []
    assert connection.page_info.start_cursor is None
    assert connection.page_info.end_cursor is None
    assert connection.page_info.has_next_page is True


@pytest.mark.asyncio
async def test_empty_collection(db_session):
    connection = await _page(db_session, first=10)

    assert connection.total_count == 0
    assert connection.edges == []
    assert connection.page_info.has_next_page is False


@pytest.mark.asyncio
async def test_filters_bound_both_window_and_count(db_session, users):
    filters = UserWhereInput(name_contains="a").to_filters()

    first_page = await _page(db_session, filters=filters, first=2)
    second_page = await _page(
        db_session, filters=filters, first=2, after=first_page.page_info.end_cursor
    )

    expected = [name for name in NAMES if "a" in name]
    assert first_page.total_count == len(expected)
    assert _names(first_page) + _names(second_page) == expected[:4]


@pytest.mark.asyncio
async def test_compound_order_breaks_ties_on_primary_key(db_session, create_users):
    created = await create_users("bob", "alice", "bob", "alice", "bob")
    order = OrderSpec.for_model(UserModel, "name")

    seen = []
    after = None
    while True:
        connection = await _page(db_session, order=order, first=1, after=after)
        seen.extend(edge.node.db_id for edge in connection.edges)
        if not connection.page_info.has_next_page:
            break
        after = connection.page_info.end_cursor

    ids = [user.id for user in created]
    assert seen == [ids[1], ids[3], ids[0], ids[2], ids[4]]


@pytest.mark.asyncio
async def test_descending_order(db_session, users):
    order = OrderSpec.for_model(UserModel, "name", OrderDirection.DESC)

    first_page = await _page(db_session, order=order, first=3)
    second_page = await _page(
        db_session, order=order, first=3, after=first_page.page_info.end_cursor
    )
    tail = await _page(db_session, order=order, last=2)

    descending = sorted(NAMES, reverse=True)
    assert _names(first_page) + _names(second_page) == descending[:6]
    assert _names(tail) == descending[-2:]


@pytest.mark.asyncio
async def test_first_and_last_conflict(db_session, users):
    with pytest.raises(ConflictingArgumentsError):
        await _page(db_session, first=1, last=1)


@pytest.mark.asyncio
@pytest.mark.parametrize("argument", ["first", "last"])
async def test_negative_limits_are_rejected(db_session, argument):
    with pytest.raises(InvalidArgumentError) as exc_info:
        await _page(db_session, **{argument: -1})
    assert exc_info.value.field == argument


@pytest.mark.asyncio
async def test_limits_above_the_maximum_are_rejected(db_session):
    with pytest.raises(InvalidArgumentError):
        await paginate(
            db_session,
            crud.user,
            args=PaginationArgs(first=11),
            to_node=User.from_model,
            max_limit=10,
        )


@pytest.mark.asyncio
async def test_cursor_from_another_ordering_is_rejected(db_session, users):
    by_name = OrderSpec.for_model(UserModel, "name")
    connection = await _page(db_session, order=by_name, first=2)

    with pytest.raises(InvalidCursorError):
        await _page(db_session, first=2, after=connection.page_info.end_cursor)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "cursor",
    [
        "garbage",
        encode_cursor("users:id:ASC", ["not-an-int"]),
        encode_cursor("users:id:ASC", [1, 2]),
    ],
)
async def test_invalid_cursors_are_rejected(db_session, users, cursor):
    with pytest.raises(InvalidCursorError):
        await _page(db_session, first=1, after=cursor)


def test_order_signature_names_table_columns_and_direction():
    order = OrderSpec.for_model(UserModel, "name", OrderDirection.DESC)

    assert order.signature == "users:name,id:DESC"
    assert OrderSpec.for_model(UserModel).signature == "users:id:ASC"


@pytest.mark.asyncio
async def test_cursor_from_another_connection_is_rejected(
    db_session, create_post, create_video
):
    await create_post("P")
    for name in ("v0", "v1", "v2"):
        await create_video(name)
    posts = await paginate(
        db_session, crud.post, args=PaginationArgs(first=1), to_node=Post.from_model
    )

    # Posts and videos share the uuid `id` ordering column
    with pytest.raises(InvalidCursorError):
        await paginate(
            db_session,
            crud.video,
            args=PaginationArgs(first=10, after=posts.page_info.end_cursor),
            to_node=Video.from_model,
        )
