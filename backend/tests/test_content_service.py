"""Tests for the content service."""

import logging
import pytest
from app.core.exceptions import ValidationError, NotFoundError
from app.models.content import Content, ContentType, content_tags
from app.models.tag import Tag
from app.services.content_service import ContentService, parse_content_type


def _tag_ids(content):
    return sorted(tag.id for tag in content.tags)


@pytest.fixture
def service(db_session) -> ContentService:
    return ContentService(db_session)


@pytest.mark.unit
class TestParseContentType:
    @pytest.mark.parametrize("value", [t.value for t in ContentType])
    def test_accepts_every_known_value(self, value):
        assert parse_content_type(value).value == value

    @pytest.mark.parametrize("value", ["bogus-type", "Video", "", None, 3, ["video"]])
    def test_rejects_unknown_values(self, value):
        with pytest.raises(ValidationError):
            parse_content_type(value)


@pytest.mark.unit
class TestCreateContent:
    def test_create_is_owned_by_caller(self, service, test_user):
        content = service.create(
            test_user.id, "Attention is all you need", "Transformer paper", "article"
        )

        assert content.user_id == test_user.id
        assert content.user.username == test_user.username
        assert content.link is None
        assert content.tags == []

        fetched = service.get_by_id(test_user.id, content.id)
        assert fetched.id == content.id
        assert fetched.title == "Attention is all you need"
        assert fetched.type == ContentType.ARTICLE

    def test_create_with_tags(self, service, test_user, make_tag):
        ai = make_tag("ai")
        papers = make_tag("papers")

        content = service.create(
            test_user.id,
            "Paper",
            "Read later",
            "article",
            link="https://arxiv.org/abs/1706.03762",
            tag_ids=[ai.id, papers.id],
        )

        assert _tag_ids(content) == sorted([ai.id, papers.id])
        assert content.link == "https://arxiv.org/abs/1706.03762"

    def test_duplicate_tag_ids_attach_once(self, service, test_user, make_tag):
        ai = make_tag("ai")

        content = service.create(
            test_user.id, "t", "d", "video", tag_ids=[ai.id, ai.id]
        )

        assert [tag.id for tag in content.tags] == [ai.id]

    def test_empty_link_stored_as_null(self, service, test_user):
        content = service.create(test_user.id, "t", "d", "other", link="")

        assert content.link is None

    @pytest.mark.parametrize(
        "title, description, content_type",
        [
            (None, "d", "article"),
            ("t", None, "article"),
            ("t", "d", None),
            ("", "d", "article"),
        ],
    )
    def test_missing_required_fields(
        self, service, test_user, db_session, title, description, content_type
    ):
        with pytest.raises(ValidationError):
            service.create(test_user.id, title, description, content_type)

        assert db_session.query(Content).count() == 0

    def test_rejected_type_persists_nothing(self, service, test_user, db_session):
        with pytest.raises(ValidationError) as exc_info:
            service.create(test_user.id, "t", "d", "bogus-type")

        assert exc_info.value.message == "Invalid content type"
        assert db_session.query(Content).count() == 0

    def test_unknown_tag_rejects_whole_create(
        self, service, test_user, db_session, make_tag
    ):
        known = make_tag("known")

        with pytest.raises(NotFoundError):
            service.create(test_user.id, "t", "d", "book", tag_ids=[known.id, 4242])

        assert db_session.query(Content).count() == 0
        assert db_session.query(content_tags).count() == 0


@pytest.mark.unit
class TestOwnershipScoping:
    """Another user's content must look exactly like missing content."""

    def test_get_other_users_content(self, service, test_user, other_user, make_content):
        theirs = make_content(other_user)

        with pytest.raises(NotFoundError) as exc_info:
            service.get_by_id(test_user.id, theirs.id)

        assert exc_info.value.message == "Content not found"

    def test_same_error_as_missing_content(self, service, test_user, other_user, make_content):
        theirs = make_content(other_user)

        with pytest.raises(NotFoundError) as hidden:
            service.get_by_id(test_user.id, theirs.id)
        with pytest.raises(NotFoundError) as missing:
            service.get_by_id(test_user.id, 99999)

        assert hidden.value.message == missing.value.message

    def test_update_other_users_content(
        self, service, db_session, test_user, other_user, make_content
    ):
        theirs = make_content(other_user, title="Original")

        with pytest.raises(NotFoundError):
            service.update(test_user.id, theirs.id, {"title": "Hijacked"})

        db_session.refresh(theirs)
        assert theirs.title == "Original"

    def test_delete_other_users_content(
        self, service, db_session, test_user, other_user, make_content
    ):
        theirs = make_content(other_user)

        with pytest.raises(NotFoundError):
            service.delete(test_user.id, theirs.id)

        assert db_session.query(Content).filter(Content.id == theirs.id).count() == 1

    def test_lists_only_show_own_content(self, service, test_user, other_user, make_content):
        mine = make_content(test_user, title="Mine")
        make_content(other_user, title="Theirs")

        assert [c.id for c in service.list_for_owner(test_user.id)] == [mine.id]
        assert [c.id for c in service.list_home(test_user.id)] == [mine.id]
        assert [
            c.id for c in service.list_by_type(test_user.id, ContentType.ARTICLE)
        ] == [mine.id]


@pytest.mark.unit
class TestUpdateContent:
    def test_partial_update_keeps_other_fields(self, service, test_user, make_content):
        content = make_content(
            test_user, title="Old", description="Keep me", link="https://example.com"
        )

        updated = service.update(test_user.id, content.id, {"title": "New"})

        assert updated.title == "New"
        assert updated.description == "Keep me"
        assert updated.link == "https://example.com"
        assert updated.type == ContentType.ARTICLE

    def test_tags_untouched_unless_present_then_replaced(
        self, service, test_user, make_tag
    ):
        t1 = make_tag("t1")
        t2 = make_tag("t2")
        content = service.create(test_user.id, "t", "d", "article", tag_ids=[t1.id, t2.id])

        after_title = service.update(test_user.id, content.id, {"title": "new"})
        assert _tag_ids(after_title) == sorted([t1.id, t2.id])

        after_clear = service.update(test_user.id, content.id, {"tag_ids": []})
        assert after_clear.tags == []

    def test_tag_ids_none_clears_tags(self, service, test_user, make_tag, make_content):
        content = make_content(test_user, tags=[make_tag("t1")])

        updated = service.update(test_user.id, content.id, {"tag_ids": None})

        assert updated.tags == []

    def test_tags_are_replaced_not_merged(self, service, test_user, make_tag, make_content):
        t1 = make_tag("t1")
        t2 = make_tag("t2")
        t3 = make_tag("t3")
        content = make_content(test_user, tags=[t1, t2])

        updated = service.update(test_user.id, content.id, {"tag_ids": [t3.id]})

        assert _tag_ids(updated) == [t3.id]

    def test_unknown_tag_leaves_content_untouched(
        self, service, db_session, test_user, make_tag, make_content
    ):
        t1 = make_tag("t1")
        content = make_content(test_user, title="Before", tags=[t1])

        with pytest.raises(NotFoundError):
            service.update(
                test_user.id, content.id, {"title": "After", "tag_ids": [t1.id, 777]}
            )

        db_session.expire_all()
        reloaded = service.get_by_id(test_user.id, content.id)
        assert reloaded.title == "Before"
        assert _tag_ids(reloaded) == [t1.id]

    def test_invalid_type_rejected(self, service, db_session, test_user, make_content):
        content = make_content(test_user, content_type=ContentType.VIDEO)

        with pytest.raises(ValidationError):
            service.update(test_user.id, content.id, {"type": "bogus", "title": "x"})

        db_session.expire_all()
        reloaded = service.get_by_id(test_user.id, content.id)
        assert reloaded.type == ContentType.VIDEO
        assert reloaded.title == "Saved item"

    def test_null_type_rejected(self, service, test_user, make_content):
        content = make_content(test_user)

        with pytest.raises(ValidationError):
            service.update(test_user.id, content.id, {"type": None})

    def test_blank_title_rejected(self, service, test_user, make_content):
        content = make_content(test_user)

        with pytest.raises(ValidationError):
            service.update(test_user.id, content.id, {"title": "   "})

    def test_type_and_link_update(self, service, test_user, make_content):
        content = make_content(test_user, link="https://example.com")

        updated = service.update(
            test_user.id, content.id, {"type": "podcast", "link": ""}
        )

        assert updated.type == ContentType.PODCAST
        assert updated.link is None

    def test_unknown_keys_are_ignored(self, service, test_user, other_user, make_content):
        content = make_content(test_user)

        updated = service.update(test_user.id, content.id, {"user_id": other_user.id})

        assert updated.user_id == test_user.id

    def test_noop_round_trip(self, service, test_user, make_tag):
        """create -> get -> update({}) -> get keeps every field and updatedAt."""
        ai = make_tag("ai")
        created = service.create(
            test_user.id, "Title", "Desc", "course", link="https://l.example", tag_ids=[ai.id]
        )
        before = service.get_by_id(test_user.id, created.id)
        snapshot = (
            before.title,
            before.description,
            before.link,
            before.type,
            _tag_ids(before),
            before.updated_at,
        )

        service.update(test_user.id, created.id, {})
        after = service.get_by_id(test_user.id, created.id)

        assert (
            after.title,
            after.description,
            after.link,
            after.type,
            _tag_ids(after),
            after.updated_at,
        ) == snapshot

    def test_update_logs_only_real_changes(self, service, test_user, make_content, caplog):
        content = make_content(test_user)

        with caplog.at_level(logging.INFO, logger="app.services.content_service"):
            service.update(test_user.id, content.id, {"user_id": 99})
            assert not [r for r in caplog.records if "updated content" in r.getMessage()]

            service.update(test_user.id, content.id, {"title": "renamed", "tag_ids": []})

        messages = [r.getMessage() for r in caplog.records if "updated content" in r.getMessage()]
        assert messages == [
            f"User {test_user.id} updated content {content.id} (fields: ['title', 'tags'])"
        ]


@pytest.mark.unit
class TestAttachDetachTags:
    def test_attaching_twice_keeps_one_association(
        self, service, db_session, test_user, make_tag, make_content
    ):
        tag = make_tag("ai")
        content = make_content(test_user)

        service.attach_tags(test_user.id, content.id, [tag.id])
        result = service.attach_tags(test_user.id, content.id, [tag.id])

        assert [t.id for t in result.tags] == [tag.id]
        assert db_session.query(content_tags).count() == 1

    def test_attach_keeps_existing_tags(self, service, test_user, make_tag, make_content):
        t1 = make_tag("t1")
        t2 = make_tag("t2")
        content = make_content(test_user, tags=[t1])

        result = service.attach_tags(test_user.id, content.id, [t2.id])

        assert _tag_ids(result) == sorted([t1.id, t2.id])

    def test_attach_unknown_tag(self, service, test_user, make_content):
        content = make_content(test_user)

        with pytest.raises(NotFoundError):
            service.attach_tags(test_user.id, content.id, [31337])

    def test_detach(self, service, test_user, make_tag, make_content):
        t1 = make_tag("t1")
        t2 = make_tag("t2")
        content = make_content(test_user, tags=[t1, t2])

        result = service.detach_tag(test_user.id, content.id, t1.id)

        assert _tag_ids(result) == [t2.id]

    def test_detach_absent_tag_is_noop(self, service, test_user, make_tag, make_content):
        t1 = make_tag("t1")
        content = make_content(test_user, tags=[t1])

        result = service.detach_tag(test_user.id, content.id, 555)

        assert _tag_ids(result) == [t1.id]


@pytest.mark.unit
class TestDeleteContent:
    def test_delete_removes_content_and_associations(
        self, service, db_session, test_user, make_tag, make_content
    ):
        tag = make_tag("keep-me")
        content = make_content(test_user, tags=[tag])

        service.delete(test_user.id, content.id)

        assert db_session.query(Content).count() == 0
        assert db_session.query(content_tags).count() == 0
        # Tags themselves survive
        assert db_session.query(Tag).filter(Tag.id == tag.id).count() == 1

    def test_delete_then_get(self, service, test_user, make_content):
        content = make_content(test_user)

        service.delete(test_user.id, content.id)

        with pytest.raises(NotFoundError):
            service.get_by_id(test_user.id, content.id)


@pytest.mark.unit
class TestListContent:
    def test_list_by_type_returns_only_that_type(self, service, test_user, make_content):
        make_content(test_user, title="Essay", content_type=ContentType.ARTICLE)
        video = make_content(test_user, title="Talk", content_type=ContentType.VIDEO)

        results = service.list_by_type(test_user.id, "video")

        assert [c.id for c in results] == [video.id]

    def test_search_is_case_insensitive_on_description(
        self, service, test_user, make_content
    ):
        match = make_content(test_user, title="Bar", description="All about Foo")
        make_content(test_user, title="Baz", description="Nothing relevant")

        results = service.list_for_owner(test_user.id, search="foo")

        assert [c.id for c in results] == [match.id]

    def test_search_matches_title(self, service, test_user, make_content):
        match = make_content(test_user, title="FOOTBALL highlights", description="x")

        results = service.list_for_owner(test_user.id, search="football")

        assert [c.id for c in results] == [match.id]

    def test_search_treats_wildcards_literally(self, service, test_user, make_content):
        match = make_content(test_user, title="100% useful")
        make_content(test_user, title="100 ways")

        results = service.list_for_owner(test_user.id, search="100%")

        assert [c.id for c in results] == [match.id]

    def test_filter_by_tag(self, service, test_user, make_tag, make_content):
        ai = make_tag("ai")
        tagged = make_content(test_user, tags=[ai])
        make_content(test_user)

        results = service.list_for_owner(test_user.id, tag_id=ai.id)

        assert [c.id for c in results] == [tagged.id]

    def test_filters_compose(self, service, test_user, make_tag, make_content):
        ai = make_tag("ai")
        expected = make_content(
            test_user, title="AI lecture", content_type=ContentType.VIDEO, tags=[ai]
        )
        make_content(test_user, title="AI essay", content_type=ContentType.ARTICLE, tags=[ai])
        make_content(test_user, title="Cooking", content_type=ContentType.VIDEO, tags=[ai])
        make_content(test_user, title="AI untagged", content_type=ContentType.VIDEO)

        results = service.list_for_owner(
            test_user.id, content_type="video", tag_id=ai.id, search="lecture"
        )

        assert [c.id for c in results] == [expected.id]

    def test_unknown_type_filter(self, service, test_user):
        with pytest.raises(ValidationError):
            service.list_for_owner(test_user.id, content_type="bogus")

    def test_newest_first(self, service, test_user, make_content):
        first = make_content(test_user, title="first")
        second = make_content(test_user, title="second")
        third = make_content(test_user, title="third")

        expected = [third.id, second.id, first.id]
        assert [c.id for c in service.list_for_owner(test_user.id)] == expected
        assert [c.id for c in service.list_home(test_user.id)] == expected
