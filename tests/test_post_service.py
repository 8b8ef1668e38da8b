"""Tests for the post store."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from noitro.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from noitro.core.schemas import Pagination
from noitro.modules.identity.models.user import User
from noitro.modules.posts.models.post import Post, PostTag
from noitro.modules.posts.schemas.post import PostCreate, PostUpdate
from noitro.modules.posts.services.post import (
    create_post,
    delete_post,
    derive_excerpt,
    get_post,
    get_related_posts,
    increment_views,
    list_posts,
    normalize_tags,
    update_post,
)
from noitro.modules.posts.comments.models.comment import Comment
from noitro.modules.posts.comments.services.comment import create_comment
from noitro.modules.posts.reactions.models.reaction import Reaction
from noitro.modules.posts.reactions.services.reaction import toggle_reaction


class TestNormalizeTags:

    def test_hashtag_string(self):
        assert normalize_tags("#nấuăn, #mẹo hay") == ["nấuăn", "mẹo", "hay"]

    def test_empty_entries_dropped(self):
        assert normalize_tags(" ,, #  #bánh ,") == ["bánh"]

    def test_duplicates_keep_first_position(self):
        assert normalize_tags("#a #b #a b") == ["a", "b"]

    def test_list_input(self):
        assert normalize_tags(["#rau", "củ quả"]) == ["rau", "củ", "quả"]

    def test_none(self):
        assert normalize_tags(None) == []


class TestExcerpt:

    def test_long_content_truncated(self):
        content = "x" * 200
        assert derive_excerpt(content) == "x" * 150 + "..."

    def test_exactly_150_kept(self):
        content = "y" * 150
        assert derive_excerpt(content) == content

    def test_explicit_excerpt_wins(self):
        assert derive_excerpt("z" * 300, "Tóm tắt") == "Tóm tắt"


class TestCreatePost:

    def test_create_initializes_counters_and_author(self, db, make_post):
        post = make_post(author_id="mai", hashtags="#canhchua #cá", image="/uploads/a.png")

        assert post.id
        assert post.likes == 0
        assert post.views == 0
        assert post.comments_count == 0
        assert post.status == "published"
        assert post.tags == ["canhchua", "cá"]
        assert post.images == ["/uploads/a.png"]
        assert post.created_at is not None
        assert db.query(User).filter(User.id == "mai").first().nickname == "Người dùng ẩn danh"

    def test_excerpt_derived_from_long_content(self, make_post):
        content = "a" * 151
        post = make_post(content=content)
        assert post.excerpt == content[:150] + "..."

    @pytest.mark.parametrize("missing", ["title", "content", "category"])
    def test_missing_required_field(self, db, missing):
        data = {"title": "Tiêu đề", "content": "Nội dung", "category": "home"}
        data[missing] = "   "
        with pytest.raises(ValidationError):
            create_post(db, PostCreate(**data), "author-1")
        assert db.query(Post).count() == 0

    def test_missing_author(self, db):
        with pytest.raises(ValidationError):
            create_post(db, PostCreate(title="t", content="c", category="home"), "")

    def test_unknown_category(self, db):
        with pytest.raises(ValidationError):
            create_post(db, PostCreate(title="t", content="c", category="garden"), "author-1")


class TestListPosts:

    def test_pagination_of_25_posts(self, db, make_post):
        for i in range(25):
            make_post(title=f"Bài {i}")

        posts, total = list_posts(db, page=3, limit=10)
        pagination = Pagination.build(3, 10, total)

        assert len(posts) == 5
        assert total == 25
        assert pagination.total_pages == 3
        assert pagination.has_next is False
        assert pagination.has_prev is True

    def test_newest_first(self, db, make_post):
        older = make_post(title="Cũ")
        newer = make_post(title="Mới")
        older.created_at = datetime(2024, 1, 1)
        newer.created_at = datetime(2024, 1, 2)
        db.commit()

        posts, _ = list_posts(db)
        assert [p.id for p in posts] == [newer.id, older.id]

    def test_filter_by_category(self, db, make_post):
        make_post(category="baby")
        make_post(category="cooking")

        posts, total = list_posts(db, category="baby")
        assert total == 1
        assert posts[0].category == "baby"

    def test_filter_by_tag_is_literal_membership(self, db, make_post):
        tagged = make_post(hashtags="#mẹohay #nhàsạch")
        make_post(hashtags="#mẹohay2")

        posts, total = list_posts(db, tag="mẹohay")
        assert total == 1
        assert posts[0].id == tagged.id

    def test_drafts_hidden(self, db, make_post):
        make_post(status="draft")
        make_post()

        _, total = list_posts(db)
        assert total == 1


class TestUpdateDelete:

    def test_update_by_author(self, db, make_post):
        post = make_post(author_id="mai")
        before = post.updated_at

        updated = update_post(
            db, post.id, PostUpdate(title="Tiêu đề mới", hashtags="#moi", content="b" * 160), "mai"
        )

        assert updated.title == "Tiêu đề mới"
        assert updated.tags == ["moi"]
        assert updated.excerpt == "b" * 150 + "..."
        assert updated.updated_at >= before

    def test_update_reorders_tags(self, db, make_post):
        post = make_post(author_id="mai", hashtags="#a #b")

        update_post(db, post.id, PostUpdate(tags=["b", "a", "c"]), "mai")
        db.expire_all()

        assert get_post(db, post.id).tags == ["b", "a", "c"]
        assert db.query(PostTag).filter(PostTag.post_id == post.id).count() == 3

    def test_tag_rows_unique_per_post(self, db, make_post):
        post = make_post(author_id="mai", hashtags="#a")

        db.add(PostTag(post_id=post.id, tag="a", position=1))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_update_by_non_author_forbidden(self, db, make_post):
        post = make_post(author_id="mai")

        with pytest.raises(ForbiddenError):
            update_post(db, post.id, PostUpdate(title="Hack"), "lan")

        db.expire_all()
        assert get_post(db, post.id).title == "Canh chua cá lóc"

    def test_update_missing_post(self, db):
        with pytest.raises(NotFoundError):
            update_post(db, "nope", PostUpdate(title="x"), "mai")

    def test_update_blank_title_rejected(self, db, make_post):
        post = make_post(author_id="mai")
        with pytest.raises(ValidationError):
            update_post(db, post.id, PostUpdate(title=" "), "mai")

    def test_delete_by_non_author_forbidden(self, db, make_post):
        post = make_post(author_id="mai")

        with pytest.raises(ForbiddenError):
            delete_post(db, post.id, "lan")

        assert get_post(db, post.id) is not None

    def test_delete_cascades_children(self, db, make_post):
        post = make_post(author_id="mai", hashtags="#a #b")
        create_comment(db, post.id, "Ngon quá!", "lan")
        create_comment(db, post.id, "Cảm ơn chị", "mai")
        toggle_reaction(db, post.id, "lan")

        delete_post(db, post.id, "mai")

        assert get_post(db, post.id) is None
        assert db.query(Comment).filter(Comment.post_id == post.id).count() == 0
        assert db.query(Reaction).filter(Reaction.post_id == post.id).count() == 0
        assert db.query(PostTag).filter(PostTag.post_id == post.id).count() == 0
        # Authors are referenced, not owned
        assert db.query(User).filter(User.id == "lan").count() == 1


class TestViewsAndRelated:

    def test_increment_views(self, db, make_post):
        post = make_post()

        assert increment_views(db, post.id) is True
        assert increment_views(db, post.id) is True

        db.expire_all()
        assert get_post(db, post.id).views == 2

    def test_increment_views_swallows_errors(self, db, make_post, monkeypatch):
        from sqlalchemy.exc import OperationalError

        post = make_post()

        def broken_commit():
            raise OperationalError("UPDATE posts", {}, Exception("database is locked"))

        monkeypatch.setattr(db, "commit", broken_commit)
        assert increment_views(db, post.id) is False

    def test_related_posts_same_category(self, db, make_post):
        post = make_post(category="beauty")
        for i in range(4):
            make_post(category="beauty", title=f"Làm đẹp {i}")
        make_post(category="tips")

        related = get_related_posts(db, post)

        assert len(related) == 3
        assert all(r.category == "beauty" for r in related)
        assert post.id not in [r.id for r in related]
