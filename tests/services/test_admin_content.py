# tests/services/test_admin_content.py
"""Category management, post flags and the dashboard overview."""

from __future__ import annotations

import pytest

from campus_forum.core.errors import AlreadyExistsError, ForbiddenError, NotFoundError, ValidationError
from campus_forum.db.time import utcnow
from campus_forum.models import AdminLog, Category, ReviewStatus
from campus_forum.services import admin_content, comments, posts, resources, stats
from campus_forum.services.admin_content import (
    AdminCommentQuery,
    AdminPostQuery,
    AdminResourceQuery,
    ResourceStatusFilter,
)
from campus_forum.services.stats import StatsPeriod
from tests.conftest import make_category, make_comment, make_post, make_user, viewer_of


def test_create_category_rejects_duplicates(db_session, admin_user, category) -> None:
    admin = viewer_of(admin_user)

    created = admin_content.create_category(db_session, admin, name="  Sports ", sort_order=3)
    assert created.name == "Sports"
    assert created.post_count == 0

    with pytest.raises(AlreadyExistsError):
        admin_content.create_category(db_session, admin, name="General")
    with pytest.raises(ValidationError):
        admin_content.create_category(db_session, admin, name="   ")
    with pytest.raises(AlreadyExistsError):
        admin_content.update_category(db_session, admin, created.id, name="General")


def test_update_category_leaves_post_count_alone(db_session, admin_user, category, test_post) -> None:
    updated = admin_content.update_category(
        db_session, viewer_of(admin_user), category.id, description="Anything goes", is_anonymous=True
    )
    assert updated.is_anonymous is True
    assert updated.post_count == 1


def test_delete_category_requires_no_posts(db_session, admin_user, category, test_post) -> None:
    admin = viewer_of(admin_user)
    with pytest.raises(ValidationError):
        admin_content.delete_category(db_session, admin, category.id)

    # A soft-deleted post no longer counts but still references the category.
    admin_content.delete_post(db_session, admin, test_post.id)
    with pytest.raises(ValidationError):
        admin_content.delete_category(db_session, admin, category.id)

    admin_content.hard_delete_post(db_session, admin, test_post.id)
    admin_content.delete_category(db_session, admin, category.id)
    assert db_session.get(Category, category.id) is None

    with pytest.raises(NotFoundError):
        admin_content.delete_category(db_session, admin, category.id)


def test_reorder_categories(db_session, admin_user) -> None:
    first = make_category(db_session, "First")
    second = make_category(db_session, "Second")
    third = make_category(db_session, "Third")
    admin = viewer_of(admin_user)

    ordered = admin_content.reorder_categories(db_session, admin, [third.id, first.id, second.id])
    assert [c.id for c in ordered] == [third.id, first.id, second.id]

    with pytest.raises(ValidationError):
        admin_content.reorder_categories(db_session, admin, [first.id, first.id])
    with pytest.raises(NotFoundError):
        admin_content.reorder_categories(db_session, admin, [first.id, 5555])


def test_pin_and_lock_flags(db_session, admin_user, other_user, test_post) -> None:
    admin = viewer_of(admin_user)

    assert admin_content.pin_post(db_session, admin, test_post.id).is_pinned is True
    with pytest.raises(ValidationError):
        admin_content.pin_post(db_session, admin, test_post.id)
    assert admin_content.unpin_post(db_session, admin, test_post.id).is_pinned is False

    admin_content.lock_post(db_session, admin, test_post.id)
    with pytest.raises(ForbiddenError):
        comments.create_comment(db_session, viewer_of(other_user), test_post.id, content="Too late")

    admin_content.unlock_post(db_session, admin, test_post.id)
    comments.create_comment(db_session, viewer_of(other_user), test_post.id, content="Back again")

    actions = [row.action for row in db_session.query(AdminLog).order_by(AdminLog.id)]
    assert actions == ["pin_post", "unpin_post", "lock_post", "unlock_post"]


def test_pinned_posts_list_first(db_session, admin_user, test_user, category, test_post) -> None:
    newer = make_post(db_session, test_user, category, title="Newer")
    admin_content.pin_post(db_session, viewer_of(admin_user), test_post.id)

    page = posts.list_posts(db_session, None, category_id=category.id)
    assert [view.post.id for view in page.items] == [test_post.id, newer.id]


def test_admin_listings_include_deleted_rows(db_session, admin_user, test_user, other_user, category, test_post) -> None:
    admin = viewer_of(admin_user)
    comment = make_comment(db_session, other_user, test_post)
    admin_content.delete_comment(db_session, admin, comment.id)
    admin_content.delete_post(db_session, admin, test_post.id)

    deleted_posts = admin_content.list_posts(db_session, admin, AdminPostQuery(is_deleted=True))
    assert [post.id for post in deleted_posts.items] == [test_post.id]
    assert admin_content.list_posts(db_session, admin, AdminPostQuery(is_deleted=False)).total == 0

    deleted_comments = admin_content.list_comments(db_session, admin, AdminCommentQuery(post_id=test_post.id))
    assert [c.id for c in deleted_comments.items] == [comment.id]


def test_resource_delete_and_restore(db_session, admin_user, test_user) -> None:
    resource = resources.create_resource(
        db_session, viewer_of(test_user), title="Exam", file_url="/uploads/exam.pdf", file_name="exam.pdf"
    )
    admin = viewer_of(admin_user)
    admin_content.delete_resource(db_session, admin, resource.id)
    with pytest.raises(ValidationError):
        admin_content.delete_resource(db_session, admin, resource.id)
    assert admin_content.restore_resource(db_session, admin, resource.id).is_deleted is False


def test_overview_counts(db_session, admin_user, super_admin, test_user, other_user, test_post, test_comment) -> None:
    other_user.is_active = False
    test_user.last_login_at = utcnow()
    make_user(db_session, "newbie", review_status=ReviewStatus.PENDING)
    db_session.commit()

    seen_by_admin = stats.overview(db_session, viewer_of(admin_user))
    seen_by_root = stats.overview(db_session, viewer_of(super_admin))

    assert seen_by_root.total_users == seen_by_admin.total_users + 1
    assert seen_by_admin.banned_users == 1
    assert seen_by_admin.active_users == 1
    assert seen_by_admin.pending_reviews == 1
    assert seen_by_admin.total_posts == 1
    assert seen_by_admin.today_posts == 1
    assert seen_by_admin.total_comments == 1
    assert seen_by_admin.total_categories == 1
    assert seen_by_admin.total_resources == 0


def test_user_trend_hides_super_admins_from_admins(db_session, admin_user, super_admin, test_user) -> None:
    seen_by_admin = stats.user_trend(db_session, viewer_of(admin_user), StatsPeriod.MONTH)
    seen_by_root = stats.user_trend(db_session, viewer_of(super_admin), StatsPeriod.ALL)

    assert seen_by_admin.period is StatsPeriod.MONTH
    assert seen_by_admin.total == 2
    assert seen_by_root.total == 3
    assert sum(day.count for day in seen_by_admin.trends) == seen_by_admin.total
    assert [day.date for day in seen_by_root.trends] == [utcnow().date().isoformat()]


def test_post_trend_and_category_breakdown_count_live_posts(db_session, admin_user, test_user, category) -> None:
    make_category(db_session, "Quiet")
    make_post(db_session, test_user, category, "kept")
    removed = make_post(db_session, test_user, category, "removed")
    admin_content.delete_post(db_session, viewer_of(admin_user), removed.id)

    trend = stats.post_trend(db_session, StatsPeriod.WEEK)
    assert trend.total == 1

    breakdown = {figure.name: figure.post_count for figure in stats.category_breakdown(db_session)}
    assert breakdown == {"General": 1, "Quiet": 0}


def test_admin_resource_listing_filters(db_session, admin_user, super_admin, test_user, other_user) -> None:
    admin = viewer_of(admin_user)

    def share(owner, title, *, is_public=True):
        return resources.create_resource(
            db_session, viewer_of(owner), title=title, file_url=f"/uploads/{title}.pdf",
            file_name=f"{title}.pdf", is_public=is_public,
        )

    notes = share(test_user, "Calculus notes")
    private = share(test_user, "Diary", is_public=False)
    gone = share(other_user, "Old syllabus")
    share(super_admin, "Staff handbook")
    admin_content.delete_resource(db_session, admin, gone.id)

    everything = admin_content.list_resources(db_session, admin, AdminResourceQuery())
    assert everything.total == 4

    active = admin_content.list_resources(db_session, admin, AdminResourceQuery(status=ResourceStatusFilter.ACTIVE))
    assert gone.id not in {r.id for r in active.items}
    assert private.id in {r.id for r in active.items}

    deleted = admin_content.list_resources(db_session, admin, AdminResourceQuery(status=ResourceStatusFilter.DELETED))
    assert [r.id for r in deleted.items] == [gone.id]

    by_keyword = admin_content.list_resources(db_session, admin, AdminResourceQuery(keyword="calculus"))
    assert [r.id for r in by_keyword.items] == [notes.id]

    by_owner = admin_content.list_resources(db_session, admin, AdminResourceQuery(owner_id=test_user.id))
    assert by_owner.total == 2

    hidden_owner = admin_content.list_resources(db_session, admin, AdminResourceQuery(owner_id=super_admin.id))
    assert hidden_owner.total == 0
    root_view = admin_content.list_resources(
        db_session, viewer_of(super_admin), AdminResourceQuery(owner_id=super_admin.id)
    )
    assert root_view.total == 1
