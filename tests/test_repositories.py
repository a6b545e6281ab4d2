"""Tests for repository functions."""

from datetime import datetime, timedelta, timezone

import pytest

from blogapp.errors import DuplicateKeyError
from blogapp.repositories.user import (
    create_user,
    get_user_by_email,
    get_user_by_hex_id,
    get_user_by_username,
)
from blogapp.repositories.blog import (
    add_comment,
    create_category,
    get_category_by_hex_id,
    get_post_by_hex_id,
    get_post_detail,
    list_categories,
    search_posts,
)
from tests.conftest import make_category, make_post


class TestUserRepository:

    def test_lookups(self, app, author):
        with app.app_context():
            assert get_user_by_hex_id(author.hex_id).id == author.id
            assert get_user_by_username('author').id == author.id
            assert get_user_by_email('author@example.com').id == author.id
            assert get_user_by_hex_id('0' * 32) is None

    def test_create_user_duplicate(self, app, author):
        with app.app_context():
            with pytest.raises(DuplicateKeyError):
                create_user(username='author', email='new@example.com', password_hash='x')
            # Session is usable again after the rollback
            assert get_user_by_username('author') is not None


class TestCategoryRepository:

    def test_list_sorted_by_name(self, app):
        for name in ['Travel', 'Food', 'Business']:
            make_category(app, name)
        with app.app_context():
            assert [c.name for c in list_categories()] == ['Business', 'Food', 'Travel']

    def test_create_duplicate_name(self, app, category):
        with app.app_context():
            with pytest.raises(DuplicateKeyError):
                create_category(name='Tech', description=None)

    def test_get_by_hex_id(self, app, category):
        with app.app_context():
            assert get_category_by_hex_id(category.hex_id).name == 'Tech'


class TestSearchPosts:
    """The listing query: filters, ordering, pagination and count."""

    @pytest.fixture
    def posts(self, app, author, other_user, category):
        travel = make_category(app, 'Travel')
        base = datetime.now(timezone.utc) - timedelta(hours=1)
        rows = [
            ('Hello World', 'intro', 'published', category, author),
            ('Trip to Rome', 'hello from italy', 'published', travel, other_user),
            ('Rust tips', 'memory safety', 'published', category, other_user),
            ('100% coverage', 'testing', 'published', category, author),
            ('Unfinished', 'hello draft', 'draft', category, author),
            ('Their draft', 'nope', 'draft', category, other_user),
        ]
        created = []
        for i, (title, content, status, cat, user) in enumerate(rows):
            created.append(
                make_post(app, user, cat, title=title, content=content, status=status,
                          created_at=base + timedelta(minutes=i))
            )
        return {'travel': travel, 'posts': created}

    def test_status_filter_excludes_drafts(self, app, posts):
        with app.app_context():
            items, total = search_posts(status='published')
            assert total == 4
            assert all(p.status == 'published' for p in items)

    def test_newest_first(self, app, posts):
        with app.app_context():
            items, _ = search_posts(status='published')
            assert [p.title for p in items] == ['100% coverage', 'Rust tips', 'Trip to Rome', 'Hello World']

    def test_search_is_case_insensitive_on_title_or_content(self, app, posts):
        with app.app_context():
            items, total = search_posts(status='published', search='HELLO')
            assert total == 2
            assert {p.title for p in items} == {'Hello World', 'Trip to Rome'}

            items, _ = search_posts(status='published', search='world')
            assert [p.title for p in items] == ['Hello World']

    def test_search_treats_wildcards_literally(self, app, posts):
        with app.app_context():
            items, _ = search_posts(status='published', search='%')
            assert [p.title for p in items] == ['100% coverage']

            _, total = search_posts(status='published', search='_')
            assert total == 0

    def test_empty_search_means_no_text_filter(self, app, posts):
        with app.app_context():
            _, total = search_posts(status='published', search='')
            assert total == 4

    def test_search_matching_nothing(self, app, posts):
        with app.app_context():
            items, total = search_posts(status='published', search='zzz-not-there')
            assert items == [] and total == 0

    def test_category_filter(self, app, posts):
        with app.app_context():
            travel = get_category_by_hex_id(posts['travel'].hex_id)
            items, total = search_posts(status='published', category_id=travel.id)
            assert total == 1
            assert items[0].title == 'Trip to Rome'

    def test_author_filter(self, app, posts, author):
        with app.app_context():
            items, total = search_posts(status='draft', author_id=author.id)
            assert total == 1
            assert items[0].title == 'Unfinished'

    def test_pagination(self, app, posts):
        with app.app_context():
            first, total = search_posts(status='published', page=1, per_page=3)
            second, total2 = search_posts(status='published', page=2, per_page=3)
            assert total == total2 == 4
            assert len(first) == 3
            assert len(second) == 1
            assert {p.id for p in first}.isdisjoint({p.id for p in second})

    def test_page_past_the_end_is_empty(self, app, posts):
        with app.app_context():
            items, total = search_posts(status='published', page=9, per_page=3)
            assert items == []
            assert total == 4

    def test_offset_beyond_sql_integer_range(self, app, posts):
        with app.app_context():
            items, total = search_posts(status='published', search='hello', page=10**19, per_page=10)
            assert items == []
            assert total == 2


class TestPostRepository:

    def test_get_post_detail_loads_comments(self, app, published_post, other_user):
        with app.app_context():
            post = get_post_by_hex_id(published_post.hex_id)
            add_comment(post, author_id=other_user.id, content='Nice')
            detail = get_post_detail(published_post.hex_id)
            assert detail.comments[0].author.username == 'reader'
            assert detail.author.username == 'author'
            assert detail.category.name == 'Tech'

    def test_get_post_missing(self, app):
        with app.app_context():
            assert get_post_by_hex_id('f' * 32) is None
