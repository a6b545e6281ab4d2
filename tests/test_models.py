"""Tests for database models."""

import pytest
from sqlalchemy.exc import IntegrityError

from blogapp.extensions import db
from blogapp.models import User, Category, Post, Comment, generate_hex_id, is_hex_id
from blogapp.utils.crypto import hash_password


class TestUser:
    """Test cases for User model."""

    def test_user_creation(self, app):
        with app.app_context():
            user = User(
                username='newuser',
                email='newuser@example.com',
                password_hash=hash_password('password123'),
            )
            db.session.add(user)
            db.session.commit()

            assert user.id is not None
            assert is_hex_id(user.hex_id)
            assert user.created_at is not None
            assert user.get_id() == user.hex_id

    def test_user_unique_constraints(self, app):
        """Username and email must be unique."""
        with app.app_context():
            db.session.add(User(username='dup', email='dup@example.com', password_hash='x'))
            db.session.commit()

            db.session.add(User(username='dup', email='other@example.com', password_hash='x'))
            with pytest.raises(IntegrityError):
                db.session.commit()
            db.session.rollback()

            db.session.add(User(username='other', email='dup@example.com', password_hash='x'))
            with pytest.raises(IntegrityError):
                db.session.commit()


class TestCategory:

    def test_category_name_unique(self, app, category):
        with app.app_context():
            db.session.add(Category(name='Tech'))
            with pytest.raises(IntegrityError):
                db.session.commit()


class TestPost:
    """Test cases for Post model."""

    def test_post_defaults(self, app, author, category):
        with app.app_context():
            post = Post(title='T', content='C', author_id=author.id, category_id=category.id)
            db.session.add(post)
            db.session.commit()

            assert post.status == 'draft'
            assert post.featured_image == ''
            assert post.created_at is not None
            assert post.updated_at is not None
            assert post.comment_count == 0

    def test_post_requires_category(self, app, author):
        with app.app_context():
            db.session.add(Post(title='T', content='C', author_id=author.id))
            with pytest.raises(IntegrityError):
                db.session.commit()

    def test_post_requires_author(self, app, category):
        with app.app_context():
            db.session.add(Post(title='T', content='C', category_id=category.id))
            with pytest.raises(IntegrityError):
                db.session.commit()

    def test_comments_keep_insertion_order(self, app, published_post, author, other_user):
        with app.app_context():
            post = db.session.get(Post, published_post.id)
            for i, uid in enumerate([author.id, other_user.id, author.id]):
                post.comments.append(Comment(author_id=uid, content=f'comment {i}'))
            db.session.commit()

            db.session.expire_all()
            post = db.session.get(Post, published_post.id)
            assert [c.content for c in post.comments] == ['comment 0', 'comment 1', 'comment 2']
            assert post.comment_count == 3

    def test_deleting_post_removes_its_comments(self, app, published_post, other_user):
        with app.app_context():
            post = db.session.get(Post, published_post.id)
            post.comments.append(Comment(author_id=other_user.id, content='bye'))
            db.session.commit()
            assert db.session.execute(db.select(db.func.count(Comment.id))).scalar() == 1

            db.session.delete(post)
            db.session.commit()
            assert db.session.execute(db.select(db.func.count(Comment.id))).scalar() == 0


class TestHexIds:

    def test_generate_hex_id(self):
        value = generate_hex_id()
        assert len(value) == 32
        assert is_hex_id(value)
        assert generate_hex_id() != value

    @pytest.mark.parametrize('value', ['', 'abc', 'G' * 32, 'A' * 32, None, 12345])
    def test_is_hex_id_rejects_malformed(self, value):
        assert is_hex_id(value) is False
