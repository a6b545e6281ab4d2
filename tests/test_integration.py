"""Integration tests for the blog API."""

import pytest

from tests.conftest import bearer, make_category, make_post


def _register_and_login(client, username, email, password='password123'):
    resp = client.post('/api/auth/register', json={'username': username, 'email': email, 'password': password})
    assert resp.status_code == 201
    resp = client.post('/api/auth/login', json={'email': email, 'password': password})
    assert resp.status_code == 200
    return bearer(resp.get_json()['token'])


class TestBloggingFlow:
    """A complete author/reader session over HTTP."""

    def test_publish_filter_forbid_delete(self, client):
        u1 = _register_and_login(client, 'writer', 'writer@example.com')
        u2 = _register_and_login(client, 'visitor', 'visitor@example.com')

        tech = client.post('/api/categories', json={'name': 'Tech'}, headers=u1).get_json()

        created = client.post('/api/posts', json={
            'title': 'Intro to Flask',
            'content': 'Blueprints and app factories',
            'category': tech['id'],
            'status': 'published',
        }, headers=u1)
        assert created.status_code == 201
        post_id = created.get_json()['id']

        listing = client.get('/api/posts', query_string={'category': tech['id']}).get_json()
        assert [p['id'] for p in listing['posts']] == [post_id]

        forbidden = client.put(f'/api/posts/{post_id}', json={'title': 'Mine'}, headers=u2)
        assert forbidden.status_code == 403

        comment = client.post(f'/api/posts/{post_id}/comments', json={'content': 'Great read'}, headers=u2)
        assert comment.status_code == 201

        deleted = client.delete(f'/api/posts/{post_id}', headers=u1)
        assert deleted.status_code == 200

        listing = client.get('/api/posts', query_string={'category': tech['id']}).get_json()
        assert listing['posts'] == []
        assert listing['totalPosts'] == 0
        assert listing['totalPages'] == 0

    def test_draft_then_publish(self, client, category):
        u1 = _register_and_login(client, 'writer', 'writer@example.com')

        draft = client.post('/api/posts', json={
            'title': 'Work in progress',
            'content': 'Soon',
            'category': category.hex_id,
        }, headers=u1).get_json()
        assert draft['status'] == 'draft'
        assert client.get('/api/posts').get_json()['totalPosts'] == 0

        client.put(f"/api/posts/{draft['id']}", json={'status': 'published'}, headers=u1)
        body = client.get('/api/posts').get_json()
        assert [p['title'] for p in body['posts']] == ['Work in progress']


class TestPaginationProperties:
    """Page walks cover every matching post exactly once."""

    @pytest.fixture
    def many_posts(self, app, author, other_user):
        tech = make_category(app, 'Technology')
        food = make_category(app, 'Food')
        ids = {'tech': [], 'food': []}
        for i in range(13):
            cat, key = (tech, 'tech') if i % 3 else (food, 'food')
            user = author if i % 2 else other_user
            post = make_post(app, user, cat, title=f'Post number {i}', content='python' if i % 4 == 0 else 'other')
            ids[key].append(post.hex_id)
        make_post(app, author, tech, title='Hidden draft', status='draft')
        return {'tech': tech, 'food': food, 'ids': ids}

    @pytest.mark.parametrize('limit', [1, 4, 5, 13, 20])
    def test_walk_all_pages(self, client, many_posts, limit):
        first = client.get('/api/posts', query_string={'limit': limit}).get_json()
        total_pages = first['totalPages']
        assert first['totalPosts'] == 13
        assert total_pages == -(-13 // limit)

        seen = []
        for page in range(1, total_pages + 1):
            body = client.get('/api/posts', query_string={'limit': limit, 'page': page}).get_json()
            assert len(body['posts']) <= limit
            assert body['currentPage'] == page
            seen.extend(p['id'] for p in body['posts'])

        assert len(seen) == len(set(seen)) == 13
        assert set(seen) == set(many_posts['ids']['tech'] + many_posts['ids']['food'])

        past_end = client.get('/api/posts', query_string={'limit': limit, 'page': total_pages + 1}).get_json()
        assert past_end['posts'] == []

    @pytest.mark.parametrize('page', [10**19, 2**63, 10**40])
    def test_page_far_beyond_the_end(self, client, many_posts, page):
        resp = client.get('/api/posts', query_string={'page': page, 'limit': 100})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body['posts'] == []
        assert body['totalPosts'] == 13
        assert body['totalPages'] == 1
        assert body['currentPage'] == page

    def test_category_totals(self, client, many_posts):
        for key in ('tech', 'food'):
            body = client.get('/api/posts', query_string={'category': many_posts[key].hex_id}).get_json()
            assert body['totalPosts'] == len(many_posts['ids'][key])
            assert all(p['category']['id'] == many_posts[key].hex_id for p in body['posts'])

    def test_search_and_category_combine(self, client, many_posts):
        body = client.get('/api/posts', query_string={'search': 'PYTHON', 'category': many_posts['food'].hex_id,
                                                      'limit': 50}).get_json()
        # i in 0..12 with i % 4 == 0 and i % 3 == 0
        assert sorted(p['title'] for p in body['posts']) == ['Post number 0', 'Post number 12']

    def test_listing_is_newest_first(self, client, many_posts):
        body = client.get('/api/posts', query_string={'limit': 50}).get_json()
        stamps = [p['createdAt'] for p in body['posts']]
        assert stamps == sorted(stamps, reverse=True)
        assert body['posts'][0]['title'] == 'Post number 12'
