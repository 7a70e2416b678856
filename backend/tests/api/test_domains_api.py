"""
API Tests for /api/v1/domains
"""
import pytest
from httpx import AsyncClient

from app.models.domain import Domain


async def create_domain(client, headers, name, privilege='full access'):
    response = await client.post('/api/v1/domains', json={'name': name, 'privilege': privilege}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()['domain']


class TestDomainAccess:
    """Capability gating"""

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get('/api/v1/domains')

        assert response.status_code == 401
        assert response.json()['success'] is False

    @pytest.mark.asyncio
    async def test_member_forbidden(self, client: AsyncClient, member_headers):
        response = await client.get('/api/v1/domains', headers=member_headers)

        assert response.status_code == 403
        assert response.json()['error'] == {'code': 'FORBIDDEN', 'message': 'Forbidden', 'details': {}}

    @pytest.mark.asyncio
    async def test_system_role_cannot_create(self, client: AsyncClient, system_headers):
        response = await client.post(
            '/api/v1/domains', json={'name': 'x.com', 'privilege': 'x'}, headers=system_headers
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_superuser_allowed(self, client: AsyncClient, make_user, auth_headers_for):
        root = await make_user(is_superuser=True)

        response = await client.get('/api/v1/domains', headers=auth_headers_for(root))

        assert response.status_code == 200


class TestDomainIndex:
    """GET /domains"""

    @pytest.mark.asyncio
    async def test_page_shape(self, client: AsyncClient, admin_headers):
        for name in ['c.com', 'a.com', 'b.com']:
            await create_domain(client, admin_headers, name)

        response = await client.get('/api/v1/domains', params={'per_page': '5'}, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        page = data['domains']
        assert [d['name'] for d in page['data']] == ['a.com', 'b.com', 'c.com']
        assert page['per_page'] == 5
        assert page['total'] == 3
        assert page['last_page'] == 1
        assert page['from'] == 1
        assert page['to'] == 3
        assert data['stats']['total'] == 3
        assert data['stats']['most_common'] == {'privilege': 'full access', 'count': 3}
        assert data['filters'] == {'search': '', 'per_page': 5, 'sort': 'name', 'order': 'asc'}
        assert 'full access' in data['privilege_options']

    @pytest.mark.asyncio
    async def test_malformed_params_fall_back(self, client: AsyncClient, admin_headers):
        response = await client.get(
            '/api/v1/domains',
            params={'per_page': '7', 'sort': 'secret', 'order': 'sideways', 'page': 'abc'},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data['filters'] == {'search': '', 'per_page': 10, 'sort': 'name', 'order': 'asc'}
        assert data['domains']['current_page'] == 1

    @pytest.mark.asyncio
    async def test_search_response(self, client: AsyncClient, admin_headers):
        await create_domain(client, admin_headers, 'shop.example.com')
        await create_domain(client, admin_headers, 'blog.test')

        response = await client.get('/api/v1/domains', params={'search': ' example '}, headers=admin_headers)

        data = response.json()
        assert [d['name'] for d in data['domains']['data']] == ['shop.example.com']
        assert data['has_search_results'] is True
        assert data['search_term'] == 'example'

    @pytest.mark.asyncio
    async def test_page_beyond_last(self, client: AsyncClient, admin_headers):
        await create_domain(client, admin_headers, 'only.com')

        response = await client.get('/api/v1/domains', params={'page': '5'}, headers=admin_headers)

        page = response.json()['domains']
        assert page['data'] == []
        assert page['total'] == 1
        assert page['from'] is None


class TestDomainMutations:
    """POST / PUT / DELETE /domains"""

    @pytest.mark.asyncio
    async def test_create_and_fetch(self, client: AsyncClient, admin_headers):
        domain = await create_domain(client, admin_headers, 'new.com', 'restricted')

        response = await client.get(f"/api/v1/domains/{domain['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()['name'] == 'new.com'
        assert response.json()['privilege'] == 'restricted'

    @pytest.mark.asyncio
    async def test_create_validation_errors(self, client: AsyncClient, admin_headers):
        response = await client.post('/api/v1/domains', json={'name': '  '}, headers=admin_headers)

        assert response.status_code == 422
        error = response.json()['error']
        assert error['code'] == 'VALIDATION_ERROR'
        assert error['details']['fields'] == {
            'name': ['The name field is required.'],
            'privilege': ['The privilege field is required.'],
        }

    @pytest.mark.asyncio
    async def test_non_object_body(self, client: AsyncClient, admin_headers):
        response = await client.post('/api/v1/domains', json=['a'], headers=admin_headers)

        assert response.status_code == 422
        assert '__root__' in response.json()['error']['details']['fields']

    @pytest.mark.asyncio
    async def test_duplicate_then_succeeds_after_rename(self, client: AsyncClient, admin_headers):
        await create_domain(client, admin_headers, 'dup.com')

        duplicate = await client.post(
            '/api/v1/domains', json={'name': 'dup.com', 'privilege': 'x'}, headers=admin_headers
        )
        assert duplicate.status_code == 422
        assert duplicate.json()['error']['details']['fields'] == {'name': ['The name has already been taken.']}

        renamed = await client.post(
            '/api/v1/domains', json={'name': 'dup2.com', 'privilege': 'x'}, headers=admin_headers
        )
        assert renamed.status_code == 201

    @pytest.mark.asyncio
    async def test_update_same_name(self, client: AsyncClient, admin_headers):
        domain = await create_domain(client, admin_headers, 'same.com', 'restricted')

        response = await client.put(
            f"/api/v1/domains/{domain['id']}",
            json={'name': 'same.com', 'privilege': 'disabled'},
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body['message'] == 'Domain updated successfully.'
        assert body['domain']['id'] == domain['id']
        assert body['domain']['privilege'] == 'disabled'
        assert body['domain']['created_at'] == domain['created_at']

    @pytest.mark.asyncio
    async def test_update_missing(self, client: AsyncClient, admin_headers):
        response = await client.put(
            '/api/v1/domains/00000000-0000-0000-0000-000000000000',
            json={'name': 'a.com', 'privilege': 'x'},
            headers=admin_headers,
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_idempotent_not_found(self, client: AsyncClient, admin_headers, db_session):
        domain = await create_domain(client, admin_headers, 'bye.com')

        first = await client.delete(f"/api/v1/domains/{domain['id']}", headers=admin_headers)
        second = await client.delete(f"/api/v1/domains/{domain['id']}", headers=admin_headers)

        assert first.status_code == 200
        assert second.status_code == 404
        assert second.json()['error']['code'] == 'DOMAIN_NOT_FOUND'
        assert await db_session.get(Domain, domain['id']) is None
