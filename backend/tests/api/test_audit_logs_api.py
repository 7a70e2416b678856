"""
API Tests for /api/v1/audit-logs
"""
import pytest
from datetime import datetime, timedelta
from httpx import AsyncClient

from app.models.audit_log import AuditLog


class TestAuditLogViewer:
    """Newest first, 20 per page, optional filters"""

    @pytest.mark.asyncio
    async def test_newest_first_with_causer(self, client: AsyncClient, system_headers, admin_headers, admin_user):
        await client.post('/api/v1/domains', json={'name': 'first.com', 'privilege': 'x'}, headers=admin_headers)
        await client.post('/api/v1/storages', json={
            'size': 10, 'price_admin_annual': 1, 'price_admin_monthly': 1,
            'price_member_annual': 1, 'price_member_monthly': 1,
        }, headers=admin_headers)

        response = await client.get('/api/v1/audit-logs', headers=system_headers)

        assert response.status_code == 200
        entries = response.json()['logs']['data']
        assert len(entries) == 2
        assert {e['subject_type'] for e in entries} == {'Domain', 'Storage'}
        assert all(e['causer_name'] == admin_user.name for e in entries)

    @pytest.mark.asyncio
    async def test_twenty_per_page(self, client: AsyncClient, system_headers, db_session):
        base = datetime(2024, 1, 1)
        for i in range(25):
            db_session.add(AuditLog(
                description='created', subject_type='Domain', subject_id=str(i),
                properties={}, created_at=base + timedelta(minutes=i),
            ))
        await db_session.commit()

        response = await client.get('/api/v1/audit-logs', params={'per_page': '100'}, headers=system_headers)

        page = response.json()['logs']
        assert page['per_page'] == 20
        assert len(page['data']) == 20
        assert page['last_page'] == 2
        assert page['data'][0]['subject_id'] == '24'
        assert page['data'][0]['causer_name'] == 'system'

    @pytest.mark.asyncio
    async def test_filters(self, client: AsyncClient, system_headers, db_session):
        db_session.add(AuditLog(description='created', subject_type='Domain', subject_id='1', properties={}))
        db_session.add(AuditLog(description='deleted', subject_type='Storage', subject_id='2', properties={}))
        db_session.add(AuditLog(description='backup_run', subject_type='Backup', subject_id='3', properties={}))
        await db_session.commit()

        by_type = await client.get('/api/v1/audit-logs', params={'subject_type': 'Storage'}, headers=system_headers)
        by_search = await client.get('/api/v1/audit-logs', params={'search': 'backup'}, headers=system_headers)

        assert [e['subject_id'] for e in by_type.json()['logs']['data']] == ['2']
        assert by_type.json()['filters']['subject_type'] == 'Storage'
        assert [e['subject_id'] for e in by_search.json()['logs']['data']] == ['3']

    @pytest.mark.asyncio
    async def test_admin_forbidden(self, client: AsyncClient, admin_headers):
        response = await client.get('/api/v1/audit-logs', headers=admin_headers)
        assert response.status_code == 403
