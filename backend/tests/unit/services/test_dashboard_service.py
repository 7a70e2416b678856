"""
Unit Tests for dashboard resolution and summaries
"""
import pytest

from app.core.exceptions import AuthorizationError
from app.models.domain import Domain
from app.models.storage import StoragePlan
from app.services.audit_service import record_activity
from app.services.dashboard_service import (
    DashboardView,
    admin_summary,
    effective_capabilities,
    reseller_summary,
    resolve_dashboard,
    system_summary,
)


class TestResolveDashboard:
    """Priority is system, then admin, then reseller"""

    @pytest.mark.parametrize('capabilities,expected', [
        ({'dashboard-system-view'}, DashboardView.SYSTEM),
        ({'dashboard-admin-view'}, DashboardView.ADMIN),
        ({'dashboard-reseller-view'}, DashboardView.RESELLER),
        ({'dashboard-admin-view', 'dashboard-system-view'}, DashboardView.SYSTEM),
        ({'dashboard-reseller-view', 'dashboard-admin-view'}, DashboardView.ADMIN),
        ({'dashboard-reseller-view', 'domains-view', 'dashboard-system-view'}, DashboardView.SYSTEM),
    ])
    def test_priority(self, capabilities, expected):
        assert resolve_dashboard(capabilities) == expected

    @pytest.mark.parametrize('capabilities', [set(), {'domains-view', 'storages-view'}])
    def test_no_dashboard_capability_is_forbidden(self, capabilities):
        with pytest.raises(AuthorizationError) as exc_info:
            resolve_dashboard(capabilities)
        assert exc_info.value.message == 'Forbidden'

    @pytest.mark.asyncio
    async def test_superuser_gets_system(self, make_user):
        user = await make_user(is_superuser=True)
        assert resolve_dashboard(effective_capabilities(user)) == DashboardView.SYSTEM

    @pytest.mark.asyncio
    async def test_member_has_no_dashboard(self, make_user):
        user = await make_user('member')
        with pytest.raises(AuthorizationError):
            resolve_dashboard(effective_capabilities(user))


class TestSummaries:
    """Per-role summary figures"""

    @pytest.mark.asyncio
    async def test_system_summary_without_activity(self, db_session, roles):
        summary = await system_summary(db_session)

        assert summary.total_roles == 4
        assert summary.total_permissions > 0
        assert summary.system_health == 'Online'
        assert summary.recent_activity is None

    @pytest.mark.asyncio
    async def test_system_summary_latest_activity(self, db_session, admin_user):
        record_activity(db_session, admin_user, 'created', 'Domain', 'abc', {'attributes': {'name': 'x'}})
        await db_session.commit()

        summary = await system_summary(db_session)

        activity = summary.recent_activity
        assert activity.action == 'created'
        assert activity.user == admin_user.name
        assert activity.subject_type == 'Domain'
        assert activity.status == 'success'
        assert summary.total_users == 1

    @pytest.mark.asyncio
    async def test_system_activity_without_causer(self, db_session, roles):
        record_activity(db_session, None, 'backup_run', 'Backup')
        await db_session.commit()

        summary = await system_summary(db_session)

        assert summary.recent_activity.user == 'system'

    @pytest.mark.asyncio
    async def test_admin_summary_counts(self, db_session, make_user):
        await make_user('member')
        await make_user('member')
        await make_user('admin')
        db_session.add(Domain(name='a.com', privilege='x'))
        db_session.add(StoragePlan(size=10, price_admin_annual=1, price_admin_monthly=1,
                                   price_member_annual=1, price_member_monthly=1))
        await db_session.commit()

        summary = await admin_summary(db_session)

        assert summary.total_domains == 1
        assert summary.total_storages == 1
        assert summary.total_customers == 2
        assert summary.pending_orders == 0

    @pytest.mark.asyncio
    async def test_reseller_summary_is_zero(self, db_session):
        summary = await reseller_summary(db_session)
        assert summary.model_dump() == {
            'my_customers': 0,
            'revenue_this_month': 0,
            'active_subscriptions': 0,
            'commission_earned': 0,
        }
