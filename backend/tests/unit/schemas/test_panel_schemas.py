"""
Unit Tests for request/response schemas
Tests for: field error messages, page serialization
"""
import pytest
from datetime import datetime
from pydantic import ValidationError

from app.schemas.common import describe_error, field_errors
from app.schemas.domain import DomainCreate, DomainResponse
from app.schemas.storage import StoragePlanCreate
from app.utils.pagination import Page, build_page


class TestFieldMessages:
    """Pydantic errors become one sentence per field"""

    def test_domain_required_and_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            DomainCreate(name='   ', privilege='x' * 256)

        assert field_errors(exc_info.value) == {
            'name': ['The name field is required.'],
            'privilege': ['The privilege field must not be greater than 255 characters.'],
        }

    def test_domain_strips_whitespace(self):
        domain = DomainCreate(name='  example.com ', privilege=' restricted')
        assert domain.name == 'example.com'
        assert domain.privilege == 'restricted'

    def test_storage_labels_use_spaces(self):
        with pytest.raises(ValidationError) as exc_info:
            StoragePlanCreate(size=10, price_admin_annual=1, price_admin_monthly=1,
                              price_member_annual=1, price_member_monthly=-1)

        assert field_errors(exc_info.value) == {
            'price_member_monthly': ['The price member monthly field must be at least 0.'],
        }

    def test_unknown_error_type(self):
        message = describe_error('name', {'type': 'something_new'})
        assert message == 'The name field is invalid.'


class TestPageSerialization:
    """`from_` is emitted as `from`"""

    def test_alias_on_dump(self):
        now = datetime.utcnow()
        domain = {'id': 'abc', 'name': 'a.com', 'privilege': 'x', 'created_at': now}
        page = Page[DomainResponse].model_validate(build_page([domain], total=11, page=2, per_page=10))

        dumped = page.model_dump(by_alias=True)

        assert dumped['from'] == 11
        assert dumped['to'] == 11
        assert dumped['last_page'] == 2
        assert dumped['data'][0]['name'] == 'a.com'

    def test_empty_page(self):
        page = Page[DomainResponse].model_validate(build_page([], total=3, page=5, per_page=10))

        assert page.data == []
        assert page.from_ is None
        assert page.to is None
