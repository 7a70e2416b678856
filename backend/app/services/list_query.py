"""
List Query Builder - normalizes untrusted list parameters.

Every parameter is checked against an allow-list before it reaches a query;
anything unexpected falls back to a fixed default instead of failing the
request:

    per_page  -> default when not one of the entity's page sizes
    sort      -> default field when not sortable (entities with a fixed
                 sort ignore it entirely)
    order     -> "asc" unless "asc"/"desc" (any case)
    search    -> trimmed, "" means no filter
    page      -> 1 when missing, non-numeric or below 1
"""
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from sqlalchemy.sql import Select
from sqlalchemy.sql.elements import ColumnElement

from app.core.config import settings


SORT_ASC = "asc"
SORT_DESC = "desc"


@dataclass(frozen=True)
class ListingConfig:
    """Allow-lists for one listable entity"""
    per_page_options: Tuple[int, ...]
    default_per_page: int
    sortable_fields: Tuple[str, ...] = ()
    default_sort: Optional[str] = None


DOMAIN_LISTING = ListingConfig(
    per_page_options=tuple(settings.DOMAIN_PER_PAGE_OPTIONS),
    default_per_page=settings.DEFAULT_PER_PAGE,
    sortable_fields=("name", "privilege", "created_at"),
    default_sort="name",
)

# Storage plans are always ordered by size; no user-facing sort
STORAGE_LISTING = ListingConfig(
    per_page_options=tuple(settings.STORAGE_PER_PAGE_OPTIONS),
    default_per_page=settings.DEFAULT_PER_PAGE,
)

ROLE_LISTING = ListingConfig(
    per_page_options=tuple(settings.DOMAIN_PER_PAGE_OPTIONS),
    default_per_page=settings.DEFAULT_PER_PAGE,
    sortable_fields=("name", "created_at"),
    default_sort="name",
)

AUDIT_LOG_LISTING = ListingConfig(
    per_page_options=(settings.AUDIT_LOG_PER_PAGE,),
    default_per_page=settings.AUDIT_LOG_PER_PAGE,
)


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class ListQuery:
    """Validated, request-scoped list state"""
    search: str = ""
    per_page: int = 10
    sort: Optional[str] = None
    order: str = SORT_ASC
    page: int = 1
    config: ListingConfig = field(default=DOMAIN_LISTING, repr=False, compare=False)

    @classmethod
    def from_params(cls, params: Mapping[str, Any], config: ListingConfig) -> "ListQuery":
        """Build a ListQuery from raw request parameters; never raises"""
        search = params.get("search")
        search = str(search).strip() if search is not None else ""

        per_page = _to_int(params.get("per_page"))
        if per_page not in config.per_page_options:
            per_page = config.default_per_page

        sort = None
        if config.sortable_fields:
            sort = params.get("sort")
            if sort not in config.sortable_fields:
                sort = config.default_sort

        order = str(params.get("order") or "").strip().lower()
        if order not in (SORT_ASC, SORT_DESC):
            order = SORT_ASC

        page = _to_int(params.get("page"))
        if page is None or page < 1:
            page = 1

        return cls(search=search, per_page=per_page, sort=sort, order=order, page=page, config=config)

    @property
    def has_search(self) -> bool:
        return bool(self.search)

    def filters(self) -> dict:
        """Effective parameters, echoed back so the UI can restore its controls"""
        filters = {"search": self.search, "per_page": self.per_page}
        if self.config.sortable_fields:
            filters["sort"] = self.sort
            filters["order"] = self.order
        return filters

    def apply_sort(self, query: Select, column: ColumnElement, *tie_breakers: ColumnElement) -> Select:
        """Order by `column` in the requested direction, then by the tie breakers ascending"""
        ordered = column.desc() if self.order == SORT_DESC else column.asc()
        return query.order_by(ordered, *tie_breakers)
