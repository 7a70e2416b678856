# Authentication module

from app.modules.auth.dependencies import (
    get_current_user,
    load_user,
)

from app.modules.auth.capabilities import (
    require_capability,
    ALL_CAPABILITIES,
    DEFAULT_ROLE_CAPABILITIES,
)

__all__ = [
    # User authentication
    "get_current_user",
    "load_user",
    # Capabilities
    "require_capability",
    "ALL_CAPABILITIES",
    "DEFAULT_ROLE_CAPABILITIES",
]
