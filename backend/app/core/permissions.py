"""Page access gate.

Access Matrix:
┌────────────┬────────────┬─────────────────────┬─────────────────┐
│ Page       │ Owner      │ Employee view       │ Employee edit   │
├────────────┼────────────┼─────────────────────┼─────────────────┤
│ dashboard  │ view, edit │ dashboard_access    │                 │
│ pos        │ view, edit │ pos_access          │ pos_access      │
│ inventory  │ view, edit │ inventory_access    │                 │
│ sales      │ view, edit │ pos_access          │                 │
│ analytics  │ view, edit │                     │                 │
│ staff      │ view, edit │                     │                 │
│ settings   │ view, edit │                     │                 │
└────────────┴────────────┴─────────────────────┴─────────────────┘

An owner whose business row does not exist yet sees nothing.
"""

import enum
from collections.abc import Mapping
from typing import NamedTuple

from app.core.identity import EmployeeIdentity, Identity, OwnerIdentity
from app.models.employee import PermissionFlag


class Page(str, enum.Enum):
    # Declaration order is the navigation order
    DASHBOARD = "dashboard"
    POS = "pos"
    INVENTORY = "inventory"
    SALES = "sales"
    ANALYTICS = "analytics"
    STAFF = "staff"
    SETTINGS = "settings"


class Action(str, enum.Enum):
    VIEW = "view"
    EDIT = "edit"


class Role(str, enum.Enum):
    OWNER = "owner"
    EMPLOYEE = "employee"


class AccessRule(NamedTuple):
    owner: bool
    # None: employees never get this access
    employee_flag: PermissionFlag | None


_OWNER_ONLY = AccessRule(owner=True, employee_flag=None)

ACCESS_TABLE: dict[tuple[Page, Action], AccessRule] = {
    (Page.DASHBOARD, Action.VIEW): AccessRule(True, PermissionFlag.DASHBOARD_ACCESS),
    (Page.DASHBOARD, Action.EDIT): _OWNER_ONLY,
    (Page.POS, Action.VIEW): AccessRule(True, PermissionFlag.POS_ACCESS),
    (Page.POS, Action.EDIT): AccessRule(True, PermissionFlag.POS_ACCESS),
    (Page.INVENTORY, Action.VIEW): AccessRule(True, PermissionFlag.INVENTORY_ACCESS),
    (Page.INVENTORY, Action.EDIT): _OWNER_ONLY,
    (Page.SALES, Action.VIEW): AccessRule(True, PermissionFlag.POS_ACCESS),
    (Page.SALES, Action.EDIT): _OWNER_ONLY,
    (Page.ANALYTICS, Action.VIEW): _OWNER_ONLY,
    (Page.ANALYTICS, Action.EDIT): _OWNER_ONLY,
    (Page.STAFF, Action.VIEW): _OWNER_ONLY,
    (Page.STAFF, Action.EDIT): _OWNER_ONLY,
    (Page.SETTINGS, Action.VIEW): _OWNER_ONLY,
    (Page.SETTINGS, Action.EDIT): _OWNER_ONLY,
}


def check_access(
    role: Role,
    flags: Mapping[str, bool] | None,
    page: Page,
    action: Action = Action.VIEW,
) -> bool:
    """Table lookup for a (role, employee flags, page, action) combination."""
    rule = ACCESS_TABLE[(page, action)]
    if role is Role.OWNER:
        return rule.owner
    if rule.employee_flag is None:
        return False
    return bool((flags or {}).get(rule.employee_flag.value, False))


def is_allowed(identity: Identity, page: Page, action: Action = Action.VIEW) -> bool:
    if isinstance(identity, OwnerIdentity):
        if identity.business is None:
            return False
        return check_access(Role.OWNER, None, page, action)
    if isinstance(identity, EmployeeIdentity):
        return check_access(Role.EMPLOYEE, identity.employee.permissions, page, action)
    return False


def visible_pages(identity: Identity) -> list[Page]:
    return [page for page in Page if is_allowed(identity, page)]
