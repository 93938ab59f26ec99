# staffing_api/common/auth.py
from __future__ import annotations

from functools import wraps
from typing import Iterable, Set

from flask_jwt_extended import jwt_required, get_jwt, get_jwt_identity

from staffing_api.common.http import fail


# ---------- helpers ----------

def _wildcard_match(user_perm: str, required: str) -> bool:
    """
    Match required permission against a user's permission with simple wildcards.
    Examples:
      user_perm: 'employee_*'      matches required: 'employee_create'
      user_perm: 'employee_view'   matches only exact
      user_perm: '*'               matches anything
    """
    if user_perm == required or user_perm == "*":
        return True
    if user_perm.endswith("*"):
        prefix = user_perm[:-1]
        return required.startswith(prefix)
    return False


def _has_any_perm(user_perms: Set[str], required_perms: Iterable[str]) -> bool:
    if not required_perms:
        return True
    if not user_perms:
        return False
    for req in required_perms:
        # exact or wildcard on user's side
        if any(_wildcard_match(up, req) for up in user_perms):
            return True
    return False


def current_actor():
    """JWT identity of the caller, used for created_by / updated_by."""
    return get_jwt_identity()


# ---------- decorators ----------

def requires_perms(*perm_codes: str):
    """
    Require that the current user has ANY of the given permission codes.

    Permissions are read from the 'perms' claim issued at login; the
    'admin' role in the 'roles' claim always passes.
    """
    def outer(fn):
        @wraps(fn)
        @jwt_required()
        def inner(*args, **kwargs):
            if not perm_codes:
                return fn(*args, **kwargs)

            claims = get_jwt() or {}
            roles = set(claims.get("roles") or [])
            if "admin" in roles:
                return fn(*args, **kwargs)

            if get_jwt_identity() is None:
                return fail("Unauthorized", status=401)

            perms = set(claims.get("perms") or [])
            if not _has_any_perm(perms, perm_codes):
                return fail("Forbidden", status=403)

            return fn(*args, **kwargs)
        return inner
    return outer
