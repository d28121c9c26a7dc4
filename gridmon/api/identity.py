"""
Caller identity. The caller's `UserContext` is produced by a dependency and
passed explicitly to every handler that needs it.

Three sources, in order:

- `mock_admin` in the settings (development only), which makes every caller
  an administrator called `admin`;
- the user name header set by the authenticating reverse proxy
  (`remote_user_header`, `X-Remote-User` by default);
- on top of either, the `X-Impersonate-User` header, which lets an
  administrator see the service as a regular user would.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from gridmon.core.user import UserContext, UserRole, username_base

from .dependencies import LoggerDependency, SettingsDependency

IMPERSONATE_HEADER = "X-Impersonate-User"


async def handle_user_context(
    request: Request, settings: SettingsDependency, log: LoggerDependency
) -> UserContext:
    """
    Resolve the caller. Raises a 401 if nobody is logged in and a 403 for
    invalid impersonation attempts.
    """
    log = log.bind(client=request.client)

    if settings.mock_admin:
        user = UserContext(username="admin", role=UserRole.ADMIN)
    else:
        username = (request.headers.get(settings.remote_user_header) or "").strip()

        if not username:
            await log.adebug("identity.no_user")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
            )

        admins = set(settings.admin_users)
        if username in admins or username_base(username) in admins:
            role = UserRole.ADMIN
        else:
            role = UserRole.USER

        user = UserContext(username=username, role=role)

    log = log.bind(username=user.username, role=user.role.value)

    impersonate = request.headers.get(IMPERSONATE_HEADER)
    if impersonate is None:
        await log.adebug("identity.resolved")
        return user

    if not user.is_admin:
        await log.awarn("identity.impersonate.access_denied")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can impersonate users",
        )

    impersonate = impersonate.strip()
    if not impersonate:
        await log.awarn("identity.impersonate.invalid")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid impersonation username",
        )

    # Impersonated users are never admins, so the admin sees what they see.
    await log.ainfo("identity.impersonate", impersonated=impersonate)
    return UserContext(username=impersonate, role=UserRole.USER)


UserContextDependency = Annotated[UserContext, Depends(handle_user_context)]
