"""
FastAPI app
"""

import asyncio
import contextlib
from importlib.metadata import version

from fastapi import FastAPI

from gridmon.config.settings import Settings
from gridmon.core.models import HealthResponse
from gridmon.service.perun import SnapshotStore, run_periodic_refresh

from .dependencies import SETTINGS, SnapshotDependency, logger
from .errors import add_exception_handlers
from .groups import group_app


def create_app(settings: Settings) -> FastAPI:
    """
    Build the application for the given settings. The Perun snapshot is
    collected once at startup and then refreshed in the background every
    `settings.perun_refresh_interval`.
    """

    async def lifespan(app: FastAPI):
        log = logger().bind(data_path=str(settings.perun_data_path))

        if settings.mock_admin and settings.production:
            raise RuntimeError("Cannot use mock_admin and be in production mode")

        app.settings = settings
        app.snapshots = SnapshotStore(data_path=settings.perun_data_path, log=log)

        await log.ainfo("app.startup.collecting")
        await app.snapshots.refresh()

        refresher = asyncio.create_task(
            run_periodic_refresh(
                store=app.snapshots,
                interval=settings.perun_refresh_interval,
                log=log,
            )
        )

        yield

        refresher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await refresher
        await log.ainfo("app.shutdown")

    app = FastAPI(
        lifespan=lifespan,
        title="Grid Monitor API",
        summary="Read-only views over the groups and users of the computing grid.",
        version=version("gridmon"),
    )

    app = add_exception_handlers(app)

    @app.get(
        "/health",
        summary="Snapshot status",
        description="When the Perun snapshot was last collected and what it holds.",
        tags=["Status"],
    )
    async def health(snapshots: SnapshotDependency) -> HealthResponse:
        snapshot = snapshots.current()
        return HealthResponse(
            timestamp=snapshot.timestamp.isoformat() if snapshot else None,
            number_of_servers=len(snapshots.server_groups()),
            number_of_users=len(snapshots.directory_users()),
        )

    app.include_router(group_app, prefix="/groups")

    return app


app = create_app(SETTINGS())
