"""FastAPI application assembly."""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from habit_planner.core.config import PROXY_PREFIX, get_log_level
from habit_planner.core.db import _init_db
from habit_planner.web.routers import (
    calendar_router,
    data_router,
    day_router,
    habits_router,
    routines_router,
)

logger = logging.getLogger("habit_planner")


def create_app() -> FastAPI:
    # 日本語: ログ出力レベルを環境変数から設定 / English: Configure root logging from the environment
    logging.basicConfig(level=get_log_level())

    # 日本語: 逆プロキシ配下運用を想定して root_path を環境変数から解決 / English: Resolve root_path from env for reverse-proxy deployments
    proxy_prefix = os.getenv("PROXY_PREFIX", PROXY_PREFIX)

    app = FastAPI(title="Habit Planner", root_path=proxy_prefix)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

    # 日本語: 機能別ルーターを順次登録 / English: Register feature routers
    app.include_router(calendar_router)
    app.include_router(data_router)
    app.include_router(day_router)
    app.include_router(habits_router)
    app.include_router(routines_router)

    @app.on_event("startup")
    def _startup_init_db() -> None:
        # 日本語: 起動時にマイグレーション適用を保証 / English: Ensure migrations are applied on startup
        _init_db()
        logger.info("Habit Planner started (root_path=%r)", proxy_prefix)

    return app


# 日本語: import 時点で既定アプリを構築 / English: Build default app instance at import time
app = create_app()
