from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .accounting.controller import register as register_accounting
from .admin.controller import register as register_admin
from .attendance.controller import register as register_attendance
from .common.logging import configure_logging
from .common.web import register_error_handlers
from .container import Container, build_container
from .employees.controller import register as register_employees
from .overtime.controller import register as register_overtime
from .payroll.controller import register as register_payroll
from .sync.controller import register as register_sync
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(str(getattr(settings, "LOG_LEVEL", "INFO")).upper())

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=7)

    if container is None:
        container = build_container(settings)
    app.extensions["bizledger"] = container

    logger.info(
        "Starting bizledger",
        extra={"doc_path": container.sync_engine.doc_path},
    )
    if bool(getattr(settings, "START_SYNC", False)):
        container.sync_engine.start()

    register_error_handlers(app)
    register_users(app, container)
    register_sync(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_overtime(app, container)
    register_payroll(app, container)
    register_accounting(app, container)
    register_admin(app, container)

    return app
