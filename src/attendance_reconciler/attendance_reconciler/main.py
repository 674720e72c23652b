from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .approvals.controller import register as register_approvals
from .audit.controller import register as register_audit
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .jobs.scheduler import JobScheduler
from .jobs.tasks import default_jobs
from .logging_config import configure_logging, get_logger
from .records.controller import register as register_records

logger = get_logger("main")

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def load_settings():
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def create_app(container: Optional[Container] = None, settings=None) -> Flask:
    settings = settings or load_settings()
    configure_logging(level=getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY", "dev-secret-key")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "starting",
            extra={
                "settings": settings.__name__,
                "db": f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
            },
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready", extra={"tables": len(list_tables(db_config))})
        container = build_container(settings=settings)

    register_records(app, container)
    register_approvals(app, container)
    register_audit(app, container)
    app.extensions["attendance_container"] = container

    if bool(getattr(settings, "SCHEDULER_ENABLED", False)):
        scheduler = JobScheduler(default_jobs(container))
        scheduler.start()
        app.extensions["attendance_scheduler"] = scheduler

    return app
