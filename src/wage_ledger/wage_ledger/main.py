from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .access.controller import register as register_access
from .container import Container, build_container
from .common.web import register_error_handlers
from .core.constants import DEFAULT_IDENTITY_HEADER
from .database.bootstrap import apply_schema, list_tables
from .ledger.controller import register as register_ledger
from .profiles.controller import register as register_profiles
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["IDENTITY_HEADER"] = getattr(settings, "IDENTITY_HEADER", DEFAULT_IDENTITY_HEADER)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        backend = str(getattr(settings, "STORAGE_BACKEND", "memory"))
        db_config = getattr(settings, "DB_CONFIG", None)

        if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(backend=backend, db_config=db_config)
        logger.info("wage-ledger started: settings=%s backend=%s", settings_module, backend)

    app.extensions["wage_ledger"] = container

    register_error_handlers(app)
    register_access(app, container)
    register_profiles(app, container)
    register_ledger(app, container)
    register_reports(app, container)

    return app
