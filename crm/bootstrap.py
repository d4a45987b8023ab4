"""Bootstrap: wires settings, logging, database and the controller together.

Invariants:
    - init_app() is the only place that touches the logging and database singletons
    - SQLite URLs get no pool options (their pools do not accept them)
"""

import logging

from crm.config import Settings, get_settings
from crm.core.repository_protocols import Bus
from crm.infrastructure.database import (
    DatabaseSessionManager, init_db, get_db_manager,
)
from crm.infrastructure.domain_logger import DomainLogger
from crm.infrastructure.message_bus import MessageBus
from crm.infrastructure.observability import setup_logging
from crm.services.event_dispatcher import EventDispatcher
from crm.services.user_controller import UserController

logger = logging.getLogger(__name__)


def engine_options(settings: Settings) -> dict:
    options: dict = {}
    if settings.database_isolation_level:
        options["isolation_level"] = settings.database_isolation_level
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
    return options


def init_app(settings: Settings | None = None) -> DatabaseSessionManager:
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(settings.database_url, **engine_options(settings))
    logger.info("CRM core initialized")
    return manager


def create_user_controller(
    bus: Bus,
    domain_logger: DomainLogger | None = None,
    db: DatabaseSessionManager | None = None,
) -> UserController:
    dispatcher = EventDispatcher(MessageBus(bus), domain_logger or DomainLogger())
    return UserController(db or get_db_manager(), dispatcher)
