from __future__ import annotations

from plancore.config import Settings, get_settings
from plancore.db import db_session, get_engine
from plancore.logging_config import get_logger, setup_logging
from plancore.models import Base, TrainingPlan
from plancore.services.sql_store import stored_plan_distance

logger = get_logger(__name__)


def init_runtime(create_schema: bool = False) -> Settings:
    """Wire logging (and optionally the local schema) for a host process."""
    settings = get_settings()
    setup_logging(settings.log_level)
    if create_schema:
        Base.metadata.create_all(get_engine())
    logger.info("plancore runtime initialized", extra={"ctx_app_env": settings.app_env})
    return settings


def refresh_plan_distance(plan_id: int) -> int:
    """Recompute a stored plan's distance and save it on the plan row."""
    with db_session() as s:
        meters = stored_plan_distance(s, plan_id)
        plan = s.get(TrainingPlan, plan_id)
        plan.estimated_distance = meters
    logger.info(
        "plan distance refreshed",
        extra={"ctx_plan_id": plan_id, "ctx_meters": meters},
    )
    return meters
