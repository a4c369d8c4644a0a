"""
Worker and beat entrypoint.

    celery -A celery_tasks.main worker --beat --loglevel=info
"""

from celery import Celery
from celery.schedules import crontab
from sqlalchemy.ext.asyncio import async_sessionmaker

from loggers import get_logger
from src.core.database.lifecycle import create_engine
from src.main.config import config
from src.main.sentry import init_sentry

init_sentry()
logger = get_logger(__name__)

REFRESH_TOKEN_SWEEP_TASK = "delete_expired_refresh_tokens"

# the worker owns its own engine; the web app's engine lives on app.state
engine = create_engine(config.postgres.dsn_async, echo=config.postgres.DB_ECHO)
local_async_session = async_sessionmaker(bind=engine, expire_on_commit=False)

celery_app = Celery(
    "task_tracker",
    broker=config.rabbitmq.dsn,
    include=["src.user.auth.tasks"],
)
celery_app.conf.update(
    broker_connection_retry_on_startup=True,
    task_acks_late=True,
    task_ignore_result=True,
    task_time_limit=600,
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        f"{REFRESH_TOKEN_SWEEP_TASK}_hourly": {
            "task": REFRESH_TOKEN_SWEEP_TASK,
            "schedule": crontab(minute=0),
        },
    },
)
