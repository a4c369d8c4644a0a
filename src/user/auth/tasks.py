import sentry_sdk
from sqlalchemy.exc import SQLAlchemyError

from celery_tasks.main import REFRESH_TOKEN_SWEEP_TASK, local_async_session
from celery_tasks.types import typed_shared_task
from loggers import get_logger
from src.core.utils.coroutine_runner import execute_coroutine_sync
from src.main.config import config
from src.user.auth.dependencies import build_refresh_token_store

logger = get_logger(__name__)


@typed_shared_task(name=REFRESH_TOKEN_SWEEP_TASK)
def delete_expired_refresh_tokens() -> str:
    result = execute_coroutine_sync(coroutine=_delete_expired_refresh_tokens)
    return f"Deleted {result} expired refresh tokens."


async def _delete_expired_refresh_tokens() -> int:
    async with local_async_session() as session:
        store = build_refresh_token_store(session, config)
        try:
            return await store.delete_expired()
        except SQLAlchemyError as e:
            logger.exception("Expired refresh token sweep failed: %s", e)
            sentry_sdk.capture_exception(e)
            return 0
