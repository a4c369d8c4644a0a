from collections.abc import Callable
from typing import Any, ParamSpec, Protocol, TypeVar, cast

from celery import shared_task

from celery_tasks.main import celery_app  # noqa: F401

P = ParamSpec("P")
R = TypeVar("R", covariant=True)


class TypedTask(Protocol[P, R]):
    """A registered task: callable in-process, or queued through `delay`."""

    name: str

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> R: ...
    def delay(self, *args: P.args, **kwargs: P.kwargs) -> Any: ...


def typed_shared_task(
    name: str, **options: Any
) -> Callable[[Callable[P, R]], TypedTask[P, R]]:
    """
    Register a function as a shared task under an explicit name.

    The beat schedule refers to tasks by name, so one is always required.
    """

    def register(func: Callable[P, R]) -> TypedTask[P, R]:
        return cast(TypedTask[P, R], shared_task(name=name, **options)(func))

    return register
