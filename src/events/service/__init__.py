import typing as t
from contextlib import contextmanager

import structlog
from django.db import DatabaseError, models, transaction
from pydantic import BaseModel

from events.exceptions import StorageFailure

logger = structlog.get_logger(__name__)

T = t.TypeVar("T", bound=models.Model)


@transaction.atomic
def update_db_instance(
    instance: T,
    payload: BaseModel | None = None,
    *,
    exclude: set[str] | None = None,
    exclude_unset: bool = False,
    **kwargs: t.Any,
) -> T:
    """Updates a DB instance given a Pydantic payload, safely within a select_for_update lock."""
    instance = instance.__class__.objects.select_for_update().get(pk=instance.pk)  # type: ignore[attr-defined]
    data = payload.model_dump(exclude=exclude, exclude_unset=exclude_unset) if payload else {}
    data.update(**kwargs)
    for key, value in data.items():
        setattr(instance, key, value)
    instance.save()
    return instance


@contextmanager
def storage_guard(operation: str, **context: t.Any) -> t.Iterator[None]:
    """Turn database faults raised inside the block into ``StorageFailure``.

    Wrap it around ``transaction.atomic()`` so the rollback has already happened
    by the time the failure is logged.
    """
    try:
        yield
    except DatabaseError as e:
        logger.exception("storage_failure", operation=operation, **context)
        raise StorageFailure() from e
