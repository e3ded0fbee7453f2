"""Evaluate advanced permission conditions against persons in the data layer."""

from __future__ import annotations

import logging

from authcore.application.interfaces.repositories import IPersonRepository
from authcore.domain.conditions import (
    Condition,
    OwnedBySelf,
    SameCompany,
    UnrecognizedCondition,
)

logger = logging.getLogger(__name__)


class ConditionEvaluator:
    """All conditions must hold; an empty list holds trivially.

    Lookup failures turn into False (logged), never into an exception.
    """

    def __init__(self, person_repo: IPersonRepository) -> None:
        self._person_repo = person_repo

    async def evaluate(
        self,
        conditions: tuple[Condition, ...],
        person_id: str,
        resource_id: str | None,
        tenant_id: str | None = None,
    ) -> bool:
        if not conditions:
            return True
        try:
            for condition in conditions:
                if not await self._holds(condition, person_id, resource_id):
                    return False
            return True
        except Exception:
            logger.exception(
                "Condition evaluation failed: person=%s resource=%s tenant=%s",
                person_id,
                resource_id,
                tenant_id,
            )
            return False

    async def _holds(
        self, condition: Condition, person_id: str, resource_id: str | None
    ) -> bool:
        match condition:
            case OwnedBySelf():
                if not resource_id or resource_id != person_id:
                    return False
                return await self._person_repo.get_by_id(person_id) is not None
            case SameCompany():
                if not resource_id:
                    return False
                person = await self._person_repo.get_by_id(person_id)
                resource_person = await self._person_repo.get_by_id(resource_id)
                if person is None or resource_person is None:
                    return False
                if person.company_id is None or resource_person.company_id is None:
                    return False
                return person.company_id == resource_person.company_id
            case UnrecognizedCondition(key=key, value=value):
                logger.debug("Ignoring unrecognized condition %s=%r", key, value)
                return True
        return False
