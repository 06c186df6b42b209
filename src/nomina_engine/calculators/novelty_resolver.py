"""Monthly novelty resolution with recurring license materialization."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace

from nomina_engine.calculators.dates import first_day, parse_month
from nomina_engine.calculators.types import Novelty

logger = logging.getLogger(__name__)


def synthetic_novelty_id(origin_id: str, month: str) -> str:
    """Deterministic id for a recurring novelty materialized in ``month``."""
    return f"recurring-{origin_id}-{month}"


class NoveltyResolver:
    """Resolves which novelties apply to a payroll month.

    Resolution rules (in order):
    1. Nothing applies before the employee's hire month
    2. A one-off novelty applies to the month of its date
    3. A recurring license applies to every month from its start month on:
       - a stored license row dated in the month manifests the recurrence
         and is used as-is
       - otherwise a virtual row is synthesized on the first of the month
    4. The origin row is the schedule; once deleted, nothing is synthesized

    Resolution is re-derived from the stored rows on every call.
    """

    def resolve(
        self,
        novelties: Iterable[Novelty],
        employee_hire_month: str | None,
        target_month: str,
    ) -> list[Novelty]:
        """Return the effective novelties for ``target_month``.

        Args:
            novelties: All stored novelties of one employee
            employee_hire_month: YYYY-MM of the hire date, or None if unknown
            target_month: YYYY-MM being calculated

        Returns:
            Stored rows that apply, followed by synthesized recurring rows
        """
        parse_month(target_month)
        stored = list(novelties)

        if employee_hire_month is not None and employee_hire_month > target_month:
            return []

        effective: list[Novelty] = []
        origins: list[Novelty] = []

        for novelty in stored:
            if novelty.is_recurring_license:
                if novelty.start_month > target_month:
                    continue
                origins.append(novelty)
                if novelty.month == target_month:
                    effective.append(novelty)
            elif novelty.month == target_month:
                effective.append(novelty)

        for origin in origins:
            if self._is_manifested(stored, origin, target_month):
                continue
            effective.append(self._materialize(origin, target_month))

        return effective

    @staticmethod
    def _is_manifested(stored: list[Novelty], origin: Novelty, month: str) -> bool:
        """Whether a stored row of the origin's type already covers ``month``."""
        return any(
            n.employee_id == origin.employee_id
            and n.type == origin.type
            and n.month == month
            for n in stored
        )

    @staticmethod
    def _materialize(origin: Novelty, month: str) -> Novelty:
        logger.debug(
            "Synthesizing recurring %s for employee %s in %s (origin %s)",
            origin.type.value,
            origin.employee_id,
            month,
            origin.id,
        )
        return replace(
            origin,
            id=synthetic_novelty_id(origin.id, month),
            date=first_day(month),
            description=f"{origin.description} (Licencia recurrente desde {origin.start_month})",
            origin_id=origin.id,
        )


_default_resolver = NoveltyResolver()


def resolve_monthly(
    novelties: Iterable[Novelty],
    employee_hire_month: str | None,
    target_month: str,
) -> list[Novelty]:
    """Effective novelties of one employee for ``target_month``."""
    return _default_resolver.resolve(novelties, employee_hire_month, target_month)
