"""Reference-data resolution for trade and leg requests.

Every reference field resolves the same way: the request carries at most one
Reference (ById or ByName, see core.types.reference_of); a missing required
field is a ValidationError, a reference the resolver cannot find is a
NotFoundError, and an inactive book, counterparty, trader or inputter is an
InactiveReferenceError.

Field table:

    field            kind                     required  active check
    book             BOOK                     yes       yes
    counterparty     COUNTERPARTY             yes       yes
    trader           USER                     yes       yes
    inputter         USER                     yes       yes
    trade_type       TRADE_TYPE               yes       no
    trade_sub_type   TRADE_SUB_TYPE           yes       no
    trade_status     TRADE_STATUS             no        no
    currency         CURRENCY                 yes       no
    leg_type         LEG_TYPE                 yes       no
    pay_rec          PAY_REC                  yes       no
    index            INDEX                    no        no
    holiday_calendar HOLIDAY_CALENDAR         no        no
    schedule         SCHEDULE                 no        no
    payment_bdc      BUSINESS_DAY_CONVENTION  no        no
    fixing_bdc       BUSINESS_DAY_CONVENTION  no        no
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import final

from swapbook.core.errors import (
    FieldViolation,
    InactiveReferenceError,
    NotFoundError,
    ValidationError,
    validation_error,
)
from swapbook.core.result import Err, Ok
from swapbook.core.types import ByName, Reference, UtcDatetime
from swapbook.infra.protocols import ReferenceDataResolver
from swapbook.trade.types import (
    ReferenceEntity,
    ReferenceKind,
    TradeLeg,
    TradeLegRequest,
    TradeRequest,
    TradeStatus,
)

logger = logging.getLogger(__name__)

_SOURCE = "trade.reference"

type ResolutionError = NotFoundError | InactiveReferenceError | ValidationError

# (attribute, kind, label used in messages, active check)
_TRADE_FIELDS: tuple[tuple[str, ReferenceKind, str, bool], ...] = (
    ("book", ReferenceKind.BOOK, "Book", True),
    ("counterparty", ReferenceKind.COUNTERPARTY, "Counterparty", True),
    ("trader", ReferenceKind.USER, "TraderUser", True),
    ("inputter", ReferenceKind.USER, "InputterUser", True),
    ("trade_type", ReferenceKind.TRADE_TYPE, "TradeType", False),
    ("trade_sub_type", ReferenceKind.TRADE_SUB_TYPE, "TradeSubType", False),
)

_REQUIRED_LEG_FIELDS: tuple[tuple[str, str], ...] = (
    ("currency", "Currency"),
    ("leg_type", "LegType"),
    ("pay_rec", "PayRec"),
)


@final
@dataclass(frozen=True, slots=True)
class TradeReferences:
    """Resolved trade-level reference data. status is None when not requested."""

    book: ReferenceEntity
    counterparty: ReferenceEntity
    trader: ReferenceEntity
    inputter: ReferenceEntity
    trade_type: ReferenceEntity
    trade_sub_type: ReferenceEntity
    status: ReferenceEntity | None


def missing_references(request: TradeRequest) -> tuple[FieldViolation, ...]:
    """Every required reference the request leaves empty, trade and legs alike."""
    violations: list[FieldViolation] = []
    for attr, _kind, label, _active in _TRADE_FIELDS:
        if getattr(request, attr) is None:
            violations.append(FieldViolation(
                path=f"trade.{attr}",
                constraint=f"{label} id or name is required",
                actual_value="",
            ))
    for i, leg in enumerate(request.legs):
        for attr, label in _REQUIRED_LEG_FIELDS:
            if getattr(leg, attr) is None:
                violations.append(FieldViolation(
                    path=f"legs[{i}].{attr}",
                    constraint=f"{label} id or name is required",
                    actual_value="",
                ))
    return tuple(violations)


def require_active(
    entity: ReferenceEntity, label: str,
) -> Ok[ReferenceEntity] | Err[InactiveReferenceError]:
    """Pass an active entity through; report an inactive one."""
    if entity.active:
        return Ok(entity)
    return Err(InactiveReferenceError(
        message=f"{label} must be active to populate a Trade",
        code="INACTIVE_REFERENCE",
        timestamp=UtcDatetime.now(),
        source=f"{_SOURCE}.require_active",
        entity=entity.kind.value,
        identifier=entity.name,
    ))


def _resolve_optional(
    resolver: ReferenceDataResolver, kind: ReferenceKind, reference: Reference | None,
) -> Ok[ReferenceEntity | None] | Err[NotFoundError]:
    if reference is None:
        return Ok(None)
    match resolver.resolve(kind, reference):
        case Err(e):
            return Err(e)
        case Ok(entity):
            return Ok(entity)


def resolve_trade_references(
    resolver: ReferenceDataResolver, request: TradeRequest,
) -> Ok[TradeReferences] | Err[ResolutionError]:
    """Resolve book, counterparty, users, type, sub-type and optional status."""
    missing = [v for v in missing_references(request) if v.path.startswith("trade.")]
    if missing:
        return Err(validation_error(
            f"{_SOURCE}.resolve_trade_references", "MISSING_REFERENCE", missing,
            message="Required trade reference data is missing",
        ))

    resolved: dict[str, ReferenceEntity] = {}
    for attr, kind, label, active_check in _TRADE_FIELDS:
        reference: Reference = getattr(request, attr)
        logger.debug("Resolving %s %s", attr, reference)
        match resolver.resolve(kind, reference):
            case Err(e):
                return Err(e)
            case Ok(entity):
                pass
        if active_check:
            match require_active(entity, label):
                case Err(e):
                    return Err(e)
                case Ok(_):
                    pass
        resolved[attr] = entity

    match _resolve_optional(resolver, ReferenceKind.TRADE_STATUS, request.trade_status):
        case Err(e):
            return Err(e)
        case Ok(status):
            pass

    return Ok(TradeReferences(status=status, **resolved))


def resolve_status(
    resolver: ReferenceDataResolver, status: TradeStatus,
) -> Ok[ReferenceEntity] | Err[NotFoundError]:
    """Look up the reference row for one of the lifecycle statuses."""
    match resolver.resolve(ReferenceKind.TRADE_STATUS, ByName(name=status.value)):
        case Err(e):
            return Err(e.with_context(f"{status.value} status not found"))  # type: ignore[arg-type]
        case Ok(entity):
            return Ok(entity)


def resolve_leg(
    resolver: ReferenceDataResolver,
    leg: TradeLegRequest,
    position: int,
    created_at: UtcDatetime,
) -> Ok[TradeLeg] | Err[ResolutionError]:
    """Resolve one leg request into an uncommitted TradeLeg without cashflows."""
    missing = [
        FieldViolation(
            path=f"legs[{position}].{attr}",
            constraint=f"{label} id or name is required",
            actual_value="",
        )
        for attr, label in _REQUIRED_LEG_FIELDS
        if getattr(leg, attr) is None
    ]
    if missing:
        return Err(validation_error(
            f"{_SOURCE}.resolve_leg", "MISSING_REFERENCE", missing,
            message=f"Required reference data missing on leg {position}",
        ))

    lookups: tuple[tuple[str, ReferenceKind, Reference | None], ...] = (
        ("currency", ReferenceKind.CURRENCY, leg.currency),
        ("leg_rate_type", ReferenceKind.LEG_TYPE, leg.leg_type),
        ("pay_rec", ReferenceKind.PAY_REC, leg.pay_rec),
        ("index", ReferenceKind.INDEX, leg.index),
        ("holiday_calendar", ReferenceKind.HOLIDAY_CALENDAR, leg.holiday_calendar),
        ("schedule", ReferenceKind.SCHEDULE, leg.schedule),
        ("payment_bdc", ReferenceKind.BUSINESS_DAY_CONVENTION, leg.payment_bdc),
        ("fixing_bdc", ReferenceKind.BUSINESS_DAY_CONVENTION, leg.fixing_bdc),
    )
    fields: dict[str, ReferenceEntity | None] = {}
    for attr, kind, reference in lookups:
        match _resolve_optional(resolver, kind, reference):
            case Err(e):
                return Err(e.with_context(f"legs[{position}].{attr}"))  # type: ignore[arg-type]
            case Ok(entity):
                fields[attr] = entity

    return Ok(TradeLeg(
        notional=leg.notional,
        rate=leg.rate,
        created_at=created_at,
        **fields,  # type: ignore[arg-type]
    ))
