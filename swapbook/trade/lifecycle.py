"""Trade lifecycle: create, amend, terminate and cancel with versioning.

Every mutating operation runs the same pipeline and stops at the first
failing step, before anything is written:

    authorize -> date rules -> required references -> resolve references
      -> resolve legs -> cross-leg rules -> generate cashflows -> commit

Create and amend commit a whole new version (trade, legs, cashflows) with
one store.save(); amend names the version it supersedes so the store can
swap the active row atomically. Terminate and cancel change the status of
the active row in place and keep its version, legs and cashflows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import final

from swapbook.core.errors import (
    FieldViolation,
    LifecycleError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    validation_error,
)
from swapbook.core.result import Err, Ok, sequence
from swapbook.core.types import UtcDatetime
from swapbook.infra.clock import SystemClock
from swapbook.infra.config import LifecycleConfig
from swapbook.infra.protocols import Authorizer, Clock, ReferenceDataResolver, TradeStore
from swapbook.trade.reference import (
    TradeReferences,
    missing_references,
    resolve_leg,
    resolve_status,
    resolve_trade_references,
)
from swapbook.trade.schedule import generate_cashflows, parse_leg_schedules
from swapbook.trade.types import (
    Cashflow,
    Operation,
    ReferenceEntity,
    Trade,
    TradeLeg,
    TradeRequest,
    TradeStatus,
)
from swapbook.trade.validation import validate_leg_consistency, validate_trade_dates

logger = logging.getLogger(__name__)

_SOURCE = "trade.lifecycle.TradeLifecycleManager"


@final
@dataclass(frozen=True, slots=True)
class LifecycleContext:
    """The trade an operation touches, as handed to the authorizer."""

    trade_id: int | None
    request: TradeRequest | None = None


def _trade_not_found(trade_id: int, operation: str) -> NotFoundError:
    return NotFoundError(
        message=f"Trade not found: {trade_id}",
        code="TRADE_NOT_FOUND",
        timestamp=UtcDatetime.now(),
        source=f"{_SOURCE}.{operation}",
        entity="trade",
        field="trade_id",
        value=str(trade_id),
    )


@final
class TradeLifecycleManager:
    """Orchestrates the trade version state machine over its collaborators."""

    def __init__(
        self,
        resolver: ReferenceDataResolver,
        store: TradeStore,
        authorizer: Authorizer,
        clock: Clock | None = None,
        config: LifecycleConfig | None = None,
    ) -> None:
        self._resolver = resolver
        self._store = store
        self._authorizer = authorizer
        self._clock: Clock = clock if clock is not None else SystemClock()
        self._config = config if config is not None else LifecycleConfig()

    # -- commands --

    def create_trade(self, user_id: int, request: TradeRequest) -> Ok[Trade] | Err[LifecycleError]:
        """Book version 1 of a new trade. Status defaults to NEW."""
        logger.info("Creating trade %s for user %s", request.trade_id, user_id)
        match self._authorizer.authorize(
            user_id, Operation.CREATE_TRADE, LifecycleContext(request.trade_id, request),
        ):
            case Err(e):
                return Err(e)
            case Ok(_):
                pass

        match self._assign_trade_id(request.trade_id):
            case Err(e):
                return Err(e)
            case Ok(trade_id):
                pass

        match self._build_version(
            request, trade_id=trade_id, version=1, status=None, uti_code=request.uti_code,
        ):
            case Err(e):
                return Err(e)
            case Ok(trade):
                pass

        match self._store.save(trade):
            case Err(e):
                logger.warning("Create of trade %s failed at commit: %s", trade_id, e.message)
                return Err(e)
            case Ok(stored):
                logger.info(
                    "Created trade %s version %s with status %s",
                    stored.trade_id, stored.version, stored.status_name,
                )
                return Ok(stored)

    def amend_trade(
        self, user_id: int, trade_id: int, request: TradeRequest,
    ) -> Ok[Trade] | Err[LifecycleError]:
        """Replace the active version with version + 1 in status AMENDED.

        Legs and cashflows are rebuilt from the request; nothing is carried
        over from the superseded version except the trade id.
        """
        logger.info("Amending trade %s for user %s", trade_id, user_id)
        match self._authorizer.authorize(
            user_id, Operation.AMEND_TRADE, LifecycleContext(trade_id, request),
        ):
            case Err(e):
                return Err(e)
            case Ok(_):
                pass

        match self._require_active(trade_id, "amend_trade"):
            case Err(e):
                return Err(e)
            case Ok(current):
                pass

        match resolve_status(self._resolver, TradeStatus.AMENDED):
            case Err(e):
                return Err(e)
            case Ok(amended):
                pass

        match self._build_version(
            request,
            trade_id=trade_id,
            version=current.version + 1,
            status=amended,
            uti_code=request.uti_code if request.uti_code is not None else current.uti_code,
        ):
            case Err(e):
                return Err(e)
            case Ok(trade):
                pass

        match self._store.save(trade, supersedes=current):
            case Err(e):
                logger.warning("Amend of trade %s failed at commit: %s", trade_id, e.message)
                return Err(e)
            case Ok(stored):
                logger.info(
                    "Amended trade %s to version %s", stored.trade_id, stored.version,
                )
                return Ok(stored)

    def terminate_trade(self, user_id: int, trade_id: int) -> Ok[Trade] | Err[LifecycleError]:
        return self._change_status(
            user_id, trade_id, Operation.TERMINATE_TRADE, TradeStatus.TERMINATED,
        )

    def cancel_trade(self, user_id: int, trade_id: int) -> Ok[Trade] | Err[LifecycleError]:
        return self._change_status(
            user_id, trade_id, Operation.CANCEL_TRADE, TradeStatus.CANCELLED,
        )

    def delete_trade(self, user_id: int, trade_id: int) -> Ok[Trade] | Err[LifecycleError]:
        """Deleting a trade marks it cancelled; no row is removed."""
        return self.cancel_trade(user_id, trade_id)

    # -- queries --

    def get_trade_by_id(self, trade_id: int) -> Ok[Trade] | Err[NotFoundError | PersistenceError]:
        return self._require_active(trade_id, "get_trade_by_id")

    def get_trades_by_status(
        self, status: TradeStatus | str,
    ) -> Ok[tuple[Trade, ...]] | Err[PersistenceError]:
        name = status.value if isinstance(status, TradeStatus) else status
        return self._store.find_active_by_status(name)

    def generate_cashflows(
        self, leg: TradeLeg, start_date: date, maturity_date: date,
    ) -> Ok[tuple[Cashflow, ...]] | Err[ValidationError]:
        return generate_cashflows(leg, start_date, maturity_date, self._clock.now())

    # -- internals --

    def _change_status(
        self, user_id: int, trade_id: int, operation: Operation, target: TradeStatus,
    ) -> Ok[Trade] | Err[LifecycleError]:
        logger.info("%s on trade %s for user %s", operation.value, trade_id, user_id)
        match self._authorizer.authorize(user_id, operation, LifecycleContext(trade_id)):
            case Err(e):
                return Err(e)
            case Ok(_):
                pass

        match self._require_active(trade_id, operation.value.lower()):
            case Err(e):
                return Err(e)
            case Ok(current):
                pass

        match resolve_status(self._resolver, target):
            case Err(e):
                return Err(e)
            case Ok(status):
                pass

        match self._store.update(replace(current, status=status, last_touch_at=self._clock.now())):
            case Err(e):
                logger.warning("%s on trade %s failed at commit: %s", operation.value, trade_id, e.message)
                return Err(e)
            case Ok(stored):
                logger.info("Trade %s is now %s", trade_id, stored.status_name)
                return Ok(stored)

    def _require_active(
        self, trade_id: int, operation: str,
    ) -> Ok[Trade] | Err[NotFoundError | PersistenceError]:
        match self._store.find_active_by_trade_id(trade_id):
            case Err(e):
                return Err(e)
            case Ok(None):
                return Err(_trade_not_found(trade_id, operation))
            case Ok(trade):
                return Ok(trade)  # type: ignore[arg-type]

    def _assign_trade_id(self, requested: int | None) -> Ok[int] | Err[ValidationError | PersistenceError]:
        """Requested id if free; otherwise the next free id from base + row count."""
        if requested is not None:
            match self._store.find_active_by_trade_id(requested):
                case Err(e):
                    return Err(e)
                case Ok(None):
                    return Ok(requested)
                case Ok(_):
                    return Err(validation_error(
                        f"{_SOURCE}.create_trade", "DUPLICATE_TRADE_ID",
                        (FieldViolation(
                            path="trade.trade_id",
                            constraint=f"Trade {requested} already exists",
                            actual_value=str(requested),
                        ),),
                        message=f"Trade {requested} already exists",
                    ))

        match self._store.count():
            case Err(e):
                return Err(e)
            case Ok(row_count):
                pass
        candidate = self._config.trade_id_base + row_count
        while True:
            match self._store.find_active_by_trade_id(candidate):
                case Err(e):
                    return Err(e)
                case Ok(None):
                    logger.debug("Generated trade id %s", candidate)
                    return Ok(candidate)
                case Ok(_):
                    candidate += 1

    def _build_version(
        self,
        request: TradeRequest,
        *,
        trade_id: int,
        version: int,
        status: ReferenceEntity | None,
        uti_code: str | None,
    ) -> Ok[Trade] | Err[LifecycleError]:
        """Validate and resolve a request into an uncommitted trade version.

        status None means: the requested status if any, else NEW.
        """
        match validate_trade_dates(
            request, self._clock.today(), self._config.max_trade_date_age_days,
        ):
            case Err(e):
                return Err(e)
            case Ok(_):
                pass

        missing = missing_references(request)
        if missing:
            return Err(validation_error(
                f"{_SOURCE}._build_version", "MISSING_REFERENCE", missing,
                message="Required reference data is missing",
            ))

        match resolve_trade_references(self._resolver, request):
            case Err(e):
                return Err(e)
            case Ok(refs):
                pass

        match self._effective_status(refs, status):
            case Err(e):
                return Err(e)
            case Ok(effective_status):
                pass

        now = self._clock.now()
        match sequence(
            resolve_leg(self._resolver, leg, i, now) for i, leg in enumerate(request.legs)
        ):
            case Err(e):
                return Err(e)
            case Ok(resolved_legs):
                pass

        match validate_leg_consistency(resolved_legs):
            case Err(e):
                return Err(e)
            case Ok(_):
                pass

        match parse_leg_schedules(resolved_legs):
            case Err(e):
                return Err(e)
            case Ok(_):
                pass

        legs: list[TradeLeg] = []
        for leg in resolved_legs:
            match generate_cashflows(leg, request.start_date, request.maturity_date, now):
                case Err(e):
                    return Err(e)
                case Ok(cashflows):
                    legs.append(replace(leg, cashflows=cashflows))

        return Ok(Trade(
            trade_id=trade_id,
            version=version,
            trade_date=request.trade_date,
            start_date=request.start_date,
            maturity_date=request.maturity_date,
            execution_date=request.execution_date,
            status=effective_status,
            book=refs.book,
            counterparty=refs.counterparty,
            trader=refs.trader,
            inputter=refs.inputter,
            trade_type=refs.trade_type,
            trade_sub_type=refs.trade_sub_type,
            legs=tuple(legs),
            created_at=now,
            last_touch_at=now,
            uti_code=uti_code,
        ))

    def _effective_status(
        self, refs: TradeReferences, forced: ReferenceEntity | None,
    ) -> Ok[ReferenceEntity] | Err[NotFoundError]:
        if forced is not None:
            return Ok(forced)
        if refs.status is not None:
            return Ok(refs.status)
        return resolve_status(self._resolver, TradeStatus.NEW)
