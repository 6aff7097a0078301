"""Activity implementations for the trade lifecycle workflow.

Activities are thin IO wrappers around TradeLifecycleManager. All domain
logic lives in swapbook.trade.

Each activity:
- Is a method of TradeLifecycleActivities decorated with @activity.defn
- Takes a single frozen-dataclass input and returns the committed Trade
- Raises ApplicationError for a failed command, typed with the error class
  name; only conflicts and storage failures are retryable
"""

from __future__ import annotations

from typing import final

from temporalio import activity
from temporalio.exceptions import ApplicationError

from swapbook.core.errors import SwapbookError, is_retryable
from swapbook.core.result import Err, Ok
from swapbook.trade.lifecycle import TradeLifecycleManager
from swapbook.trade.types import Trade
from swapbook.workflow.types import AmendTradeInput, CreateTradeInput, TradeActionInput


def _committed(result: Ok[Trade] | Err[SwapbookError], command: str) -> Trade:
    match result:
        case Ok(trade):
            activity.logger.info(
                "%s committed trade %s version %s", command, trade.trade_id, trade.version,
            )
            return trade
        case Err(e):
            retryable = is_retryable(e)
            activity.logger.warning(
                "%s failed (%s, retryable=%s): %s", command, e.code, retryable, e.message,
            )
            raise ApplicationError(
                e.message,
                e.to_dict(),
                type=type(e).__name__,
                non_retryable=not retryable,
            )


@final
class TradeLifecycleActivities:
    """Activities bound to one lifecycle manager (and so one store)."""

    def __init__(self, manager: TradeLifecycleManager) -> None:
        self._manager = manager

    @activity.defn(name="create_trade")
    async def create_trade(self, inp: CreateTradeInput) -> Trade:
        """Book a new trade.

        Timeout: 30s | Retries: 3 on conflict
        """
        activity.logger.info("Creating trade for user %s", inp.user_id)
        return _committed(self._manager.create_trade(inp.user_id, inp.request), "create_trade")

    @activity.defn(name="amend_trade")
    async def amend_trade(self, inp: AmendTradeInput) -> Trade:
        """Commit the next version of a trade.

        Timeout: 30s | Retries: 3 on conflict
        A retried amend re-reads the active version, so it never produces
        two versions from one command.
        """
        activity.logger.info("Amending trade %s for user %s", inp.trade_id, inp.user_id)
        return _committed(
            self._manager.amend_trade(inp.user_id, inp.trade_id, inp.request), "amend_trade",
        )

    @activity.defn(name="terminate_trade")
    async def terminate_trade(self, inp: TradeActionInput) -> Trade:
        activity.logger.info("Terminating trade %s for user %s", inp.trade_id, inp.user_id)
        return _committed(
            self._manager.terminate_trade(inp.user_id, inp.trade_id), "terminate_trade",
        )

    @activity.defn(name="cancel_trade")
    async def cancel_trade(self, inp: TradeActionInput) -> Trade:
        activity.logger.info("Cancelling trade %s for user %s", inp.trade_id, inp.user_id)
        return _committed(
            self._manager.cancel_trade(inp.user_id, inp.trade_id), "cancel_trade",
        )

    def all(self) -> list[object]:
        """Every activity, for Worker(activities=...)."""
        return [self.create_trade, self.amend_trade, self.terminate_trade, self.cancel_trade]
