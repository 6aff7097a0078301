"""Durable workflow running one trade lifecycle command.

Determinism contract: this module contains NO I/O, NO randomness,
NO system clock access, NO mutable globals. The command itself runs in
an activity; the workflow only picks the activity and reports the outcome.
"""

from __future__ import annotations

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ActivityError, ApplicationError

with workflow.unsafe.imports_passed_through():
    from swapbook.trade.types import Trade
    from swapbook.workflow.activities import TradeLifecycleActivities
    from swapbook.workflow.types import (
        AmendTradeInput,
        CommandKind,
        CreateTradeInput,
        TradeActionInput,
        TradeCommand,
        TradeCommandResult,
    )

COMMAND_TIMEOUT: timedelta = timedelta(seconds=30)

# Validation, lookup and privilege failures are final; a conflict means
# another writer moved the active version and the command should re-run.
COMMAND_RETRY = RetryPolicy(
    initial_interval=timedelta(milliseconds=200),
    backoff_coefficient=2.0,
    maximum_interval=timedelta(seconds=5),
    maximum_attempts=3,
    non_retryable_error_types=[
        "ValidationError",
        "NotFoundError",
        "InactiveReferenceError",
        "UnauthorizedError",
    ],
)


@workflow.defn(name="TradeLifecycle")
class TradeLifecycleWorkflow:
    """Runs a create, amend, terminate or cancel to a single outcome."""

    def __init__(self) -> None:
        self._status: str = "RECEIVED"

    @workflow.query
    def get_status(self) -> str:
        return self._status

    @workflow.run
    async def run(self, command: TradeCommand) -> TradeCommandResult:
        self._status = "RUNNING"
        try:
            trade = await self._execute(command)
        except ActivityError as err:
            cause = err.cause
            self._status = "FAILED"
            if isinstance(cause, ApplicationError):
                return TradeCommandResult(
                    kind=command.kind, error_type=cause.type, error_message=cause.message,
                )
            return TradeCommandResult(
                kind=command.kind, error_type=type(cause).__name__, error_message=str(cause),
            )
        self._status = "COMPLETED"
        return TradeCommandResult(kind=command.kind, trade=trade)

    async def _execute(self, command: TradeCommand) -> Trade:
        match command.kind:
            case CommandKind.CREATE:
                assert command.request is not None
                return await workflow.execute_activity_method(
                    TradeLifecycleActivities.create_trade,
                    CreateTradeInput(user_id=command.user_id, request=command.request),
                    start_to_close_timeout=COMMAND_TIMEOUT,
                    retry_policy=COMMAND_RETRY,
                )
            case CommandKind.AMEND:
                assert command.trade_id is not None and command.request is not None
                return await workflow.execute_activity_method(
                    TradeLifecycleActivities.amend_trade,
                    AmendTradeInput(
                        user_id=command.user_id,
                        trade_id=command.trade_id,
                        request=command.request,
                    ),
                    start_to_close_timeout=COMMAND_TIMEOUT,
                    retry_policy=COMMAND_RETRY,
                )
            case CommandKind.TERMINATE:
                assert command.trade_id is not None
                return await workflow.execute_activity_method(
                    TradeLifecycleActivities.terminate_trade,
                    TradeActionInput(user_id=command.user_id, trade_id=command.trade_id),
                    start_to_close_timeout=COMMAND_TIMEOUT,
                    retry_policy=COMMAND_RETRY,
                )
            case CommandKind.CANCEL:
                assert command.trade_id is not None
                return await workflow.execute_activity_method(
                    TradeLifecycleActivities.cancel_trade,
                    TradeActionInput(user_id=command.user_id, trade_id=command.trade_id),
                    start_to_close_timeout=COMMAND_TIMEOUT,
                    retry_policy=COMMAND_RETRY,
                )
