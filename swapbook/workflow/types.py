"""Workflow data types for durable trade lifecycle commands.

TradeCommand is the workflow input; CreateTradeInput, AmendTradeInput and
TradeActionInput are the activity inputs; TradeCommandResult is the
workflow output.

All types: @final @dataclass(frozen=True, slots=True).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import final

from swapbook.trade.types import Trade, TradeRequest


class CommandKind(Enum):
    """Lifecycle commands the workflow can run. Exhaustive."""

    CREATE = "Create"
    AMEND = "Amend"
    TERMINATE = "Terminate"
    CANCEL = "Cancel"


# ---------------------------------------------------------------------------
# Workflow input / output
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class TradeCommand:
    """One lifecycle command for one trade.

    CREATE needs request; AMEND needs trade_id and request;
    TERMINATE and CANCEL need trade_id.
    """

    kind: CommandKind
    user_id: int
    trade_id: int | None = None
    request: TradeRequest | None = None

    def __post_init__(self) -> None:
        if self.kind in (CommandKind.CREATE, CommandKind.AMEND) and self.request is None:
            raise TypeError(f"{self.kind.value} command requires a request")
        if self.kind is not CommandKind.CREATE and self.trade_id is None:
            raise TypeError(f"{self.kind.value} command requires a trade_id")


@final
@dataclass(frozen=True, slots=True)
class TradeCommandResult:
    """Outcome of a command: the committed trade, or the failure that stopped it."""

    kind: CommandKind
    trade: Trade | None = None
    error_type: str | None = None
    error_message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.trade is not None


# ---------------------------------------------------------------------------
# Activity inputs
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class CreateTradeInput:
    user_id: int
    request: TradeRequest


@final
@dataclass(frozen=True, slots=True)
class AmendTradeInput:
    user_id: int
    trade_id: int
    request: TradeRequest


@final
@dataclass(frozen=True, slots=True)
class TradeActionInput:
    """Input for status-only commands (terminate, cancel)."""

    user_id: int
    trade_id: int
