"""swapbook.workflow — Temporal.io durable trade lifecycle commands."""

from swapbook.workflow.types import AmendTradeInput as AmendTradeInput
from swapbook.workflow.types import CommandKind as CommandKind
from swapbook.workflow.types import CreateTradeInput as CreateTradeInput
from swapbook.workflow.types import TradeActionInput as TradeActionInput
from swapbook.workflow.types import TradeCommand as TradeCommand
from swapbook.workflow.types import TradeCommandResult as TradeCommandResult
