"""swapbook.trade — Trade aggregate, validation, cashflow schedules and lifecycle."""

from swapbook.trade.types import Cashflow as Cashflow
from swapbook.trade.types import LegRateType as LegRateType
from swapbook.trade.types import Operation as Operation
from swapbook.trade.types import ReferenceEntity as ReferenceEntity
from swapbook.trade.types import ReferenceKind as ReferenceKind
from swapbook.trade.types import Trade as Trade
from swapbook.trade.types import TradeLeg as TradeLeg
from swapbook.trade.types import TradeLegRequest as TradeLegRequest
from swapbook.trade.types import TradeRequest as TradeRequest
from swapbook.trade.types import TradeStatus as TradeStatus

from swapbook.trade.authorization import PrivilegeAuthorizer as PrivilegeAuthorizer  # isort: skip
from swapbook.trade.authorization import UserProfile as UserProfile  # isort: skip
from swapbook.trade.authorization import UserType as UserType  # isort: skip
from swapbook.trade.lifecycle import TradeLifecycleManager as TradeLifecycleManager  # isort: skip
from swapbook.trade.schedule import generate_cashflows as generate_cashflows  # isort: skip
from swapbook.trade.schedule import parse_leg_schedules as parse_leg_schedules  # isort: skip
from swapbook.trade.schedule import parse_schedule_months as parse_schedule_months  # isort: skip
