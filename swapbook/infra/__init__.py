"""swapbook.infra — Collaborator protocols, in-memory adapters, clocks and configuration."""

from swapbook.infra.clock import FixedClock as FixedClock
from swapbook.infra.clock import SystemClock as SystemClock
from swapbook.infra.config import LifecycleConfig as LifecycleConfig
from swapbook.infra.config import TemporalWorkerConfig as TemporalWorkerConfig
from swapbook.infra.memory_adapter import InMemoryReferenceData as InMemoryReferenceData
from swapbook.infra.memory_adapter import InMemoryTradeStore as InMemoryTradeStore
from swapbook.infra.protocols import Authorizer as Authorizer
from swapbook.infra.protocols import Clock as Clock
from swapbook.infra.protocols import ReferenceDataResolver as ReferenceDataResolver
from swapbook.infra.protocols import TradeContext as TradeContext
from swapbook.infra.protocols import TradeStore as TradeStore
