"""swapbook.core — result type, error values, reference types and decimal helpers."""

from swapbook.core.decimal_money import fixed_payment as fixed_payment
from swapbook.core.decimal_money import percent_to_decimal as percent_to_decimal
from swapbook.core.decimal_money import percentage_of_notional as percentage_of_notional
from swapbook.core.errors import ConcurrencyConflictError as ConcurrencyConflictError
from swapbook.core.errors import FieldViolation as FieldViolation
from swapbook.core.errors import InactiveReferenceError as InactiveReferenceError
from swapbook.core.errors import LifecycleError as LifecycleError
from swapbook.core.errors import NotFoundError as NotFoundError
from swapbook.core.errors import PersistenceError as PersistenceError
from swapbook.core.errors import SwapbookError as SwapbookError
from swapbook.core.errors import UnauthorizedError as UnauthorizedError
from swapbook.core.errors import ValidationError as ValidationError
from swapbook.core.errors import http_status as http_status
from swapbook.core.errors import is_retryable as is_retryable
from swapbook.core.money import SWAPBOOK_DECIMAL_CONTEXT as SWAPBOOK_DECIMAL_CONTEXT
from swapbook.core.result import Err as Err
from swapbook.core.result import Ok as Ok
from swapbook.core.result import Result as Result
from swapbook.core.result import sequence as sequence
from swapbook.core.result import unwrap as unwrap
from swapbook.core.types import ById as ById
from swapbook.core.types import ByName as ByName
from swapbook.core.types import Reference as Reference
from swapbook.core.types import UtcDatetime as UtcDatetime
from swapbook.core.types import reference_of as reference_of
