"""Result of one pipeline run."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from .exceptions import HttpStatusCodeError
from .response import HttpResponse

T = TypeVar("T")


class ExchangeOutcome(str, Enum):
    """How an exchange ended."""
    COMPLETED = "completed"
    DECLINED = "declined"   # interceptor aborted
    FAILED = "failed"       # status classified as error, handler invoked


@dataclass
class Exchange(Generic[T]):
    """Outcome of RestClient.execute.

    Attributes:
        outcome: COMPLETED, DECLINED or FAILED
        url: Final request URL
        request_id: Correlation id of the exchange (same as in logs)
        response: Decoded response (COMPLETED, or DECLINED by a response interceptor)
        reason: Abort reason (DECLINED only)
        declined_by: Name of the interceptor that aborted
        error: Status error passed to the error handler (FAILED only)

    Example:
        >>> exchange = client.execute("/users/1", RequestMethod.GET, None, User)
        >>> if exchange.completed:
        ...     print(exchange.body.name)
        >>> elif exchange.declined:
        ...     print("cancelled:", exchange.reason)
    """

    outcome: ExchangeOutcome
    url: str
    request_id: str
    response: Optional[HttpResponse[T]] = None
    reason: Optional[str] = None
    declined_by: Optional[str] = None
    error: Optional[HttpStatusCodeError] = None

    @property
    def completed(self) -> bool:
        return self.outcome is ExchangeOutcome.COMPLETED

    @property
    def declined(self) -> bool:
        return self.outcome is ExchangeOutcome.DECLINED

    @property
    def failed(self) -> bool:
        return self.outcome is ExchangeOutcome.FAILED

    @property
    def value(self) -> Optional[HttpResponse[T]]:
        """Response for completed exchanges, None otherwise."""
        return self.response if self.completed else None

    @property
    def body(self) -> Any:
        response = self.value
        return response.body if response is not None else None
