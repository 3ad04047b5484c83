"""
YNAB API Client

Async implementation of BudgetApiInterface over httpx.

RESPONSE ENVELOPES:
- Success: {"data": {...}}
- Failure: {"error": {"id": "404.2", "name": "resource_not_found", "detail": "..."}}

Retries (tenacity, exponential backoff) cover transport failures,
rate limiting (429) and server errors (5xx). Client errors are raised
immediately as ApiError. A 2xx body that does not parse into the
expected models raises MalformedResponseError. Nothing above this
module retries.
"""

from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from ynab_mcp.audit import get_logger
from ynab_mcp.config import get_settings
from ynab_mcp.exceptions import ApiError, MalformedResponseError, TransportError
from ynab_mcp.models.entities import (
    Account,
    BudgetSummary,
    CategoryGroup,
    Payee,
)
from ynab_mcp.services.api.interface import BudgetApiInterface


RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

ModelT = TypeVar("ModelT", bound=BaseModel)

logger = get_logger(__name__)


def _is_retryable(error: BaseException) -> bool:
    if isinstance(error, httpx.TransportError):
        return True
    return isinstance(error, ApiError) and error.status_code in RETRYABLE_STATUS_CODES


def _api_error(response: httpx.Response) -> ApiError:
    """Build an ApiError from a YNAB error response."""
    try:
        body = response.json()
    except ValueError:
        body = {}

    upstream = body.get("error") if isinstance(body, dict) else None
    if not isinstance(upstream, dict):
        upstream = {}

    return ApiError(
        status_code=response.status_code,
        error_id=upstream.get("id"),
        error_name=upstream.get("name"),
        detail=upstream.get("detail") or (response.text or None),
    )


class YnabApiClient(BudgetApiInterface):
    """
    HTTP client for one YNAB access token.

    One instance per profile, owned by the ClientRegistry. The underlying
    connection pool is opened lazily on the first request.
    """

    def __init__(
        self,
        token: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        wait: Optional[wait_base] = None,
    ):
        """
        Initialize the client.

        Args:
            token: YNAB personal access token
            base_url: Overrides the configured API base URL
            timeout: Overrides the configured request timeout
            max_retries: Overrides the configured attempt count
            transport: Custom httpx transport (tests use httpx.MockTransport)
            wait: Custom tenacity wait strategy between attempts
        """
        settings = get_settings()
        self._max_retries = max_retries or settings.max_retries
        self._wait = wait or wait_exponential(multiplier=1, min=1, max=10)
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
            timeout=timeout or settings.request_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "YnabApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get(self, path: str) -> dict[str, Any]:
        """
        GET a path and return the "data" payload.

        Raises:
            ApiError: YNAB returned an error response
            TransportError: Network failure after all retries
            MalformedResponseError: 2xx body without a "data" object
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_retries),
            wait=self._wait,
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    response = await self._http.get(path)
                    if response.is_error:
                        error = _api_error(response)
                        logger.warning(
                            "upstream_request_failed",
                            path=path,
                            status_code=error.status_code,
                            error_name=error.error_name,
                        )
                        raise error
        except httpx.TransportError as e:
            logger.warning("upstream_unreachable", path=path, error=str(e))
            raise TransportError(f"Request to {path} failed: {e}") from e

        try:
            data = response.json().get("data", {})
        except (ValueError, AttributeError) as e:
            raise MalformedResponseError(f"Response from {path} is not a JSON object") from e
        if not isinstance(data, dict):
            raise MalformedResponseError(f"Response from {path} has no data object")
        return data

    async def _get_one(self, path: str, key: str, model: type[ModelT]) -> ModelT:
        data = await self._get(path)
        try:
            return model.model_validate(data.get(key))
        except ValidationError as e:
            logger.warning("upstream_payload_invalid", path=path, key=key, errors=e.error_count())
            raise MalformedResponseError(f"Unexpected '{key}' payload from {path}") from e

    async def _get_many(self, path: str, key: str, model: type[ModelT]) -> list[ModelT]:
        data = await self._get(path)
        try:
            return [model.model_validate(item) for item in data.get(key) or []]
        except (ValidationError, TypeError) as e:
            logger.warning("upstream_payload_invalid", path=path, key=key)
            raise MalformedResponseError(f"Unexpected '{key}' payload from {path}") from e

    async def list_budgets(self) -> list[BudgetSummary]:
        return await self._get_many("/budgets", "budgets", BudgetSummary)

    async def get_budget_by_id(self, budget_id: str) -> BudgetSummary:
        return await self._get_one(f"/budgets/{budget_id}", "budget", BudgetSummary)

    async def list_accounts(self, budget_id: str) -> list[Account]:
        return await self._get_many(f"/budgets/{budget_id}/accounts", "accounts", Account)

    async def get_account_by_id(self, budget_id: str, account_id: str) -> Account:
        return await self._get_one(
            f"/budgets/{budget_id}/accounts/{account_id}", "account", Account
        )

    async def list_categories(self, budget_id: str) -> list[CategoryGroup]:
        return await self._get_many(
            f"/budgets/{budget_id}/categories", "category_groups", CategoryGroup
        )

    async def list_payees(self, budget_id: str) -> list[Payee]:
        return await self._get_many(f"/budgets/{budget_id}/payees", "payees", Payee)
