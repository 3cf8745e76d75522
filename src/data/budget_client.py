"""REST client for the budget store holding transactions and weekly earnings."""

import asyncio
import logging
from datetime import date
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple, Union
import aiohttp
from .errors import BudgetError, ApiError, NetworkFailure, UnknownError
from .models import Transaction, WeeklyEarning, to_iso_timestamp

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = 'Request failed'


class BudgetApiClient:
    """Handles requests to the budget store API."""

    def __init__(self, api_config: Dict[str, Any]):
        """
        Initialize the API client.

        Args:
            api_config: The ``api`` section of the configuration (base_url, timeout).
        """
        self.base_url = api_config['base_url'].rstrip('/')
        self.timeout = aiohttp.ClientTimeout(total=api_config.get('timeout', 30))

        logger.info(f"Budget API client initialized for {self.base_url}")

    async def fetch_month(self, month: str) -> Tuple[List[Transaction], List[WeeklyEarning]]:
        """
        Fetch transactions and earnings of a month concurrently.

        Both requests run on the same session; the call returns once both
        resolve and fails as a whole if either fails.

        Args:
            month: Month key in ``YYYY-MM`` form.

        Returns:
            Tuple of (transactions, earnings).
        """
        logger.info(f"Fetching data for {month}...")
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            transactions, earnings = await asyncio.gather(
                self.fetch_transactions(month, session),
                self.fetch_earnings(month, session),
            )
        logger.info(f"Fetched {len(transactions)} transactions and {len(earnings)} earnings for {month}")
        return transactions, earnings

    async def fetch_transactions(
        self,
        month: str,
        session: Optional[aiohttp.ClientSession] = None
    ) -> List[Transaction]:
        """Fetch the expense transactions of a month."""
        data = await self._request('GET', '/transactions', session=session, params={'month': month})
        return self._parse_list(data, Transaction, 'transactions')

    async def fetch_earnings(
        self,
        month: str,
        session: Optional[aiohttp.ClientSession] = None
    ) -> List[WeeklyEarning]:
        """Fetch the weekly earnings of a month."""
        data = await self._request('GET', '/earnings', session=session, params={'month': month})
        return self._parse_list(data, WeeklyEarning, 'earnings')

    async def create_transaction(
        self,
        day: date,
        amount: float,
        description: str,
        category: str
    ) -> Any:
        """
        Store a new expense. The amount is always sent as a negative number.

        Returns:
            The decoded response body, or None when the store sends none.
        """
        payload = {
            'date': to_iso_timestamp(day),
            'amount': -abs(float(amount)),
            'description': description,
            'category': category,
        }
        result = await self._request('POST', '/transactions', json_body=payload)
        logger.info(f"Stored transaction of {payload['amount']:.2f} ({category}) on {day.isoformat()}")
        return result

    async def create_earning(
        self,
        week_number: int,
        gross_amount: float,
        start_date: date,
        end_date: date,
        description: str
    ) -> Any:
        """Store a new weekly earning record."""
        payload = {
            'weekNumber': int(week_number),
            'grossAmount': float(gross_amount),
            'startDate': to_iso_timestamp(start_date),
            'endDate': to_iso_timestamp(end_date),
            'description': description,
        }
        result = await self._request('POST', '/earnings', json_body=payload)
        logger.info(f"Stored earning of {payload['grossAmount']:.2f} for week {week_number}")
        return result

    def export_url(self, month: str) -> str:
        """URL of the report artifact for a month."""
        return f"{self.base_url}/export?month={month}"

    async def download_export(self, month: str, output_path: Union[str, Path]) -> Path:
        """
        Download the report artifact of a month to a file.

        Returns:
            Path the report was written to.
        """
        url = f"{self.base_url}/export"
        output_path = Path(output_path)
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(url, params={'month': month}) as response:
                    if not 200 <= response.status < 300:
                        raise await self._api_error(response)
                    content = await response.read()
        except BudgetError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkFailure(f"Could not reach {url}: {e}") from e

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(content)
        except OSError as e:
            raise UnknownError(f"Could not write {output_path}: {e}") from e
        logger.info(f"Saved report for {month} to {output_path} ({len(content)} bytes)")
        return output_path

    async def _request(
        self,
        method: str,
        path: str,
        session: Optional[aiohttp.ClientSession] = None,
        params: Optional[Dict[str, str]] = None,
        json_body: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Issue a request and decode the JSON response, mapping failures to BudgetError."""
        if session is None:
            async with aiohttp.ClientSession(timeout=self.timeout) as own_session:
                return await self._request(method, path, own_session, params, json_body)

        url = f"{self.base_url}{path}"
        headers = {'Accept': 'application/json'}
        try:
            async with session.request(method, url, headers=headers, params=params, json=json_body) as response:
                return await self._handle_response(response)
        except BudgetError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkFailure(f"Could not reach {url}: {e}") from e

    async def _handle_response(self, response: aiohttp.ClientResponse) -> Any:
        if not 200 <= response.status < 300:
            raise await self._api_error(response)

        body = await response.read()
        if not body.strip():
            return None
        try:
            return await response.json(content_type=None)
        except ValueError as e:
            raise UnknownError(f"Invalid JSON from {response.url}: {e}") from e

    async def _api_error(self, response: aiohttp.ClientResponse) -> ApiError:
        """Build an ApiError from the ``message`` field of an error body."""
        message = None
        try:
            body = await response.json(content_type=None)
            if isinstance(body, dict):
                message = body.get('message')
        except ValueError:
            pass
        logger.error(f"{response.method} {response.url} returned {response.status}")
        return ApiError(message or DEFAULT_ERROR_MESSAGE, status=response.status)

    def _parse_list(self, data: Any, model, label: str) -> list:
        if not isinstance(data, list):
            raise UnknownError(f"Expected a list of {label}, got {type(data).__name__}")
        try:
            return [model(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise UnknownError(f"Malformed {label} record: {e}") from e
