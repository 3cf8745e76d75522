"""Shared fixtures: record factories and an in-process fake budget store."""

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from src.data.budget_client import BudgetApiClient
from src.data.models import Transaction, WeeklyEarning


def make_transaction(day, amount, category='Outros', description='item', tx_id='t'):
    return Transaction({
        '_id': tx_id,
        'date': day,
        'amount': amount,
        'description': description,
        'category': category,
    })


def make_earning(week, gross, start, end, description='salary', earning_id='e'):
    return WeeklyEarning({
        '_id': earning_id,
        'weekNumber': week,
        'grossAmount': gross,
        'startDate': start,
        'endDate': end,
        'description': description,
    })


class FakeStore:
    """In-memory budget store with the same REST surface as the real one."""

    def __init__(self):
        self.transactions = []
        self.earnings = []
        self.requests = []
        # path -> (status, body text) forced responses
        self.failures = {}

    def app(self) -> web.Application:
        app = web.Application(middlewares=[self._record])
        app.add_routes([
            web.get('/api/transactions', self._list_transactions),
            web.post('/api/transactions', self._create_transaction),
            web.get('/api/earnings', self._list_earnings),
            web.post('/api/earnings', self._create_earning),
            web.get('/api/export', self._export),
        ])
        return app

    @web.middleware
    async def _record(self, request, handler):
        self.requests.append((request.method, request.path, request.query.get('month')))
        if request.path in self.failures:
            status, text = self.failures[request.path]
            return web.Response(status=status, text=text, content_type='application/json')
        return await handler(request)

    async def _list_transactions(self, request):
        month = request.query.get('month', '')
        return web.json_response([t for t in self.transactions if t['date'].startswith(month)])

    async def _list_earnings(self, request):
        month = request.query.get('month', '')
        return web.json_response([e for e in self.earnings if e['startDate'].startswith(month)])

    async def _create_transaction(self, request):
        body = await request.json()
        body['_id'] = f"t{len(self.transactions) + 1}"
        self.transactions.append(body)
        return web.json_response(body, status=201)

    async def _create_earning(self, request):
        body = await request.json()
        body['_id'] = f"e{len(self.earnings) + 1}"
        self.earnings.append(body)
        return web.json_response(body, status=201)

    async def _export(self, request):
        month = request.query.get('month', '')
        return web.Response(body=f"report {month}".encode(), content_type='text/csv')


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
async def api_url(store):
    server = TestServer(store.app())
    await server.start_server()
    yield str(server.make_url('/api'))
    await server.close()


@pytest.fixture
def client(api_url):
    return BudgetApiClient({'base_url': api_url, 'timeout': 5})
