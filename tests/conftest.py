import pytest

from ilp_price.core.config import Settings


class FakeTransport:
    def __init__(self):
        self.connect_calls = 0
        self.sent = []

    async def connect(self):
        self.connect_calls += 1

    async def send_data(self, data: bytes) -> bytes:
        self.sent.append(data)
        return b""


class FakeIldcp:
    def __init__(self, client_address="test.alice", asset_code="XRP", asset_scale=9):
        self.details = {
            "clientAddress": client_address,
            "assetCode": asset_code,
            "assetScale": asset_scale,
        }
        self.calls = 0

    async def fetch(self, transport):
        self.calls += 1
        return self.details


class FakeLandmarkQuery:
    """Responses keyed by landmark; an exception instance is raised instead."""

    def __init__(self, responses=None, default=None):
        self.responses = dict(responses or {})
        self.default = default
        self.calls = []

    async def query(self, landmark):
        self.calls.append(landmark)
        response = self.responses.get(landmark, self.default)
        if isinstance(response, BaseException):
            raise response
        return response


class FakeQuoter:
    def __init__(self, destination_amount="800"):
        self.destination_amount = destination_amount
        self.calls = []

    async def quote_source_amount(self, transport, params):
        self.calls.append(dict(params))
        if isinstance(self.destination_amount, BaseException):
            raise self.destination_amount
        return {"destinationAmount": self.destination_amount}


def ledger_response(asset_code="USD", asset_scale=9, **routing):
    return {"ledgerInfo": {"assetCode": asset_code, "assetScale": asset_scale}, **routing}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "ILP_PRICE_LANDMARKS",
        "ILP_PRICE_LANDMARKS_FILE",
        "ILP_PRICE_PROBE_AMOUNT",
        "ILP_PRICE_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def ildcp():
    return FakeIldcp()


@pytest.fixture
def landmark_query():
    return FakeLandmarkQuery(default=ledger_response())


@pytest.fixture
def quoter():
    return FakeQuoter()
