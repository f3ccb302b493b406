import random

import pendulum
import pytest
import respx

from pulseboard.ingest.client import DashboardClient
from pulseboard.ingest.mock import MockDataGenerator
from pulseboard.ingest.models import CampaignConversion, OverviewMetrics, RevenueDataPoint
from pulseboard.ingest.resolver import DataSourceResolver

BASE_URL = "http://dashboard.test/api/v1"
FIXED_NOW = pendulum.datetime(2024, 3, 15, 12, 0, tz="UTC")


@pytest.fixture()
def fixed_now():
    return FIXED_NOW


@pytest.fixture()
def revenue_points():
    return [
        RevenueDataPoint(id="r1", date=pendulum.datetime(2024, 1, 1), revenue=45000.0),
        RevenueDataPoint(id="r2", date=pendulum.datetime(2024, 1, 2), revenue=52000.0),
        RevenueDataPoint(id="r3", date=pendulum.datetime(2024, 1, 3), revenue=48000.0),
    ]


@pytest.fixture()
def campaigns():
    rows = [
        ("Summer Sale 2024", 150),
        ("Black Friday Special", 280),
        ("New Year Launch", 120),
        ("Spring Collection", 200),
        ("Holiday Promotion", 175),
        ("Back to School", 95),
        ("Valentine Special", 85),
        ("Easter Campaign", 110),
    ]
    return [
        CampaignConversion(id=str(idx), campaign=name, conversions=conv, date=pendulum.datetime(2024, 1, idx))
        for idx, (name, conv) in enumerate(rows, start=1)
    ]


@pytest.fixture()
def latest():
    return OverviewMetrics(
        id="latest",
        revenue=50000.0,
        users=1250,
        conversions=320,
        growth=15.2,
        date=FIXED_NOW,
    )


@pytest.fixture()
def generator():
    return MockDataGenerator(rng=random.Random(7), clock=lambda: FIXED_NOW)


@pytest.fixture()
def router():
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as mock_router:
        yield mock_router


@pytest.fixture()
def client(router):
    return DashboardClient(BASE_URL)


@pytest.fixture()
def resolver(client, generator):
    return DataSourceResolver(client, generator=generator, retry_delay=0)

