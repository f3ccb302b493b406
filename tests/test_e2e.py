import asyncio
import csv

import httpx
import pytest

from pulseboard.ingest import Domain
from pulseboard.jobs import export as export_job
from pulseboard.jobs.export import run_export
from pulseboard.jobs.refresh import RefreshScheduler
from pulseboard.jobs.session import DashboardSession
from pulseboard.logic.ranking import PerformanceTier

LATEST = {"id": "ov-9", "revenue": 50000, "users": 1250, "conversions": 320, "growth": 15.2, "date": "2024-03-14T00:00:00Z"}
CAMPAIGNS = [
    {"id": "c1", "campaign": "Summer Sale 2024", "conversions": 150, "date": "2024-01-01T00:00:00Z"},
    {"id": "c2", "campaign": "Black Friday Special", "conversions": 280, "date": "2024-01-02T00:00:00Z"},
    {"id": "c3", "campaign": "Valentine Special", "conversions": 85, "date": "2024-01-07T00:00:00Z"},
]
REVENUE = [
    {"id": "r1", "date": "2024-01-01T00:00:00Z", "revenue": 45000},
    {"id": "r2", "date": "2024-01-02T00:00:00Z", "revenue": 52000},
    {"id": "r3", "date": "2024-01-03T00:00:00Z", "revenue": 48000},
]


def mock_backend(router):
    router.get("/overview/latest").mock(return_value=httpx.Response(200, json=LATEST))
    router.get("/overview").mock(return_value=httpx.Response(200, json=[LATEST]))
    router.get("/campaigns").mock(return_value=httpx.Response(200, json=CAMPAIGNS))
    router.get("/revenue").mock(return_value=httpx.Response(200, json=REVENUE))
    router.get("/health").mock(return_value=httpx.Response(200, json={"status": "healthy"}))


def backend_down(router):
    for path in ("/overview/latest", "/overview", "/campaigns", "/revenue", "/health"):
        router.get(path).mock(side_effect=httpx.ConnectError)


@pytest.mark.asyncio
async def test_session_builds_view_from_backend(router, client, resolver):
    mock_backend(router)
    router.post("/campaigns").mock(return_value=httpx.Response(201, json={"message": "Campaign created successfully", "id": "c4"}))
    session = DashboardSession(client, resolver)
    try:
        view = await session.open()
        assert view.latest.users == 1250
        assert view.revenue_growth == pytest.approx(6.6667, rel=1e-3)
        assert view.top_campaign.campaign == "Black Friday Special"
        assert [row.tier for row in view.campaign_rows] == [
            PerformanceTier.GOOD,
            PerformanceTier.EXCELLENT,
            PerformanceTier.AVERAGE,
        ]
        assert not session.resolver.status().using_mock_data

        await session.resolver.create_campaign(campaign="Spring Launch", conversions=40)
        assert len(session.view.campaign_rows) == 4
        assert session.view.campaign_rows[-1].tier is PerformanceTier.POOR
    finally:
        await session.close()
    assert not session.scheduler.running


@pytest.mark.asyncio
async def test_session_survives_backend_outage(router, client, resolver):
    backend_down(router)
    session = DashboardSession(client, resolver)
    try:
        view = await session.open()
        status = session.resolver.status()
        assert status.using_mock_data
        assert status.overview and status.campaigns and status.revenue and status.health
        assert view.latest is not None
        assert len(view.campaign_rows) == 5
        assert len(view.revenue_rows) == 30
        assert view.revenue_rows[0].growth is None
    finally:
        await session.close()


@pytest.mark.asyncio
async def test_scheduler_refreshes_on_interval(router, resolver):
    route = router.get("/campaigns").mock(return_value=httpx.Response(200, json=CAMPAIGNS))
    scheduler = RefreshScheduler(resolver, intervals={domain: 0.01 for domain in Domain})
    scheduler.start([Domain.CAMPAIGNS])
    assert scheduler.running
    await asyncio.sleep(0.1)
    await scheduler.stop()
    assert not scheduler.running
    assert route.call_count >= 2
    assert len(resolver.current(Domain.CAMPAIGNS)) == 3


@pytest.mark.asyncio
async def test_scheduler_skips_released_domain(router, resolver):
    route = router.get("/revenue").mock(return_value=httpx.Response(200, json=REVENUE))
    resolver.release(Domain.REVENUE)
    scheduler = RefreshScheduler(resolver, intervals={domain: 0.01 for domain in Domain})
    scheduler.start([Domain.REVENUE])
    await asyncio.sleep(0.05)
    await scheduler.stop()
    assert route.call_count == 0


@pytest.mark.asyncio
async def test_run_export_writes_csv(router, client, tmp_path):
    mock_backend(router)
    path = await run_export("campaigns", "csv", client=client, output_dir=tmp_path)
    with path.open(newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert [row["Campaign Name"] for row in rows] == ["Summer Sale 2024", "Black Friday Special", "Valentine Special"]
    assert rows[0]["Date"] == "01/01/2024"


@pytest.mark.asyncio
async def test_run_export_falls_back_to_demo_data(router, client, tmp_path, monkeypatch):
    monkeypatch.setattr("pulseboard.utils.retry.RETRY_BASE_DELAY", 0)
    backend_down(router)
    path = await run_export("revenue", "pdf", client=client, output_dir=tmp_path)
    assert path.name == "revenue-export.pdf"
    assert path.read_bytes().startswith(b"%PDF")


@pytest.mark.asyncio
async def test_run_export_unknown_preset(tmp_path):
    with pytest.raises(ValueError):
        await run_export("users", client=object(), output_dir=tmp_path)

class FlakyResolver:
    """Resolver stand-in whose first refresh raises."""

    def __init__(self, resolver):
        self.cache = resolver.cache
        self.calls = 0

    def is_released(self, domain):
        return False

    async def refresh(self, domain):
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("subscriber blew up")
        return []


@pytest.mark.asyncio
async def test_scheduler_keeps_running_after_refresh_error(resolver, caplog):
    flaky = FlakyResolver(resolver)
    scheduler = RefreshScheduler(flaky, intervals={domain: 0.01 for domain in Domain})
    scheduler.start([Domain.CAMPAIGNS])
    await asyncio.sleep(0.1)
    assert scheduler.running
    await scheduler.stop()
    assert flaky.calls >= 2
    assert "Refresh of campaigns failed" in caplog.text


@pytest.mark.asyncio
async def test_scheduler_waits_when_data_is_fresh(router, resolver):
    route = router.get("/campaigns").mock(return_value=httpx.Response(200, json=CAMPAIGNS))
    await resolver.resolve(Domain.CAMPAIGNS)
    scheduler = RefreshScheduler(resolver, intervals={domain: 10.0 for domain in Domain})
    scheduler.start([Domain.CAMPAIGNS])
    await asyncio.sleep(0.05)
    await scheduler.stop()
    assert route.call_count == 1


def test_export_cli_configures_logging(monkeypatch, tmp_path):
    calls = {}

    async def fake_export(name, fmt, *, output_dir=None):
        calls["args"] = (name, fmt, output_dir)
        return tmp_path / f"{name}-export.{fmt}"

    monkeypatch.setattr("pulseboard.jobs.export.run_export", fake_export)
    monkeypatch.setattr("logging.basicConfig", lambda **kwargs: calls.setdefault("logging", kwargs))
    monkeypatch.setattr("sys.argv", ["pulseboard-export", "revenue", "--format", "pdf", "--output-dir", str(tmp_path)])
    export_job.main()
    assert calls["args"] == ("revenue", "pdf", tmp_path)
    assert "level" in calls["logging"]
