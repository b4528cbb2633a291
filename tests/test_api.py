"""HTTP surface tests using FastAPI's TestClient."""
import pytest
from fastapi.testclient import TestClient

from budgetfx.core.config import Settings
from budgetfx.core.errors import RateProviderError
from budgetfx.main import create_app



@pytest.fixture
def client(settings, provider, clock):
    app = create_app(settings_override=settings, provider=provider, clock=clock)
    with TestClient(app) as c:
        yield c


def _post_expense(client, **overrides):
    body = {
        "title": "Movie",
        "amount": 20,
        "currency": "GBP",
        "category": "Entertainment",
        "date": "2024-01-05",
    }
    body.update(overrides)
    resp = client.post("/expenses/", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _post_budget(client, **overrides):
    body = {"name": "Fun", "category": "entertainment", "amount": 150, "month": "2024-01"}
    body.update(overrides)
    resp = client.post("/budgets/", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_root(client):
    assert client.get("/").json()["version"] == "0.1.0"


def test_startup_warms_rate_cache(client, provider):
    assert provider.calls == 1


def test_rates_endpoint(client):
    body = client.get("/currency/rates").json()
    assert len(body["rates"]) == 12
    assert body["source"] == "live"
    assert body["last_updated"].startswith("2024-01-15T12:00:00")
    gbp = next(r for r in body["rates"] if r["to_currency"] == "GBP")
    assert gbp == {
        "from_currency": "USD",
        "to_currency": "GBP",
        "rate": 0.8,
        "fetched_at": gbp["fetched_at"],
    }


def test_convert_endpoint(client):
    resp = client.get("/currency/convert", params={"amount": 10, "from": "EUR", "to": "USD"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["converted_amount"] == 11.11
    assert body["from_currency"] == "EUR"
    assert body["to_currency"] == "USD"
    assert body["rate"] == pytest.approx(1 / 0.9)


def test_convert_unknown_currency(client):
    resp = client.get("/currency/convert", params={"amount": 10, "from": "EUR", "to": "ZZZ"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_currency"


def test_convert_missing_params(client):
    resp = client.get("/currency/convert", params={"amount": 10})
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


def test_refresh_during_outage_falls_back(client, provider):
    provider.error = RateProviderError("HTTP 502")
    resp = client.post("/currency/refresh")
    assert resp.status_code == 200
    assert resp.json()["source"] == "fallback"
    gbp = client.get("/currency/convert", params={"amount": 0.79, "from": "GBP", "to": "USD"})
    assert gbp.json()["converted_amount"] == 1.0


def test_budget_lifecycle(client):
    _post_expense(client)
    _post_expense(client, amount=10, currency="USD", category="entertainment", date="2024-01-10")
    budget = _post_budget(client)
    assert budget["spent"] == 35.0
    assert budget["spent_computed_at"] is not None

    fetched = client.get(f"/budgets/{budget['id']}").json()
    assert fetched == budget

    updated = client.put(f"/budgets/{budget['id']}", json={"amount": 40})
    assert updated.status_code == 200
    assert updated.json()["spent"] == 35.0

    warnings = client.get("/budgets/warnings/2024-01").json()
    assert len(warnings) == 1
    assert warnings[0]["warning_level"] == "warning"
    assert warnings[0]["percentage"] == 87.5

    assert client.delete(f"/budgets/{budget['id']}").status_code == 204
    assert client.get(f"/budgets/{budget['id']}").status_code == 404


def test_expense_changes_update_budget_spent(client):
    budget = _post_budget(client, amount=100)
    expense = _post_expense(client, amount=40, currency="USD")
    assert client.get(f"/budgets/{budget['id']}").json()["spent"] == 40.0

    client.patch(f"/expenses/{expense['id']}", json={"amount": 60})
    assert client.get(f"/budgets/{budget['id']}").json()["spent"] == 60.0

    client.delete(f"/expenses/{expense['id']}")
    assert client.get(f"/budgets/{budget['id']}").json()["spent"] == 0.0


def test_budget_rejects_client_spent(client):
    budget = _post_budget(client)
    resp = client.put(f"/budgets/{budget['id']}", json={"spent": 1})
    assert resp.status_code == 422


@pytest.mark.parametrize("path", ["/budgets/warnings/2024-1", "/budgets/summary/Jan-2024"])
def test_bad_month_path(client, path):
    resp = client.get(path)
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_month_format"


def test_bad_month_on_create(client):
    resp = client.post(
        "/budgets/", json={"name": "x", "category": "Food", "amount": 10, "month": "2024/01"}
    )
    assert resp.status_code == 422


def test_summary_and_categories(client):
    _post_expense(client)
    _post_budget(client)
    _post_budget(client, name="Food", category="Food", amount=50, month="2024-02")

    summary = client.get("/budgets/summary/2024-01").json()
    assert summary["total_budgets"] == 1
    assert summary["total_spent"] == 25.0
    assert summary["category_breakdown"][0]["category"] == "entertainment"

    assert client.get("/budgets/summary").json()["total_budgets"] == 2
    assert client.get("/budgets/categories").json() == ["Entertainment"]
    assert len(client.get("/budgets/", params={"month": "2024-02"}).json()) == 1


def test_refresh_budgets(client):
    _post_budget(client)
    resp = client.post("/budgets/refresh")
    assert resp.json() == {"status": "ok", "refreshed": 1}


def test_unknown_expense_is_404(client):
    resp = client.get("/expenses/nope")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


def test_unknown_route(client):
    resp = client.get("/nowhere")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


def test_demo_seed(provider, clock):
    settings = Settings(_env_file=None, exchange_rate_provider="static", seed_demo_data=True)
    with TestClient(create_app(settings_override=settings, provider=provider, clock=clock)) as c:
        assert len(c.get("/expenses/").json()) == 3
        budgets = c.get("/budgets/").json()
        assert len(budgets) == 3
        assert all(b["spent_computed_at"] is not None for b in budgets)


def test_expense_patch_rejects_null_required_field(client):
    expense = _post_expense(client)
    resp = client.patch(f"/expenses/{expense['id']}", json={"amount": None})
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"
    assert client.get(f"/expenses/{expense['id']}").json()["amount"] == 20


def test_expense_patch_allows_clearing_description(client):
    expense = _post_expense(client, description="popcorn")
    resp = client.patch(f"/expenses/{expense['id']}", json={"description": None})
    assert resp.status_code == 200
    assert resp.json()["description"] is None


def test_budget_put_rejects_null_required_field(client):
    budget = _post_budget(client)
    resp = client.put(f"/budgets/{budget['id']}", json={"category": None})
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


def test_spending_summary_endpoint(client):
    _post_expense(client)
    _post_expense(client, amount=5, currency="USD", category="Food")
    body = client.get("/expenses/summary", params={"currency": "GBP"}).json()
    assert body["currency"] == "GBP"
    assert body["total_expenses"] == 2
    assert body["total_amount"] == 24.0
    assert body["category_summary"] == [
        {"category": "Entertainment", "count": 1, "total": 20.0},
        {"category": "Food", "count": 1, "total": 4.0},
    ]


def test_spending_summary_unknown_currency(client):
    resp = client.get("/expenses/summary", params={"currency": "XYZ"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_currency"


def test_recent_expenses_endpoint(client):
    _post_expense(client, title="early", date="2024-01-02")
    _post_expense(client, title="late", date="2024-01-20")
    body = client.get("/expenses/recent", params={"limit": 1}).json()
    assert [e["title"] for e in body] == ["late"]


def test_overridden_settings_are_validated(provider, clock):
    bad = Settings(_env_file=None, exchange_rate_provider="carrier-pigeon", seed_demo_data=False)
    with pytest.raises(ValueError):
        create_app(settings_override=bad, provider=provider, clock=clock)
