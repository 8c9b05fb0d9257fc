"""Golden and property tests for the day-stepped simulation engine."""

from __future__ import annotations

import copy
from datetime import date, timedelta

import pytest

from spend_invest import Frequency, PricePoint, SpendItem, simulate_basket, simulate_item
from spend_invest.pipeline import growth_percentage


def _item(
    *,
    cost: float = 10.0,
    currency: str = "GBP",
    frequency: Frequency = Frequency.MONTHLY,
    start: date = date(2020, 1, 1),
    ticker: str = "AAA",
    item_id: str = "item-1",
) -> SpendItem:
    return SpendItem(
        id=item_id,
        name="Subscription",
        cost=cost,
        currency=currency,
        frequency=frequency,
        start_date=start,
        ticker=ticker,
    )


def _prices(*pairs):
    return [PricePoint(date=d, adj_close=p) for d, p in pairs]


def _aaa_prices():
    return _prices((date(2020, 1, 1), 10.0), (date(2020, 2, 1), 20.0))


def test_monthly_example_matches_hand_calculation():
    result = simulate_basket([_item()], {"AAA": _aaa_prices()}, "GBP")

    first, last = result.graph_data[0], result.graph_data[-1]
    assert first.date == date(2020, 1, 1)
    assert first.spent == pytest.approx(10)
    assert first.value == pytest.approx(10)
    assert last.date == date(2020, 2, 1)
    assert last.spent == pytest.approx(20)
    assert last.value == pytest.approx(30)
    assert result.total_spent == pytest.approx(20)
    assert result.investment_value == pytest.approx(30)
    assert result.growth_percentage == pytest.approx(50)
    assert result.currency == "GBP"
    assert len(result.graph_data) == 32


def test_weekend_and_gap_days_are_forward_filled():
    result = simulate_basket([_item()], {"AAA": _aaa_prices()}, "GBP")
    by_date = {point.date: point for point in result.graph_data}
    assert by_date[date(2020, 1, 15)].value == pytest.approx(10)
    assert by_date[date(2020, 1, 31)].spent == pytest.approx(10)


def test_pre_listing_cash_converts_in_one_lump():
    item = _item(cost=5.0, frequency=Frequency.DAILY)
    prices = {"AAA": _prices((date(2020, 1, 3), 10.0), (date(2020, 1, 4), 10.0))}
    result = simulate_basket([item], prices, "GBP")

    values = [(p.date, p.spent, p.value) for p in result.graph_data]
    assert values[0] == (date(2020, 1, 1), pytest.approx(5), pytest.approx(5))
    assert values[1] == (date(2020, 1, 2), pytest.approx(10), pytest.approx(10))
    assert values[2] == (date(2020, 1, 3), pytest.approx(15), pytest.approx(15))
    assert values[3] == (date(2020, 1, 4), pytest.approx(20), pytest.approx(20))


def test_pre_listing_cash_buys_at_first_price():
    item = _item(frequency=Frequency.ONE_OFF)
    prices = {"AAA": _prices((date(2020, 1, 3), 10.0), (date(2020, 1, 4), 20.0))}
    result = simulate_basket([item], prices, "GBP")
    assert result.total_spent == pytest.approx(10)
    assert result.investment_value == pytest.approx(20)
    assert result.growth_percentage == pytest.approx(100)


def test_basket_sums_across_tickers():
    items = [
        _item(),
        _item(cost=30.0, frequency=Frequency.ONE_OFF, start=date(2020, 1, 2), ticker="BBB", item_id="item-2"),
    ]
    prices = {
        "AAA": _aaa_prices(),
        "BBB": _prices((date(2020, 1, 1), 30.0), (date(2020, 1, 15), 60.0)),
    }
    result = simulate_basket(items, prices, "GBP")
    assert result.total_spent == pytest.approx(50)
    assert result.investment_value == pytest.approx(1.5 * 20 + 1 * 60)
    assert result.growth_percentage == pytest.approx(80)


@pytest.mark.parametrize("pair", ["GBPUSD", "GBPUSD=X"])
def test_foreign_cost_is_divided_by_pair_rate(pair):
    item = _item(cost=13.0, currency="USD", frequency=Frequency.ONE_OFF)
    fx = {pair: _prices((date(2020, 1, 1), 1.3))}
    result = simulate_basket([item], {"AAA": _aaa_prices()}, "GBP", fx)
    assert result.total_spent == pytest.approx(10)
    assert result.investment_value == pytest.approx(20)


def test_missing_fx_series_counts_cost_unconverted():
    item = _item(cost=13.0, currency="USD", frequency=Frequency.ONE_OFF)
    result = simulate_basket([item], {"AAA": _aaa_prices()}, "GBP")
    assert result.total_spent == pytest.approx(13)


def test_non_positive_rate_counts_cost_unconverted():
    item = _item(cost=13.0, currency="USD", frequency=Frequency.ONE_OFF)
    fx = {"GBPUSD": _prices((date(2020, 1, 1), 0.0))}
    result = simulate_basket([item], {"AAA": _aaa_prices()}, "GBP", fx)
    assert result.total_spent == pytest.approx(13)


def test_rate_before_first_fx_point_defaults_to_one():
    item = _item(cost=13.0, currency="USD", frequency=Frequency.ONE_OFF)
    fx = {"GBPUSD": _prices((date(2020, 1, 2), 1.3))}
    result = simulate_basket([item], {"AAA": _aaa_prices()}, "GBP", fx)
    assert result.total_spent == pytest.approx(13)


def test_ticker_without_prices_holds_cash():
    items = [
        _item(frequency=Frequency.ONE_OFF),
        _item(cost=7.0, frequency=Frequency.ONE_OFF, ticker="ZZZ", item_id="item-2"),
    ]
    result = simulate_basket(items, {"AAA": _aaa_prices()}, "GBP")
    assert result.total_spent == pytest.approx(17)
    assert result.investment_value == pytest.approx(20 + 7)


def test_empty_basket_returns_zero_result():
    result = simulate_basket([], {"AAA": _aaa_prices()}, "GBP")
    assert result.total_spent == 0
    assert result.investment_value == 0
    assert result.growth_percentage == 0
    assert result.graph_data == []


def test_no_price_data_returns_zero_result():
    result = simulate_basket([_item()], {"AAA": []}, "GBP")
    assert result.total_spent == 0
    assert result.graph_data == []
    assert simulate_item(_item(), [], "GBP").total_spent == 0


def test_stale_prices_drop_spend_that_would_have_fired():
    # Every series stops before the basket starts, so not even the one-off is counted
    items = [
        _item(frequency=Frequency.ONE_OFF, start=date(2021, 1, 1)),
        _item(start=date(2021, 3, 1), ticker="BBB", item_id="item-2"),
    ]
    prices = {
        "AAA": _prices((date(2020, 6, 1), 12.0)),
        "BBB": _prices((date(2020, 5, 1), 3.0)),
    }
    result = simulate_basket(items, prices, "GBP")
    assert result.total_spent == 0
    assert result.investment_value == 0
    assert result.graph_data == []


def test_prices_ending_before_start_give_empty_window():
    item = _item(start=date(2020, 3, 1))
    result = simulate_basket([item], {"AAA": _aaa_prices()}, "GBP")
    assert result.total_spent == 0
    assert result.growth_percentage == 0
    assert result.graph_data == []


def test_growth_is_zero_without_spend():
    assert growth_percentage(0.0, 0.0) == 0
    assert growth_percentage(0.0, 25.0) == 0


def test_item_mode_matches_single_item_basket():
    item = _item(cost=13.0, currency="USD", frequency=Frequency.WEEKLY)
    prices = _prices(
        (date(2020, 1, 10), 10.0),
        (date(2020, 3, 1), 14.0),
        (date(2020, 6, 30), 12.5),
    )
    fx = _prices((date(2020, 1, 1), 1.25), (date(2020, 4, 1), 1.2))
    basket = simulate_basket([item], {"AAA": prices}, "GBP", {"GBPUSD": fx})
    single = simulate_item(item, prices, "GBP", fx)
    assert single.total_spent == pytest.approx(basket.total_spent)
    assert single.investment_value == pytest.approx(basket.investment_value)
    assert single.growth_percentage == pytest.approx(basket.growth_percentage)


def test_identical_inputs_give_identical_results():
    items = [_item(frequency=Frequency.WORKDAYS), _item(ticker="BBB", item_id="item-2")]
    prices = {
        "AAA": _prices((date(2020, 1, 1), 10.0), (date(2020, 5, 1), 11.3), (date(2021, 1, 4), 9.7)),
        "BBB": _prices((date(2020, 2, 1), 3.3), (date(2020, 9, 1), 4.1)),
    }
    first = simulate_basket(copy.deepcopy(items), copy.deepcopy(prices), "GBP")
    second = simulate_basket(copy.deepcopy(items), copy.deepcopy(prices), "GBP")
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_caller_series_are_not_reordered():
    prices = _prices((date(2020, 2, 1), 20.0), (date(2020, 1, 1), 10.0))
    snapshot = list(prices)
    result = simulate_basket([_item()], {"AAA": prices}, "GBP")
    assert prices == snapshot
    assert result.investment_value == pytest.approx(30)


def test_total_spent_never_decreases():
    item = _item(frequency=Frequency.DAILY, cost=2.0)
    prices = _prices((date(2020, 1, 1), 5.0), (date(2020, 12, 31), 6.0))
    result = simulate_basket([item], {"AAA": prices}, "GBP", downsample_target=0)
    spent = [point.spent for point in result.graph_data]
    assert all(b >= a for a, b in zip(spent, spent[1:]))
    assert len(result.graph_data) == 366


def test_long_series_is_downsampled_keeping_endpoints():
    start = date(2018, 1, 1)
    end = date(2020, 12, 31)
    prices = [
        PricePoint(date=start + timedelta(days=n), adj_close=10.0 + (n % 37))
        for n in range((end - start).days + 1)
    ]
    item = _item(frequency=Frequency.DAILY, start=start)
    result = simulate_basket([item], {"AAA": prices}, "GBP", downsample_target=100)
    assert len(result.graph_data) == 100
    assert result.graph_data[0].date == start
    assert result.graph_data[-1].date == end
    dates = [point.date for point in result.graph_data]
    assert dates == sorted(dates)


def test_default_downsample_target_is_500():
    start = date(2018, 1, 1)
    prices = _prices((start, 10.0), (date(2020, 12, 31), 12.0))
    result = simulate_basket([_item(frequency=Frequency.DAILY, start=start)], {"AAA": prices}, "GBP")
    assert len(result.graph_data) == 500


def test_to_dict_uses_transport_field_names():
    payload = simulate_basket([_item()], {"AAA": _aaa_prices()}, "GBP").to_dict()
    assert set(payload) == {"totalSpent", "investmentValue", "currency", "growthPercentage", "graphData"}
    assert payload["graphData"][0] == {"date": "2020-01-01", "spent": 10.0, "value": 10.0}
