from core.charts import breakdown_bar_chart, monthly_trend_chart, to_vega_spec


def _mark_type(spec):
    mark = spec["mark"]
    return mark["type"] if isinstance(mark, dict) else mark


def test_monthly_trend_chart_spec():
    chart = monthly_trend_chart(
        [{"month": "2024-01", "value": 10.0}, {"month": "2024-02", "value": 20.0}],
        [{"month": "2024-01", "value": 5.0}],
    )
    spec = to_vega_spec(chart)
    assert _mark_type(spec) == "line"
    assert spec["encoding"]["x"]["field"] == "month"
    assert spec["encoding"]["color"]["field"] == "metric"


def test_monthly_trend_chart_with_one_series():
    assert monthly_trend_chart([], [{"month": "2024-01", "value": 5.0}]) is not None


def test_monthly_trend_chart_empty():
    assert monthly_trend_chart([], []) is None


def test_breakdown_bar_chart_spec():
    spec = to_vega_spec(breakdown_bar_chart({"West": 300.0, "Unknown": 5.0}, "region", "Backlog"))
    assert _mark_type(spec) == "bar"
    assert spec["encoding"]["y"]["field"] == "region"
    assert spec["encoding"]["x"]["title"] == "Backlog"


def test_breakdown_bar_chart_empty():
    assert breakdown_bar_chart({}, "region") is None
