"""
Tests for the chartlens CLI.
"""

import json
from datetime import date
from unittest.mock import patch

import pytest

import cli
from config import ChartlensConfig, get_config
from domain import OHLCBar


@pytest.fixture(autouse=True)
def default_config():
    """Pin configuration to built-in defaults."""
    with patch("cli.get_config", return_value=ChartlensConfig()):
        yield
    get_config.cache_clear()


@pytest.fixture
def price_csv(tmp_path):
    lines = ["time,open,high,low,close,volume"]
    for i in range(30):
        close = 100 + (i % 7) - (i % 3)
        lines.append(f"2024-01-{i + 1:02d},{close},{close + 2},{close - 2},{close},{1000 + i}")
    path = tmp_path / "prices.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


class TestCompute:
    """chartlens compute"""

    def test_rsi_with_period(self, price_csv, capsys):
        assert cli.main(["compute", str(price_csv), "-i", "rsi", "--period", "5"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert len(payload["rsi"]) == 30 - 5
        assert payload["rsi"][0]["time"] == "2024-01-06"

    def test_stochastic_period_maps_to_k(self, price_csv, capsys):
        assert cli.main(["compute", str(price_csv), "-i", "stochastic", "--period", "5"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert len(payload["stochastic"]) == 30 - (5 + 3 - 2)
        assert set(payload["stochastic"][0]) == {"time", "slowk", "slowd"}

    def test_params_and_places(self, price_csv, capsys):
        code = cli.main([
            "compute", str(price_csv), "-i", "bollinger",
            "-p", "period=10", "-p", "std_dev=1.5", "--places", "1",
        ])
        assert code == 0

        points = json.loads(capsys.readouterr().out)["bollinger"]
        assert len(points) == 21
        assert all(round(p["middle"], 1) == p["middle"] for p in points)

    def test_output_file(self, price_csv, tmp_path, capsys):
        output = tmp_path / "out.json"
        assert cli.main(["compute", str(price_csv), "-i", "obv", "-o", str(output)]) == 0

        assert len(json.loads(output.read_text(encoding="utf-8"))["obv"]) == 30
        assert "Output written" in capsys.readouterr().err

    def test_short_series_warns(self, price_csv, capsys):
        assert cli.main(["compute", str(price_csv), "-i", "macd"]) == 0

        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"macd": []}
        assert "needs 34" in captured.err

    def test_unknown_indicator(self, price_csv, capsys):
        assert cli.main(["compute", str(price_csv), "-i", "ichimoku"]) == 1
        assert "Unsupported indicator" in capsys.readouterr().err

    def test_period_not_applicable(self, price_csv, capsys):
        assert cli.main(["compute", str(price_csv), "-i", "macd", "--period", "5"]) == 1
        assert "--param" in capsys.readouterr().err

    def test_unknown_param(self, price_csv, capsys):
        assert cli.main(["compute", str(price_csv), "-i", "rsi", "-p", "window=3"]) == 1
        assert "window" in capsys.readouterr().err

    @pytest.mark.parametrize("value", ["abc", "nan"])
    def test_bad_std_dev(self, price_csv, value, capsys):
        code = cli.main(["compute", str(price_csv), "-i", "bollinger", "-p", f"std_dev={value}"])
        assert code == 1
        assert "std_dev" in capsys.readouterr().err

    def test_non_finite_price(self, price_csv, capsys):
        price_csv.write_text(
            price_csv.read_text(encoding="utf-8").replace(",100,", ",NaN,", 1),
            encoding="utf-8",
        )
        assert cli.main(["compute", str(price_csv), "-i", "rsi"]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_missing_file(self, tmp_path, capsys):
        assert cli.main(["compute", str(tmp_path / "none.csv"), "-i", "rsi"]) == 1
        assert capsys.readouterr().err.startswith("Error:")


class TestIndicators:
    """chartlens indicators"""

    def test_lists_every_kind(self, capsys):
        assert cli.main(["indicators"]) == 0

        out = capsys.readouterr().out
        for name in ("rsi", "macd", "stochastic", "bollinger", "atr", "obv", "cci", "mfi", "adx"):
            assert name in out
        assert "33" in out


class TestChart:
    """chartlens chart (history source mocked)"""

    def test_chart_json(self, capsys):
        bars = [
            OHLCBar(f"2024-01-{i + 1:02d}", 10 + i, 11 + i, 9 + i, 10 + i, 100)
            for i in range(20)
        ]
        with patch("cli.YahooHistoryAdapter") as adapter_cls:
            adapter_cls.return_value.get_history.return_value = bars
            code = cli.main(["chart", "aapl", "-m", "US", "-r", "1y", "-i", "cci", "--ma"])

        assert code == 0
        symbol, start, market = adapter_cls.return_value.get_history.call_args.args
        assert symbol == "AAPL"
        assert start < date.today()

        payload = json.loads(capsys.readouterr().out)
        assert len(payload["data"]) == 20
        assert len(payload["indicators"]["cci"]) == 1
        assert sorted(payload["overlays"]) == ["ma20", "ma5", "ma60"]
