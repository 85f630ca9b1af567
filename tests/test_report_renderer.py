"""Unit tests for integration.report_renderer module."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from core.records import BoilerData, BoilerExtDetailData, LoadStatusData, from_payload
from integration.report_renderer import (
    render_status_html,
    render_status_text,
    render_weekly_summary_html,
)
from storage.cycle_log import WeeklySummary


@pytest.fixture
def boiler(boiler_payload):
    return from_payload(BoilerData, boiler_payload)


@pytest.fixture
def detail(ext_detail_payload):
    return from_payload(BoilerExtDetailData, ext_detail_payload)


@pytest.fixture
def loads(load_payloads):
    return [from_payload(LoadStatusData, p) for p in load_payloads.values()]


class TestStatusText:
    def test_status_block(self, boiler, detail):
        text = render_status_text(boiler, detail, [])
        assert "Boiler Model:  SL 20-115 G3" in text
        assert "Boiler Status: Heating" in text
        assert "Fault:         Fan Pressure" in text
        assert "Supply Temp:   158F" in text
        assert "Return Temp:   140F" in text
        assert "DWH Tank Temp: 131F" in text
        assert "Servicing:     1" in text
        assert "Circulating:   2" in text
        assert "Calling:       3" in text

    def test_load_blocks_numbered_from_one(self, boiler, detail, loads):
        text = render_status_text(boiler, detail, loads)
        assert "Load Number: 1\nLoad Type: Reset Heating" in text
        assert "Load Number: 3\nLoad Type: DHW" in text
        assert "Load Cycles: 300" in text


class TestStatusHtml:
    def test_wrapped_in_body(self, boiler, detail, loads):
        body = render_status_html(boiler, detail, loads)
        assert body.startswith("<body>")
        assert body.endswith("</body>")
        assert "<h2>Load 1 Status</h2>" in body
        assert "<h2>Load 3 Status</h2>" in body

    def test_values_escaped(self, detail):
        boiler = BoilerData(model="<script>")
        body = render_status_html(boiler, detail, [])
        assert "&lt;script&gt;" in body
        assert "<script>" not in body


class TestWeeklySummaryHtml:
    def test_days_and_table(self):
        summary = WeeklySummary(
            days=[["2019-01-05", "120", "40", "0", "0", "0"]],
            current=[120, 40, 0, 0, 0],
            last=[100, 50, 0, 0, 0],
        )
        body = render_weekly_summary_html(summary)
        assert "<h3>2019-01-05</h3>" in body
        assert "Total Cycles: 120<br/>" in body
        assert "<tr><td>This Week</td><td>120</td><td>40</td>" in body
        assert "<tr><td>Delta</td><td>20</td><td>-10</td>" in body

    def test_empty_summary(self):
        body = render_weekly_summary_html(WeeklySummary())
        assert "<h3>" not in body
        assert "<tr><td>Last Week</td><td>0</td>" in body
