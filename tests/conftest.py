"""Shared pytest fixtures for ibc_monitor tests."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import pytest

# Ensure project root is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.boiler_client import BoilerClient


class FakeBoiler:
    """In-memory stand-in for the boiler's ``bc2-cgi`` endpoint.

    ``responses`` maps a request number to a JSON-able payload, or to a
    dict keyed by ``load_no`` / ``object_index`` for indexed requests.
    """

    def __init__(self, responses: Dict[int, Any]):
        self.responses = responses
        self.requests: List[Dict[str, Any]] = []
        self.fail_with: Optional[Exception] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.fail_with is not None:
            raise self.fail_with
        obj = json.loads(request.url.params["json"])
        self.requests.append(obj)
        payload = self.responses.get(obj["object_request"])
        if payload is None:
            return httpx.Response(404, text="not found")
        if isinstance(payload, IndexedPayload):
            payload = payload.lookup(obj)
        return httpx.Response(200, json=payload)

    def client(self, url: str = "http://boiler.local/", **kwargs: Any) -> BoilerClient:
        kwargs.setdefault("retry_delay", 0)
        return BoilerClient(url, transport=httpx.MockTransport(self.handler), **kwargs)


class IndexedPayload:
    def __init__(self, key: str, by_index: Dict[int, Any]):
        self.key = key
        self.by_index = by_index

    def lookup(self, obj: Dict[str, Any]) -> Any:
        return self.by_index.get(obj.get(self.key, 0), {})


@pytest.fixture
def boiler_payload() -> dict:
    return {
        "status": 3,
        "warnings": 0,
        "model": "SL 20-115 G3",
        "fwversion": "3.2.1",
        "fwdate": "2019-04-01",
        "sicc_module": True,
    }


@pytest.fixture
def ext_detail_payload() -> dict:
    return {
        "BoilerID": 0,
        "Status": "Heating",
        "Warnings": "None",
        "Errors": "None",
        "MBH": 60,
        "SupplyT": 280,
        "ReturnT": 240,
        "TargetT": 300,
        "StackT": 200,
        "AirT": 80,
        "IndoorT": 84,
        "OutdoorT": -20,
        "SecondaryT": 0,
        "TankT": 220,
        "InletPressure": 12.5,
        "OutletPressure": 13.25,
        "DeltaPressure": 0.75,
        "Servicing": 0x0421,
        "Cycles": 1234,
        "MajorError": 0,
        "MinorError": 0x0200,
        "SystemError": 0,
        "WarnFlags": 0,
        "Pumps": 3,
        "OpStatus": 1,
    }


@pytest.fixture
def standard_payload() -> dict:
    return {"Load1Type": 2, "Load2Type": 0, "Load3Type": 1, "Load4Type": 0}


@pytest.fixture
def load_payloads() -> Dict[int, dict]:
    return {
        1: {"Load": 0, "Type": 2, "HeatOut": 40, "Cycles": 700},
        3: {"Load": 2, "Type": 1, "HeatOut": 20, "Cycles": 300},
    }


@pytest.fixture
def fake_boiler(boiler_payload, ext_detail_payload, standard_payload, load_payloads) -> FakeBoiler:
    return FakeBoiler({
        11: boiler_payload,
        19: ext_detail_payload,
        13: standard_payload,
        32: IndexedPayload("load_no", load_payloads),
        6: {"LogEntries": 3, "Cycles": 1234},
        7: IndexedPayload("object_index", {
            0: {"Date": "01/02/19", "Time": "10:00", "MinErr": 0x1000},
            1: {"Date": "01/03/19", "Time": "11:00", "SysErr": 0x04},
            2: {"Date": "01/04/19", "Time": "12:00", "MajErr": 0x20},
        }),
    })


@pytest.fixture
def monitor_cfg(tmp_path) -> dict:
    return {
        "daily_log_file": str(tmp_path / "daily.csv"),
        "check_interval_min": 5,
        "ignore_warnings": False,
        "email_on_start": False,
        "mute_minutes": 60,
        "email": {
            "from": "boiler@example.com",
            "to": ["owner@example.com"],
            "server": "smtp.example.com",
            "port": 587,
        },
    }
