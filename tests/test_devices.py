"""
Tests for device routes
"""

from fastapi.testclient import TestClient

from app.catalog import ECHO_SHOW_DEVICES, in_catalog_order
from app.main import app

client = TestClient(app)


def test_list_devices():
    """Test the catalog endpoint returns every device in order."""
    response = client.get("/devices")
    assert response.status_code == 200
    data = response.json()
    assert [d["id"] for d in data] == [d.id for d in ECHO_SHOW_DEVICES]
    echo_show_8 = data[1]
    assert echo_show_8["name"] == "Echo Show 8"
    assert echo_show_8["screen_size"] == '8"'
    assert echo_show_8["width"] == 1280
    assert echo_show_8["height"] == 800
    assert echo_show_8["year"] == "2023"


def test_device_reference():
    """Test reference rows carry the computed aspect ratio."""
    response = client.get("/devices/reference")
    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 6
    assert rows[0]["aspect_ratio"] == "2.00:1"
    assert rows[1]["aspect_ratio"] == "1.60:1"
    assert rows[4]["aspect_ratio"] == "1.78:1"
    assert rows[4]["resolution"] == "1920×1080"


def test_get_unknown_device():
    response = client.get("/devices/echo-dot")
    assert response.status_code == 404


def test_catalog_ids_are_unique():
    ids = [device.id for device in ECHO_SHOW_DEVICES]
    assert len(ids) == len(set(ids))


def test_in_catalog_order_ignores_input_order():
    devices = in_catalog_order(["echo-show-21", "echo-show-5", "echo-show-10"])
    assert [d.id for d in devices] == ["echo-show-5", "echo-show-10", "echo-show-21"]
