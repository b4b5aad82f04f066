# tests/e2e/test_live.py
import os
import json
import pytest
import requests

HOST = os.getenv("E2E_HOST")  # e.g. https://tags.example.netlify.app

skip_msg = "Set E2E_HOST to run live E2E."
pytestmark = pytest.mark.skipif(not HOST, reason=skip_msg)

def test_live_healthz():
    r = requests.get(f"{HOST}/healthz", timeout=15, verify=True)
    assert r.status_code == 200

def test_live_generate_tags():
    r = requests.post(
        f"{HOST}/generate-tags",
        headers={"Content-Type": "application/json"},
        data=json.dumps({"q": "lofi beats to study to", "mode": "youtube"}),
        timeout=30,
        verify=True,
    )
    assert r.status_code == 200, r.text
    tags = r.json()["tags"]
    assert len(tags) <= 25
    assert all(t == t.lower() and "," not in t for t in tags)

def test_live_rejects_get():
    r = requests.get(f"{HOST}/generate-tags", timeout=15, verify=True)
    assert r.status_code == 405
