from floortrack.core.config import SimpleSettings
from floortrack.core.logging import SERVICE_NAME, add_service_name, drop_unset_context


def test_unset_request_context_is_dropped():
    event = drop_unset_context(None, "info", {"event": "Request handled", "request_id": "r-1", "uid": None})

    assert event == {"event": "Request handled", "request_id": "r-1"}


def test_service_name_is_added_once():
    assert add_service_name(None, "info", {"event": "x"})["service"] == SERVICE_NAME
    assert add_service_name(None, "info", {"event": "x", "service": "other"})["service"] == "other"


def test_allowed_hosts_read_from_environment(monkeypatch):
    monkeypatch.setenv("ALLOWED_HOSTS", "api.example.com, ,admin.example.com")

    assert SimpleSettings().ALLOWED_HOSTS == ["api.example.com", "admin.example.com"]


def test_allowed_hosts_default_to_any(monkeypatch):
    monkeypatch.delenv("ALLOWED_HOSTS", raising=False)

    assert SimpleSettings().ALLOWED_HOSTS == ["*"]
