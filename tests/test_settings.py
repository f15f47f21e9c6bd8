import pytest
from pydantic import ValidationError

from config.constants import TargetAction
from config.settings import DatabaseSettings, MonitoringSettings, Settings


def test_monitoring_defaults(monkeypatch):
    for var in ("MONITOR_TICK_INTERVAL_MINUTES", "MONITOR_PACING_DELAY", "MONITOR_RUN_ON_START"):
        monkeypatch.delenv(var, raising=False)

    monitoring = MonitoringSettings(_env_file=None)

    assert monitoring.tick_interval_minutes == 5
    assert monitoring.tick_interval_seconds == 300
    assert monitoring.pacing_delay == 1.0
    assert monitoring.run_on_start is True


def test_monitoring_from_env(monkeypatch):
    monkeypatch.setenv("MONITOR_TICK_INTERVAL_MINUTES", "1")
    monkeypatch.setenv("MONITOR_PACING_DELAY", "0")

    monitoring = MonitoringSettings(_env_file=None)

    assert monitoring.tick_interval_seconds == 60
    assert monitoring.pacing_delay == 0


def test_rejects_non_positive_interval():
    with pytest.raises(ValidationError):
        MonitoringSettings(tick_interval_minutes=0)


def test_sqlite_url(tmp_path):
    db = DatabaseSettings(type="sqlite", sqlite_path=tmp_path / "store")

    assert db.url == f"sqlite+aiosqlite:///{tmp_path / 'store.db'}"
    assert db.is_sqlite


def test_url_has_no_filesystem_side_effects(tmp_path):
    db = DatabaseSettings(type="sqlite", sqlite_path=tmp_path / "nested" / "keepalive.db")

    assert db.url.endswith("nested/keepalive.db")
    assert not (tmp_path / "nested").exists()


def test_postgres_url():
    db = DatabaseSettings(
        type="postgresql", host="db", port=5432, name="keepalive",
        user="svc", password="secret",
    )

    assert db.url == "postgresql+asyncpg://svc:secret@db:5432/keepalive"


def test_to_dict_masks_secrets():
    settings = Settings(database=DatabaseSettings(password="secret"))

    assert "secret" not in str(settings.to_dict())


@pytest.mark.parametrize("raw,expected", [
    ("add", TargetAction.ADD),
    (" STOP ", TargetAction.STOP),
    ("counter", TargetAction.COUNTER),
    (None, TargetAction.ENSURE_STARTED),
    ("bogus", TargetAction.ENSURE_STARTED),
])
def test_action_parse(raw, expected):
    assert TargetAction.parse(raw) is expected
