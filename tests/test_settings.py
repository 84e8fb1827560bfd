import pytest
from dotenv import dotenv_values

from cellview.errors import SettingsError
from cellview.settings import Settings, SettingsStore


@pytest.fixture
def env_file(tmp_path):
    return tmp_path / ".env"


def test_defaults():
    settings = Settings()
    assert settings.enabled is True
    assert settings.repair_truncated is False
    assert settings.field_names == ["all"]
    assert ".csv" in settings.source_patterns


def test_from_env_parses_values():
    settings = Settings.from_env(
        {
            "CELLVIEW_ENABLED": "off",
            "CELLVIEW_REPAIR_TRUNCATED": "Yes",
            "CELLVIEW_FIELD_NAMES": " payload, ,meta ",
            "CELLVIEW_SOURCE_PATTERNS": "",
        }
    )
    assert settings == Settings(
        enabled=False, repair_truncated=True, field_names=["payload", "meta"], source_patterns=[]
    )


def test_from_env_rejects_bad_booleans():
    with pytest.raises(SettingsError, match="CELLVIEW_ENABLED"):
        Settings.from_env({"CELLVIEW_ENABLED": "maybe"})


def test_load_without_file_uses_defaults(env_file):
    assert SettingsStore(env_file).load() == Settings()


def test_load_from_file_and_environment(env_file, monkeypatch):
    env_file.write_text("CELLVIEW_FIELD_NAMES=payload,meta\nCELLVIEW_REPAIR_TRUNCATED=true\n")
    monkeypatch.setenv("CELLVIEW_REPAIR_TRUNCATED", "false")

    settings = SettingsStore(env_file).load()
    assert settings.field_names == ["payload", "meta"]
    assert settings.repair_truncated is False


def test_update_persists_and_notifies(env_file):
    store = SettingsStore(env_file)
    store.load()
    events = []
    store.subscribe(lambda settings, changed: events.append((settings, changed)))

    changed = store.update(repair_truncated=True, enabled=True)

    assert changed == frozenset({"repair_truncated"})
    assert events == [(store.settings, frozenset({"repair_truncated"}))]
    assert dotenv_values(env_file)["CELLVIEW_REPAIR_TRUNCATED"] == "true"
    assert SettingsStore(env_file).load().repair_truncated is True


def test_update_without_changes_is_silent(env_file):
    store = SettingsStore(env_file)
    events = []
    store.subscribe(lambda settings, changed: events.append(changed))

    assert store.update(enabled=True) == frozenset()
    assert events == []
    assert not env_file.exists()


def test_unsubscribe(env_file):
    store = SettingsStore(env_file)
    events = []

    def listener(settings, changed):
        events.append(changed)

    store.subscribe(listener)
    store.unsubscribe(listener)
    store.update(enabled=False)
    assert events == []


def test_add_and_remove_items(env_file):
    store = SettingsStore(env_file)
    assert store.add_item("field_names", "  payload ") == frozenset({"field_names"})
    assert store.settings.field_names == ["all", "payload"]

    # Blank and duplicate values are ignored
    assert store.add_item("field_names", "   ") == frozenset()
    assert store.add_item("field_names", "payload") == frozenset()

    store.remove_item("field_names", 0)
    assert store.settings.field_names == ["payload"]
    assert SettingsStore(env_file).load().field_names == ["payload"]


def test_remove_missing_item(env_file):
    with pytest.raises(SettingsError):
        SettingsStore(env_file).remove_item("source_patterns", 10)


def test_list_operations_need_list_settings(env_file):
    with pytest.raises(SettingsError):
        SettingsStore(env_file).add_item("enabled", "x")


@pytest.mark.parametrize(
    "changes",
    [
        {"enabled": "yes"},
        {"field_names": "payload"},
        {"field_names": ["a,b"]},
        {"colour": "blue"},
    ],
)
def test_invalid_updates_are_rejected(env_file, changes):
    store = SettingsStore(env_file)
    with pytest.raises(SettingsError):
        store.update(**changes)
    assert store.settings == Settings()


def test_override_is_not_persisted(env_file):
    store = SettingsStore(env_file)
    events = []
    store.subscribe(lambda settings, changed: events.append(changed))

    store.override(repair_truncated=True, field_names=("payload",))

    assert store.settings.repair_truncated is True
    assert store.settings.field_names == ["payload"]
    assert events == []
    assert not env_file.exists()


def test_update_after_override_writes_only_the_changed_setting(env_file):
    store = SettingsStore(env_file)
    store.load()
    store.override(repair_truncated=True, field_names=["payload"])

    store.update(enabled=False)

    values = dotenv_values(env_file)
    assert values == {"CELLVIEW_ENABLED": "false"}
    assert store.settings.repair_truncated is True
    assert SettingsStore(env_file).load() == Settings(enabled=False)


def test_save_writes_every_setting_by_default(env_file):
    store = SettingsStore(env_file)
    store.save()
    assert dotenv_values(env_file) == Settings().to_env()
