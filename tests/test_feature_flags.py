from feature_flags import (
    get_editor_feature,
    hints_default,
    is_request_fencing_enabled,
    reload as reload_features,
)


def setup_function():
    reload_features()


def test_hints_on_by_default():
    assert hints_default({}, profile="dev") is True


def test_prod_profile_hides_hints():
    assert hints_default({}, profile="prod") is False


def test_hints_can_be_overridden_via_env():
    assert hints_default({"CLI_EDITOR_HINTS": "0"}, profile="dev") is False
    assert hints_default({"EDITOR_HINTS": "yes"}, profile="prod") is True
    assert hints_default({"CLI_EDITOR_HINTS": "on", "EDITOR_HINTS": "off"}, profile="dev") is True


def test_unparseable_override_is_ignored():
    assert hints_default({"CLI_EDITOR_HINTS": "maybe"}, profile="prod") is False


def test_request_fencing_disabled_by_default():
    assert is_request_fencing_enabled({}, profile="dev") is False
    assert is_request_fencing_enabled({}, profile="strict") is True
    assert is_request_fencing_enabled({"EDITOR_REQUEST_FENCING": "1"}, profile="dev") is True


def test_editor_feature_merges_profile_overrides():
    dev = get_editor_feature("dev")
    prod = get_editor_feature("prod")
    assert dev["hints"] is True
    assert prod["hints"] is False
    assert prod["request_fencing"] is False
