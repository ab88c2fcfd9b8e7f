from dataclasses import replace

import pytest

from rofi_systemd import actions
from rofi_systemd.errors import StaleSelectionError
from rofi_systemd.menu import format_rows
from rofi_systemd.models import UnitRecord


RECORDS = [
    UnitRecord("b.service", "failed", "failed", "user"),
    UnitRecord("a.service", "active", "running", "user"),
    UnitRecord("c.service", "inactive", "disabled", "system"),
]
ROWS = format_rows(RECORDS, 42)


@pytest.mark.parametrize("default", ["list_actions", "stop", "journal"])
def test_code_15_is_start(default):
    assert actions.action_for_code(15, default) == "start"


@pytest.mark.parametrize("default", ["list_actions", "restart"])
def test_code_0_is_default(default):
    assert actions.action_for_code(0, default) == default


def test_code_1_cancels():
    assert actions.action_for_code(1, "start") is None


@pytest.mark.parametrize("code", [2, 9, 20, 28])
def test_other_codes_fall_back_to_default(code):
    assert actions.action_for_code(code, "status") == "status"


def test_custom_codes_cover_table():
    assert actions.action_for_code(10, "x") == "enable"
    assert actions.action_for_code(19, "x") == "reset-failed"


def test_record_at():
    assert actions.record_at(ROWS, 2, 0) == RECORDS[2]


@pytest.mark.parametrize("index", [None, 3, -1])
def test_record_at_stale(index):
    with pytest.raises(StaleSelectionError) as exc:
        actions.record_at(ROWS, index, 12)
    assert exc.value.code == 12
    assert str(index) in str(exc.value)


def test_select_direct_binding(fake_run, config):
    fake_run.add(["rofi"], stdout="1\n", returncode=15)

    assert actions.select(config, lambda: ROWS, "all") == (RECORDS[1], "start")
    assert len(fake_run.calls) == 1


def test_select_cancel(fake_run, config):
    fake_run.add(["rofi"], stdout="", returncode=1)
    assert actions.select(config, lambda: ROWS, "all") is None


def test_select_plain_confirm_uses_default(fake_run, config):
    fake_run.add(["rofi"], stdout="0\n", returncode=0)
    cfg = replace(config, default_action="restart")

    assert actions.select(cfg, lambda: ROWS, "user") == (RECORDS[0], "restart")


def test_select_action_menu(fake_run, config):
    fake_run.add(["rofi"], stdout="2\n", returncode=0)
    fake_run.add(["rofi"], stdout=f"{actions.ACTIONS.index('status')}\n", returncode=0)

    assert actions.select(config, lambda: ROWS, "all") == (RECORDS[2], "status")
    assert "-markup-rows" not in fake_run.calls[1][0]


def test_select_back_returns_to_unit_list(fake_run, config):
    loads = []

    def load_rows():
        loads.append(1)
        return ROWS

    fake_run.add(["rofi"], stdout="0\n", returncode=0)
    fake_run.add(["rofi"], stdout=f"{len(actions.ACTIONS)}\n", returncode=0)  # "back"
    fake_run.add(["rofi"], stdout="0\n", returncode=0)
    fake_run.add(["rofi"], stdout="", returncode=1)  # dismissed
    fake_run.add(["rofi"], stdout="0\n", returncode=14)

    assert actions.select(config, load_rows, "all") == (RECORDS[0], "stop")
    assert len(loads) == 3
    assert len(fake_run.calls) == 5


def test_select_stale_index(fake_run, config):
    fake_run.add(["rofi"], stdout="7\n", returncode=0)
    with pytest.raises(StaleSelectionError):
        actions.select(config, lambda: ROWS, "all")


def test_select_empty_listing(fake_run, config):
    fake_run.add(["rofi"], stdout="0\n", returncode=0)
    assert actions.select(config, lambda: [], "user") is None
