import io
import json
import sys

import pytest

from pagekit.core.logging import configure_logging, get_logger, interaction
from pagekit.core.settings import Settings, settings

log = get_logger("pagekit.tests.logging")


@pytest.fixture
def json_logging():
    configure_logging(Settings(debug=False, log_level="INFO"))
    yield
    configure_logging(settings)


def _last_event(stream: io.StringIO) -> dict:
    return json.loads(stream.getvalue().strip().splitlines()[-1])


def test_events_go_to_the_stderr_in_place_at_write_time(json_logging, monkeypatch) -> None:
    first = io.StringIO()
    monkeypatch.setattr(sys, "stderr", first)
    configure_logging(Settings(debug=False, log_level="INFO"))
    first.close()

    second = io.StringIO()
    monkeypatch.setattr(sys, "stderr", second)
    log.info("after_swap", n=1)

    event = _last_event(second)
    assert event["event"] == "after_swap"
    assert event["n"] == 1
    assert event["logger"] == "pagekit.tests.logging"


def test_reconfiguring_keeps_a_single_handler(json_logging, monkeypatch) -> None:
    configure_logging(Settings(debug=False, log_level="INFO"))
    configure_logging(Settings(debug=False, log_level="INFO"))

    out = io.StringIO()
    monkeypatch.setattr(sys, "stderr", out)
    log.info("once")

    assert [json.loads(line)["event"] for line in out.getvalue().splitlines()] == ["once"]


def test_interaction_binds_helper_and_locator(json_logging, monkeypatch) -> None:
    out = io.StringIO()
    monkeypatch.setattr(sys, "stderr", out)

    with interaction("click", "form >> #go"):
        log.info("inside")
    log.info("outside")

    inside, outside = [json.loads(line) for line in out.getvalue().splitlines()]
    assert inside["helper"] == "click"
    assert inside["locator"] == "form >> #go"
    assert "helper" not in outside


def test_explicit_locator_wins_over_bound_one(json_logging, monkeypatch) -> None:
    out = io.StringIO()
    monkeypatch.setattr(sys, "stderr", out)

    with interaction("click", "form >> #go"):
        log.info("retry", locator="form >> #other")

    assert _last_event(out)["locator"] == "form >> #other"
