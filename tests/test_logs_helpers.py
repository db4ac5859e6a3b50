import logging

import pytest

from eventline.logs_helpers import log_call


class Worker:
    @log_call()
    def run(self, value, scale=1):
        return value * scale

    @log_call(show_args=False)
    def fail(self):
        raise ValueError("broken")


@pytest.mark.unit
class TestLogCall:
    """
    Test the lifecycle tracing decorator.
    """

    def test_logs_entry_and_exit(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger=__name__)

        assert Worker().run(2, scale=3) == 6

        messages = [r.getMessage() for r in caplog.records]
        assert messages[0].startswith("-> Worker.run(2, scale=3)")
        assert messages[1].startswith("<- Worker.run (")

    def test_reraises_and_logs(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger=__name__)

        with pytest.raises(ValueError, match="broken"):
            Worker().fail()

        messages = [r.getMessage() for r in caplog.records]
        assert messages[0].startswith("-> Worker.fail [")
        assert messages[1] == "x Worker.fail raised ValueError: broken"

    def test_silent_when_disabled(self, caplog) -> None:
        caplog.set_level(logging.INFO, logger=__name__)

        Worker().run(1)

        assert caplog.records == []
