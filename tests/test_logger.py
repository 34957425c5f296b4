import io
import logging
import unittest

from gridfill.utils.logger import PACKAGE_LOGGER, configure_logging, get_logger


class LoggerTests(unittest.TestCase):
    def setUp(self) -> None:
        package = logging.getLogger(PACKAGE_LOGGER)
        saved = (list(package.handlers), package.level, package.propagate)

        def restore() -> None:
            package.handlers[:] = saved[0]
            package.setLevel(saved[1])
            package.propagate = saved[2]

        self.addCleanup(restore)

    def test_loggers_live_under_package_namespace(self) -> None:
        self.assertEqual(get_logger().name, "gridfill")
        self.assertEqual(get_logger("gridfill.engine.search").name, "gridfill.engine.search")
        self.assertEqual(get_logger("scripts").name, "gridfill.scripts")

    def test_importing_does_not_touch_root_logger(self) -> None:
        root_handlers = list(logging.getLogger().handlers)
        get_logger("gridfill.data.dictionary")
        self.assertEqual(logging.getLogger().handlers, root_handlers)

    def test_configure_logging_replaces_previous_handler(self) -> None:
        first, second = io.StringIO(), io.StringIO()
        configure_logging(logging.INFO, stream=first)
        configure_logging(logging.INFO, stream=second)
        get_logger("gridfill.engine.filler").info("Fill attempt %s/%s", 1, 1)

        self.assertEqual(first.getvalue(), "")
        self.assertIn("| INFO    | gridfill.engine.filler | Fill attempt 1/1", second.getvalue())
        named = [h for h in logging.getLogger(PACKAGE_LOGGER).handlers if h.get_name() == "gridfill-cli"]
        self.assertEqual(len(named), 1)

    def test_level_filters_messages(self) -> None:
        stream = io.StringIO()
        configure_logging(logging.WARNING, stream=stream)
        get_logger("gridfill.engine.search").info("hidden")
        get_logger("gridfill.engine.search").warning("shown")
        self.assertNotIn("hidden", stream.getvalue())
        self.assertIn("shown", stream.getvalue())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
