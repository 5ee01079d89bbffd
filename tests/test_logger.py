import logging
import os
import tempfile
import unittest

from pytaws.logger import (
    ColoredFormatter, LogContext, LoggerConfig, LogLevel, level_value, setup_logger,
    setup_logger_from_config,
)


class TestLogger(unittest.TestCase):

    def tearDown(self):
        for name in ('pytaws_test', 'pytaws'):
            logger = logging.getLogger(name)
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
            logger.setLevel(logging.NOTSET)
        logging.getLogger('pytaws.terrain').setLevel(logging.NOTSET)

    def test_level_value(self):
        self.assertEqual(level_value('trace'), 5)
        self.assertEqual(level_value(LogLevel.INFO), logging.INFO)
        self.assertEqual(level_value(logging.ERROR), logging.ERROR)
        with self.assertRaises(ValueError):
            level_value('LOUD')

    def test_trace_method(self):
        logger = setup_logger('pytaws_test', 'TRACE', console=False)
        with self.assertLogs('pytaws_test', level=LogLevel.TRACE.value) as captured:
            logger.trace("fine grained")
        self.assertIn('TRACE', captured.output[0])

    def test_file_handler(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = os.path.join(tmp, 'taws.log')
            logger = setup_logger('pytaws_test', 'INFO', log_file=log_file, console=False)
            logger.info("terrain loaded")
            logger.debug("hidden")
            for handler in logger.handlers:
                handler.flush()
            with open(log_file, encoding='utf-8') as fh:
                content = fh.read()
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
        self.assertIn('terrain loaded', content)
        self.assertNotIn('hidden', content)

    def test_colored_formatter_keeps_record(self):
        record = logging.LogRecord('x', logging.WARNING, __file__, 1, 'msg', None, None)
        text = ColoredFormatter('%(levelname)s %(message)s').format(record)
        self.assertIn('\033[33m', text)
        self.assertEqual(record.levelname, 'WARNING')

    def test_log_context(self):
        logger = setup_logger('pytaws_test', 'INFO', console=False)
        with LogContext(logger, 'DEBUG'):
            self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(logger.level, logging.INFO)

    def test_config(self):
        config = LoggerConfig()
        config.configure_from_dict({'default_level': 'WARNING',
                                    'module_levels': {'pytaws.terrain': 'DEBUG'}})
        self.assertEqual(config.get_level_for_module('pytaws.terrain.model'), 'DEBUG')
        self.assertEqual(config.get_level_for_module('pytaws.io'), 'WARNING')
        with self.assertRaises(ValueError):
            config.configure_from_dict({'verbosity': 3})

    def test_setup_from_config(self):
        root = setup_logger_from_config({'default_level': 'WARNING', 'console': True,
                                         'module_levels': {'pytaws.terrain': 'DEBUG'}})
        self.assertEqual(root.name, 'pytaws')
        self.assertEqual(root.level, logging.WARNING)
        self.assertEqual(logging.getLogger('pytaws.terrain').level, logging.DEBUG)
        self.assertEqual(root.handlers[0].level, logging.DEBUG)


if __name__ == '__main__':
    unittest.main()
