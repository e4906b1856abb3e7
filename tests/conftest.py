import os
import sys

import structlog

from nanowallet.conf import UNITTESTS_SETTINGS_FILEPATH
from nanowallet.conf.get_settings import SETTINGS_ENV_VAR

os.environ[SETTINGS_ENV_VAR] = os.environ.get('NANOWALLET_TEST_CONFIG_YAML', UNITTESTS_SETTINGS_FILEPATH)

# Keep stdout for the commands under test: route test-time logs to stderr.
structlog.configure(logger_factory=structlog.PrintLoggerFactory(sys.stderr))
