import logging

from testmock.config import init_logging


def pytest_configure(config):
    # Log everything to detect any problems with log calls
    init_logging(logging.DEBUG, logger=logging.getLogger("testmock"))
