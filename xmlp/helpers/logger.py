#!/usr/bin/env python
# Created by "Thieu" at 11:02, 18/10/2026 ----------%
#       Email: nguyenthieu2102@gmail.com            %
#       Github: https://github.com/thieu1995        %
# --------------------------------------------------%

import logging


class Logger:
    """
    Build `logging.Logger` objects that write to the console, to a file, or nowhere.

    Parameters:
        log_to (str, None): "console", "file" or None (disabled).
        log_file (str, None): Path of the log file when `log_to="file"`.
        level (int): Logging level, default logging.INFO.
    """

    FORMAT = "%(asctime)s, %(levelname)s, %(name)s [line: %(lineno)d]: %(message)s"
    DATE_FORMAT = "%Y/%m/%d %I:%M:%S %p"

    def __init__(self, log_to="console", log_file=None, level=logging.INFO):
        self.log_to = log_to
        self.log_file = log_file
        self.level = level
        if self.log_to == "file" and self.log_file is None:
            self.log_file = "xmlp.log"

    def create_logger(self, name=__name__):
        logger = logging.getLogger(name)
        logger.propagate = False
        # Drop handlers left by a previous fit of the same estimator class
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        if self.log_to == "console":
            handler = logging.StreamHandler()
        elif self.log_to == "file":
            handler = logging.FileHandler(self.log_file)
        else:
            handler = logging.NullHandler()
        handler.setFormatter(logging.Formatter(self.FORMAT, datefmt=self.DATE_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(self.level)
        return logger
