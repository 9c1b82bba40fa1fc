# tsql-pg-migrator
# Copyright (C) 2025 credativ GmbH
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import logging
import os

LOG_FORMAT = '%(asctime)s: [%(levelname)s] %(message)s'

class MigratorLogger:
    """
    Shared 'migrator' logger. The file always receives everything,
    the console only what --log-level asks for.
    """

    def __init__(self, log_file, log_level=None):
        self.log_file = os.path.abspath(log_file)
        self.logger = logging.getLogger('migrator')
        self.logger.setLevel(logging.DEBUG)

        if self.get_file_handler() is None:
            # Another log file was requested, start over
            self.stop_logging()

        if not self.logger.handlers:
            formatter = logging.Formatter(LOG_FORMAT)

            fh = logging.FileHandler(self.log_file)
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(formatter)
            self.logger.addHandler(fh)

            ch = logging.StreamHandler()
            ch.setLevel(logging.DEBUG)
            ch.setFormatter(formatter)
            self.logger.addHandler(ch)

        if log_level:
            self.set_console_level(log_level)

    def get_file_handler(self):
        for handler in self.logger.handlers:
            if isinstance(handler, logging.FileHandler) and handler.baseFilename == self.log_file:
                return handler
        return None

    def set_console_level(self, log_level):
        # DEBUG2 and DEBUG3 messages are logged as debug records
        level = logging.INFO if log_level.upper() == 'INFO' else logging.DEBUG
        for handler in self.logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)

    def stop_logging(self):
        for handler in self.logger.handlers[:]:
            handler.close()
            self.logger.removeHandler(handler)

if __name__ == "__main__":
    print("This script is not meant to be run directly")
