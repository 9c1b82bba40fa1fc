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

from abc import ABC, abstractmethod

class DatabaseConnector(ABC):
    """
    Abstract base class for database connectors.
    Each specific DB implementation must implement these methods.
    """

    def __init__(self, config_parser, source_or_target):
        self.connection = None
        self.config_parser = config_parser
        self.source_or_target = source_or_target

    @abstractmethod
    def connect(self):
        """Establishes a connection to the database."""
        pass

    @abstractmethod
    def disconnect(self):
        """Closes the connection to the database."""
        pass

    @abstractmethod
    def execute_query(self, query: str, params=None):
        """Executes a statement which does not return rows."""
        pass

    @abstractmethod
    def fetch_result_set(self, query: str, max_rows: int = None) -> dict:
        """
        Runs a query and returns its result set.
        Connection is opened and closed by the method.
        {
            'columns': [column_name, ...],
            'rows': [tuple, ...],
            'truncated': True if more than max_rows rows were available
        }
        """
        pass

    @abstractmethod
    def get_database_version(self):
        """Returns the version string of the database server."""
        pass

    def read_result_set(self, cursor, max_rows=None):
        columns = [column[0] for column in cursor.description] if cursor.description else []
        if max_rows:
            rows = cursor.fetchmany(max_rows + 1)
            truncated = len(rows) > max_rows
            rows = rows[:max_rows]
        else:
            rows = cursor.fetchall()
            truncated = False
        return {
            'columns': columns,
            'rows': [tuple(row) for row in rows],
            'truncated': truncated,
        }

if __name__ == "__main__":
    print("This script is not meant to be run directly")
