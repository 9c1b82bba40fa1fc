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

import jaydebeapi
import pyodbc
from tsql_pg_migrator.database_connector import DatabaseConnector
from tsql_pg_migrator.migrator_logging import MigratorLogger
from tsql_pg_migrator.sql_translator import SQLTranslator

class MsSQLConnector(DatabaseConnector):
    def __init__(self, config_parser, source_or_target):
        if source_or_target not in ['source']:
            raise ValueError(f"MS SQL Server is only supported as a source database. Current value: {source_or_target}")

        self.connection = None
        self.config_parser = config_parser
        self.source_or_target = source_or_target
        self.on_error_action = self.config_parser.get_on_error_action()
        self.logger = MigratorLogger(self.config_parser.get_log_file()).logger

    def connect(self):
        if self.config_parser.get_connectivity(self.source_or_target) == 'odbc':
            connection_string = self.config_parser.get_connect_string(self.source_or_target)
            self.connection = pyodbc.connect(connection_string)
        elif self.config_parser.get_connectivity(self.source_or_target) == 'jdbc':
            connection_string = self.config_parser.get_connect_string(self.source_or_target)
            username = self.config_parser.get_db_config(self.source_or_target)['username']
            password = self.config_parser.get_db_config(self.source_or_target)['password']
            jdbc_driver = self.config_parser.get_db_config(self.source_or_target)['jdbc']['driver']
            jdbc_libraries = self.config_parser.get_db_config(self.source_or_target)['jdbc']['libraries']
            self.connection = jaydebeapi.connect(
                jdbc_driver,
                connection_string,
                [username, password],
                jdbc_libraries
            )
        else:
            raise ValueError(f"Unsupported connectivity type: {self.config_parser.get_connectivity(self.source_or_target)}")
        self.connection.autocommit = True

    def disconnect(self):
        if self.connection:
            self.connection.close()
            self.connection = None

    def execute_query(self, query: str, params=None):
        cursor = self.connection.cursor()
        try:
            if params:
                cursor.execute(query, params)
            else:
                cursor.execute(query)
        finally:
            cursor.close()

    def fetch_views_names(self, owner_name):
        views = {}
        order_num = 1
        query = """
            SELECT
                v.object_id AS id,
                s.name AS schema_name,
                v.name AS view_name,
                CAST(ep.value AS NVARCHAR(4000)) AS view_comment
            FROM sys.views v
            JOIN sys.schemas s ON v.schema_id = s.schema_id
            LEFT JOIN sys.extended_properties ep
                ON ep.major_id = v.object_id AND ep.minor_id = 0 AND ep.name = 'MS_Description'
            WHERE s.name = ?
            ORDER BY v.name
        """
        try:
            self.connect()
            cursor = self.connection.cursor()
            cursor.execute(query, (owner_name,))
            rows = cursor.fetchall()
            for row in rows:
                if not self.config_parser.is_view_included(row[2]):
                    self.config_parser.print_log_message('DEBUG', f"View {row[1]}.{row[2]} skipped by include/exclude settings")
                    continue
                views[order_num] = {
                    'id': row[0],
                    'schema_name': row[1],
                    'view_name': row[2],
                    'comment': row[3] or ''
                }
                order_num += 1
            cursor.close()
            return views
        except Exception as e:
            self.config_parser.print_log_message('ERROR', f"Error executing query: {query}")
            self.config_parser.print_log_message('ERROR', e)
            raise
        finally:
            self.disconnect()

    def fetch_view_code(self, settings):
        view_id = settings['view_id']
        source_schema = settings['source_schema']
        source_view_name = settings['source_view_name']
        view_code = ''
        query = """
            SELECT m.definition
            FROM sys.sql_modules m
            WHERE m.object_id = ?
        """
        try:
            self.connect()
            cursor = self.connection.cursor()
            cursor.execute(query, (view_id,))
            row = cursor.fetchone()
            if row and row[0]:
                view_code = row[0]
                self.config_parser.print_log_message('DEBUG', f"View code for {source_schema}.{source_view_name}: {view_code}")
            else:
                self.config_parser.print_log_message('WARNING', f"No definition found for view {source_schema}.{source_view_name} (encrypted view?)")
            cursor.close()
            return view_code
        except Exception as e:
            self.config_parser.print_log_message('ERROR', f"Error executing query: {query}")
            self.config_parser.print_log_message('ERROR', e)
            raise
        finally:
            self.disconnect()

    def convert_view_code(self, settings: dict):
        translator = SQLTranslator(self.config_parser)
        return translator.translate_view(settings)

    def get_view_select_sql(self, schema_name, view_name):
        schema_name = schema_name.replace("]", "]]")
        view_name = view_name.replace("]", "]]")
        return f"SELECT * FROM [{schema_name}].[{view_name}]"

    def fetch_result_set(self, query: str, max_rows: int = None) -> dict:
        try:
            self.connect()
            cursor = self.connection.cursor()
            cursor.execute(query)
            result_set = self.read_result_set(cursor, max_rows)
            cursor.close()
            self.config_parser.print_log_message('DEBUG', f"Fetched {len(result_set['rows'])} rows from source: {query}")
            return result_set
        except Exception as e:
            self.config_parser.print_log_message('ERROR', f"Error executing query: {query}")
            self.config_parser.print_log_message('ERROR', e)
            raise
        finally:
            self.disconnect()

    def get_database_version(self):
        query = "SELECT @@VERSION"
        try:
            self.connect()
            cursor = self.connection.cursor()
            cursor.execute(query)
            version = cursor.fetchone()[0]
            cursor.close()
            return version
        finally:
            self.disconnect()

if __name__ == "__main__":
    print("This script is not meant to be run directly")
