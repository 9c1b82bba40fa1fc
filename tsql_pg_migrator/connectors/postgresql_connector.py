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

import psycopg2
from tsql_pg_migrator.database_connector import DatabaseConnector
from tsql_pg_migrator.migrator_logging import MigratorLogger

# SQLSTATE codes -> issue kinds reported for failed statements
ERROR_CLASSIFICATION = {
    '42883': 'unsupported_function',    # undefined_function
    '42804': 'type_mismatch',           # datatype_mismatch
    '42846': 'type_mismatch',           # cannot_coerce
    '22P02': 'type_mismatch',           # invalid_text_representation
    '22007': 'type_mismatch',           # invalid_datetime_format
    '22008': 'type_mismatch',           # datetime_field_overflow
    '42P01': 'undefined_object',        # undefined_table
    '42703': 'undefined_object',        # undefined_column
    '3F000': 'undefined_object',        # invalid_schema_name
    '42601': 'parse_error',             # syntax_error
}

class PostgreSQLConnector(DatabaseConnector):
    def __init__(self, config_parser, source_or_target):
        if source_or_target not in ['target']:
            raise ValueError(f"PostgreSQL is only supported as a target database. Current value: {source_or_target}")

        self.connection = None
        self.config_parser = config_parser
        self.source_or_target = source_or_target
        self.logger = MigratorLogger(self.config_parser.get_log_file()).logger
        self.session_settings = self.prepare_session_settings()

    def connect(self):
        connection_string = self.config_parser.get_connect_string(self.source_or_target)
        self.connection = psycopg2.connect(connection_string)
        self.connection.autocommit = True
        if self.session_settings:
            self.execute_query(self.session_settings)

    def disconnect(self):
        if self.connection:
            self.connection.close()
            self.connection = None

    def prepare_session_settings(self):
        """
        Prepare SET statements for the session settings from the config file.
        Only names are taken from config, values are passed as literals.
        """
        settings = self.config_parser.get_target_db_session_settings()
        if not settings:
            return ""
        statements = []
        for name, value in settings.items():
            if not str(name).replace('_', '').replace('.', '').isalnum():
                raise ValueError(f"Invalid session setting name: {name}")
            escaped_value = str(value).replace("'", "''")
            statements.append(f"SET {name} = '{escaped_value}';")
        self.config_parser.print_log_message('DEBUG', f"Session settings prepared: {statements}")
        return "\n".join(statements)

    def execute_query(self, query: str, params=None):
        with self.connection.cursor() as cursor:
            cursor.execute(query, params)

    def create_support_functions(self, functions_sql):
        try:
            self.connect()
            for function_sql in functions_sql:
                self.config_parser.print_log_message('DEBUG', f"Creating support function: {function_sql}")
                self.execute_query(function_sql)
        finally:
            self.disconnect()

    def create_view(self, settings):
        try:
            self.connect()
            if settings.get('drop_view', False):
                query = f"DROP VIEW IF EXISTS {settings['target_view_qualified_name']} CASCADE"
                self.config_parser.print_log_message('DEBUG', f"Dropping view: {query}")
                self.execute_query(query)
            self.config_parser.print_log_message('DEBUG2', f"Creating view {settings['target_view_qualified_name']}: {settings['target_view_sql']}")
            self.execute_query(settings['target_view_sql'])
        finally:
            self.disconnect()

    def fetch_result_set(self, query: str, max_rows: int = None) -> dict:
        try:
            self.connect()
            with self.connection.cursor() as cursor:
                cursor.execute(query)
                result_set = self.read_result_set(cursor, max_rows)
            self.config_parser.print_log_message('DEBUG', f"Fetched {len(result_set['rows'])} rows from target: {query}")
            return result_set
        except psycopg2.Error as e:
            self.config_parser.print_log_message('ERROR', f"Error executing query: {query}")
            self.config_parser.print_log_message('ERROR', e)
            raise
        finally:
            self.disconnect()

    def classify_error(self, e):
        pgcode = getattr(e, 'pgcode', None)
        if pgcode in ERROR_CLASSIFICATION:
            return ERROR_CLASSIFICATION[pgcode]
        return 'execution_error'

    def get_database_version(self):
        query = "SELECT version()"
        self.connect()
        cursor = self.connection.cursor()
        cursor.execute(query)
        version = cursor.fetchone()[0]
        cursor.close()
        self.disconnect()
        return version

if __name__ == "__main__":
    print("This script is not meant to be run directly")
