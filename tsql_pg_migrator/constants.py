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

class MigratorConstants:
    @staticmethod
    def get_version():
        return '0.1.0'

    @staticmethod
    def get_full_name():
        return 'View Migration and Validation Tool tsql-pg-migrator'

    @staticmethod
    def get_message_levels():
        return ['INFO', 'DEBUG', 'DEBUG2', 'DEBUG3']

    @staticmethod
    def get_default_name():
        return 'migrator'

    @staticmethod
    def get_default_log():
        return f'./{MigratorConstants.get_default_name()}.log'

    @staticmethod
    def get_default_output_dir():
        return './migrator_output'

    @staticmethod
    def get_default_source_schema():
        return 'dbo'

    @staticmethod
    def get_default_target_schema():
        return 'public'

    @staticmethod
    def get_null_marker():
        return '<NULL>'

    @staticmethod
    def get_modules():
        return {
            'postgresql': 'tsql_pg_migrator.connectors.postgresql_connector:PostgreSQLConnector',
            'mssql': 'tsql_pg_migrator.connectors.ms_sql_connector:MsSQLConnector',
        }

if __name__ == "__main__":
    print("This script is not meant to be run directly")
