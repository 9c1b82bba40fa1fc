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

import yaml
from tsql_pg_migrator.constants import MigratorConstants
import re
import os

class ConfigParser:
    def __init__(self, args, logger):
        self.args = args
        self.logger = logger
        self.config = self.load_config(args.config)
        self.validate_config()

    def load_config(self, config_file):
        """Load the configuration file, file mode runs without one."""
        if not config_file:
            self.print_log_message('INFO', "No configuration file given, using defaults")
            return {}
        self.print_log_message('INFO', f"Working directory: {os.path.dirname(os.path.abspath(config_file))}")
        self.print_log_message('INFO', f"Loading configuration from {config_file}")
        with open(config_file, 'r') as file:
            return yaml.safe_load(file) or {}

    def validate_config(self):
        names_case_handling = self.get_names_case_handling()
        if names_case_handling not in ['lower', 'upper', 'keep']:
            raise ValueError(f"Invalid names_case_handling in the config file: {names_case_handling}. Must be one of 'lower', 'upper', or 'keep'.")

        on_error = self.get_on_error_action()
        if on_error not in ['stop', 'continue']:
            raise ValueError(f"Invalid on_error in the config file: {on_error}. Must be one of 'stop' or 'continue'.")

        isdate_strategy = self.get_isdate_strategy()
        if isdate_strategy not in ['helper_function', 'pg_input_is_valid']:
            raise ValueError(f"Invalid isdate_strategy in the config file: {isdate_strategy}. Must be one of 'helper_function' or 'pg_input_is_valid'.")

        include_views = self.config.get('include_views', None)
        if (include_views is not None and type(include_views) is str and include_views.lower() != 'all'):
            raise ValueError("When include_views is used, it must be a list of names or regex patterns")

        for setting_name in ['data_types_substitution', 'functions_substitution']:
            entries = self.config.get(setting_name, [])
            if isinstance(entries, list):
                for entry in entries:
                    if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                        raise ValueError(f"Each entry in {setting_name} must have 2 elements - [source, target].")

        for query in self.get_validation_queries():
            if not isinstance(query, dict) or not query.get('name') or not query.get('source_query'):
                raise ValueError("Each entry in validation.queries must define at least 'name' and 'source_query'.")

        if self.get_parallel_workers_count() < 1:
            raise ValueError("migration.parallel_workers must be at least 1")

        return True

    ## General config
    def is_dry_run(self):
        return bool(self.args.dry_run)

    def has_database_config(self):
        return 'source' in self.config and 'target' in self.config

    def get_output_dir(self):
        output_dir = getattr(self.args, 'output_dir', None)
        if output_dir:
            return output_dir
        return self.config.get('migration', {}).get('output_dir', MigratorConstants.get_default_output_dir())

    ## Databases
    def get_db_config(self, source_or_target):
        return self.config[source_or_target]

    def get_db_type(self, source_or_target):
        if source_or_target not in ['source', 'target']:
            raise ValueError(f"Invalid source_or_target: {source_or_target}")
        return self.config[source_or_target]['type']

    def get_source_config(self):
        return self.config.get('source', {})

    def get_source_db_name(self):
        return self.get_source_config().get('database', None)

    def get_source_schema(self):
        source_config = self.get_source_config()
        return source_config.get('schema', source_config.get('owner', MigratorConstants.get_default_source_schema()))

    def get_source_db_type(self):
        return self.get_source_config().get('type', 'mssql')

    def get_connectivity(self, source_or_target):
        return self.config[source_or_target].get('connectivity', None)

    def get_target_config(self):
        return self.config.get('target', {})

    def get_target_db_type(self):
        return self.get_target_config().get('type', 'postgresql')

    def get_target_db_name(self):
        return self.get_target_config().get('database', None)

    def get_target_schema(self):
        target_config = self.get_target_config()
        return target_config.get('schema', target_config.get('owner', MigratorConstants.get_default_target_schema()))

    def get_target_db_session_settings(self):
        return self.get_target_config().get('settings', {})

    def get_connect_string(self, source_or_target):
        if source_or_target not in ['source', 'target']:
            raise ValueError(f"Invalid source_or_target: {source_or_target}")
        connectivity = self.get_connectivity(source_or_target)
        db_config = self.config[source_or_target]
        if db_config['type'] == 'postgresql':
            if connectivity == 'native' or connectivity is None:
                return f"""postgres://{db_config['username']}:{db_config['password']}@{db_config.get('host', 'localhost')}:{db_config['port']}/{db_config['database']}?sslmode={db_config.get('sslmode', 'prefer')}"""
            else:
                raise ValueError(f"Unsupported Postgres connectivity: {connectivity}")
        elif db_config['type'] == 'mssql':
            if connectivity == 'odbc':
                connect_string = f"DRIVER={db_config['odbc']['driver']};SERVER={db_config['host']},{db_config['port']};DATABASE={db_config['database']};UID={db_config['username']};PWD={db_config['password']}"
                if db_config['odbc'].get('trust_server_certificate', False):
                    connect_string += ";TrustServerCertificate=yes"
                return connect_string
            elif connectivity == 'jdbc':
                return f"jdbc:sqlserver://{db_config['host']}:{db_config['port']};databaseName={db_config['database']};user={db_config['username']};password={db_config['password']}"
            else:
                raise ValueError(f"Unsupported MSSQL connectivity: {connectivity}")
        else:
            raise ValueError(f"Unsupported database type: {db_config['type']}")

    ## Migration settings
    def get_migration_settings(self):
        return self.config.get('migration', {})

    def get_on_error_action(self):
        return self.get_migration_settings().get('on_error', 'stop')

    def should_create_views(self):
        return self.get_migration_settings().get('create_views', True)

    def should_drop_views(self):
        return self.get_migration_settings().get('drop_views', False)

    def get_parallel_workers_count(self):
        return int(self.get_migration_settings().get('parallel_workers', 1))

    def get_names_case_handling(self):
        return str(self.get_migration_settings().get('names_case_handling', 'keep')).lower()

    def convert_names_case(self, name):
        case_handling = self.get_names_case_handling()
        if case_handling == 'lower':
            return name.lower()
        elif case_handling == 'upper':
            return name.upper()
        elif case_handling == 'keep':
            return name
        else:
            raise ValueError(f"Invalid names_case_handling: {case_handling}")

    ## Translation settings
    def get_translation_settings(self):
        return self.config.get('translation', {})

    def should_quote_identifiers(self):
        return bool(self.get_translation_settings().get('quote_identifiers', True))

    def should_qualify_unqualified_tables(self):
        return bool(self.get_translation_settings().get('qualify_unqualified_tables', True))

    def get_isdate_strategy(self):
        return str(self.get_translation_settings().get('isdate_strategy', 'helper_function')).lower()

    def is_strict_translation(self):
        return bool(self.get_translation_settings().get('strict_translation', False))

    def get_schema_mapping(self):
        """
        Additional source schema -> target schema pairs.
        The source schema itself is always mapped to the target schema.
        """
        schema_mapping = {str(k).lower(): v for k, v in self.get_translation_settings().get('schema_mapping', {}).items()}
        schema_mapping[self.get_source_schema().lower()] = self.get_target_schema()
        return schema_mapping

    def get_functions_substitution(self):
        return self.config.get('functions_substitution', [])

    def get_data_types_substitution(self):
        return self.config.get('data_types_substitution', [])

    ## Objects selection
    def get_include_views(self):
        include_views = self.config.get('include_views', None)
        if include_views is None or (type(include_views) is str and include_views.lower() == 'all'):
            # Pattern matching all view names
            return ['.*']
        elif type(include_views) is list:
            return include_views
        else:
            return []

    def get_exclude_views(self):
        return self.config.get('exclude_views', None) or []

    def is_view_included(self, view_name):
        if not any(re.fullmatch(pattern, view_name, re.IGNORECASE) for pattern in self.get_include_views()):
            return False
        if any(re.fullmatch(pattern, view_name, re.IGNORECASE) for pattern in self.get_exclude_views()):
            return False
        return True

    ## Validation settings
    def get_validation_settings(self):
        return self.config.get('validation', {})

    def is_validation_enabled(self):
        return bool(self.get_validation_settings().get('enabled', True))

    def get_validation_max_rows(self):
        return int(self.get_validation_settings().get('max_rows', 10000))

    def get_report_rows(self):
        return int(self.get_validation_settings().get('report_rows', 10))

    def get_float_precision(self):
        return int(self.get_validation_settings().get('float_precision', 6))

    def should_trim_strings(self):
        return bool(self.get_validation_settings().get('trim_strings', True))

    def get_validation_queries(self):
        return self.get_validation_settings().get('queries', None) or []

    ## Logging
    def get_log_file(self):
        return self.args.log_file or MigratorConstants.get_default_log()

    def get_log_level(self):
        if getattr(self.args, 'log_level', None):
            return self.args.log_level
        return 'INFO'

    def print_log_message(self, message_level, message):
        if message_level.upper() == 'ERROR':
            self.logger.error(message)
            return
        if message_level.upper() == 'WARNING':
            self.logger.warning(message)
            return
        current_log_level = self.get_log_level()
        if message_level.upper() not in MigratorConstants.get_message_levels():
            raise ValueError(f"Invalid message_level: {message_level}. Must be one of {MigratorConstants.get_message_levels()}")
        if MigratorConstants.get_message_levels().index(message_level.upper()) <= MigratorConstants.get_message_levels().index(current_log_level.upper()):
            if message_level == 'DEBUG':
                self.logger.debug(message)
            elif message_level == 'DEBUG2':
                self.logger.debug('DEBUG2: ' + message)
            elif message_level == 'DEBUG3':
                self.logger.debug('DEBUG3: ' + message)
            else:
                self.logger.info(message)

if __name__ == "__main__":
    print("This script is not meant to be run directly")
