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

import argparse
from tsql_pg_migrator.constants import MigratorConstants

class CommandLine:
    def __init__(self):
        self.parser = argparse.ArgumentParser(description=f"""{MigratorConstants.get_full_name()}, version: {MigratorConstants.get_version()}""")
        self.args = None
        self.setup_arguments()

    def setup_arguments(self):
        self.parser.add_argument(
            '--log-level',
            default='INFO',
            choices=MigratorConstants.get_message_levels(),
            help="Set the logging level")

        self.parser.add_argument(
            '--dry-run',
            action='store_true',
            help="Only translate views, do not create or validate anything in the target database")

        self.parser.add_argument(
            '--config',
            type=str,
            help='Path/name of the configuration file')

        self.parser.add_argument(
            '--input',
            type=str,
            nargs='+',
            help='T-SQL script(s) to translate offline, no database connection is made')

        self.parser.add_argument(
            '--output-dir',
            type=str,
            default=None,
            help=f'Directory for translated SQL and validation reports (default: {MigratorConstants.get_default_output_dir()})')

        self.parser.add_argument(
            '--log-file',
            type=str,
            default=MigratorConstants.get_default_log(),
            help=f'Path/name of the log file (default: {MigratorConstants.get_default_log()})')

        self.parser.add_argument(
            '--version',
            action='store_true',
            help='Show the version of the tool')

    def parse_arguments(self, argv=None):
        self.args = self.parser.parse_args(argv)
        if not self.args.version and not self.args.config and not self.args.input:
            self.parser.error("one of the arguments --config or --input is required")
        return self.args

    def print_all(self, logger):
        if self.args.log_level:
            logger.info("Command line parameters:")
            logger.info("log_level    = {}".format(self.args.log_level))
            logger.info("dry_run      = {}".format(self.args.dry_run))
            logger.info("config       = {}".format(self.args.config))
            logger.info("input        = {}".format(self.args.input))
            logger.info("output_dir   = {}".format(self.args.output_dir))
            logger.info("log          = {}".format(self.args.log_file))

    def get_parameter_value(self, param_name):
        param_name = param_name.replace("-", "_")
        return getattr(self.args, param_name, None)

if __name__ == "__main__":
    print("This script is not meant to be run directly")
