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

import concurrent.futures
import importlib
import os
import sys
import traceback
from tabulate import tabulate
from tsql_pg_migrator.migrator_logging import MigratorLogger
from tsql_pg_migrator.constants import MigratorConstants
from tsql_pg_migrator.sql_translator import SQLTranslator, TranslationError
from tsql_pg_migrator.result_comparator import ResultComparator
from tsql_pg_migrator.report_generator import ReportGenerator

class Orchestrator:
    def __init__(self, config_parser):
        self.config_parser = config_parser
        self.logger = MigratorLogger(self.config_parser.get_log_file()).logger
        self.on_error_action = self.config_parser.get_on_error_action()
        self.source_schema = self.config_parser.get_source_schema()
        self.target_schema = self.config_parser.get_target_schema()
        self.translator = SQLTranslator(self.config_parser)
        self.comparator = ResultComparator(self.config_parser)
        self.report_generator = ReportGenerator(self.config_parser)
        self.source_connection = None
        self.target_connection = None
        self.views = []
        self.validations = []

    def run(self):
        try:
            self.config_parser.print_log_message('INFO', "Starting Orchestrator...")
            if self.source_connection is None:
                self.source_connection = self.load_connector('source')
            if self.target_connection is None:
                self.target_connection = self.load_connector('target')

            self.run_fetch_views()
            self.run_convert_views()

            if not self.config_parser.is_dry_run():
                self.run_create_support_functions()
                self.run_create_views()
                self.run_validate_views()
            else:
                self.config_parser.print_log_message('INFO', "Dry run mode enabled. Views were only translated.")

            self.run_summary()
            self.config_parser.print_log_message('INFO', "Orchestration complete.")
        except Exception as e:
            self.handle_error(e, 'orchestration')
        return self.validations

    def load_connector(self, source_or_target):
        """Dynamically load the database connector."""
        database_type = self.config_parser.get_db_type(source_or_target)
        self.config_parser.print_log_message('DEBUG', f"Loading connector for {source_or_target} with database type: {database_type}")
        if source_or_target == 'target' and database_type != 'postgresql':
            raise ValueError("Target database type must be 'postgresql'")
        if source_or_target == 'source' and database_type != 'mssql':
            raise ValueError("Source database type must be 'mssql'")
        database_module = MigratorConstants.get_modules().get(database_type)
        if not database_module:
            raise ValueError(f"Unsupported database type: {database_type}")
        module_name, class_name = database_module.split(':')
        if not module_name or not class_name:
            raise ValueError(f"Invalid module format: {database_module}")
        module = importlib.import_module(module_name)
        connector_class = getattr(module, class_name)
        return connector_class(self.config_parser, source_or_target)

    def run_fetch_views(self):
        self.config_parser.print_log_message('INFO', f"Reading views from source schema {self.source_schema}.")
        source_views = self.source_connection.fetch_views_names(self.source_schema)
        for order_num in sorted(source_views):
            view = source_views[order_num]
            target_view_name = self.config_parser.convert_names_case(view['view_name'])
            self.views.append({
                'id': view['id'],
                'source_schema': view['schema_name'],
                'source_view_name': view['view_name'],
                'target_schema': self.target_schema,
                'target_view_name': target_view_name,
                'target_view_qualified_name': (self.translator.format_identifier(self.target_schema, convert_case=False) + '.'
                                               + self.translator.format_identifier(target_view_name, convert_case=False)),
                'comment': view.get('comment', ''),
                'view_code': None,
                'translation': None,
                'status': 'FOUND',
                'issues': [],
            })
        self.config_parser.print_log_message('INFO', f"Found {len(self.views)} views to migrate.")

    def run_convert_views(self):
        for view in self.views:
            self.config_parser.print_log_message('INFO', f"Converting view {view['source_schema']}.{view['source_view_name']}")
            try:
                view['view_code'] = self.source_connection.fetch_view_code({
                    'view_id': view['id'],
                    'source_schema': view['source_schema'],
                    'source_view_name': view['source_view_name'],
                })
                if not view['view_code']:
                    view['status'] = 'FAILED'
                    view['issues'].append({
                        'kind': 'undefined_object',
                        'severity': 'ERROR',
                        'object': view['source_view_name'],
                        'message': 'View definition is not available in sys.sql_modules',
                    })
                    continue

                translation = self.source_connection.convert_view_code({
                    'view_code': view['view_code'],
                    'source_schema': view['source_schema'],
                    'source_view_name': view['source_view_name'],
                    'target_schema': view['target_schema'],
                    'target_view_name': view['target_view_name'],
                })
                view['translation'] = translation
                view['issues'].extend(translation['issues'])
                view['status'] = 'CONVERTED' if translation['select_sql'] else 'FAILED'

                content = translation['target_sql'] + "\n"
                if view['comment']:
                    escaped_comment = view['comment'].replace("'", "''")
                    content += f"\nCOMMENT ON VIEW {view['target_view_qualified_name']} IS '{escaped_comment}';\n"
                self.report_generator.write_file(self.report_generator.get_report_file_name(view['target_view_name'], 'sql'), content)
                self.config_parser.print_log_message('DEBUG', f"Converted view {view['source_view_name']}: {translation['target_sql']}")
            except Exception as e:
                view['status'] = 'FAILED'
                view['issues'].append({
                    'kind': 'execution_error',
                    'severity': 'ERROR',
                    'object': view['source_view_name'],
                    'message': str(e),
                })
                self.handle_error(e, f"convert_view {view['source_view_name']}")

    def run_create_support_functions(self):
        names = []
        for view in self.views:
            if view['status'] == 'CONVERTED':
                for name in view['translation']['support_functions']:
                    if name not in names:
                        names.append(name)
        if not names:
            return
        self.config_parser.print_log_message('INFO', f"Creating support functions in target database: {', '.join(names)}")
        try:
            self.target_connection.create_support_functions(self.translator.get_support_functions_sql(names))
        except Exception as e:
            self.handle_error(e, 'create support functions')

    def run_create_views(self):
        if not self.config_parser.should_create_views():
            self.config_parser.print_log_message('INFO', "Skipping creation of views as requested.")
            return

        # Views depending on not yet created views are retried as long as some other view succeeds
        pending = [view for view in self.views if view['status'] == 'CONVERTED']
        while pending:
            failed = []
            for view in pending:
                try:
                    self.target_connection.create_view({
                        'target_view_qualified_name': view['target_view_qualified_name'],
                        'target_view_sql': view['translation']['target_sql'],
                        'drop_view': self.config_parser.should_drop_views(),
                    })
                    view['status'] = 'CREATED'
                    self.config_parser.print_log_message('INFO', f"View {view['target_view_qualified_name']} created successfully.")
                except Exception as e:
                    failed.append((view, e, self.target_connection.classify_error(e)))

            retry = [view for view, e, kind in failed if kind == 'undefined_object']
            progress = len(failed) < len(pending)
            for view, e, kind in failed:
                if progress and kind == 'undefined_object':
                    self.config_parser.print_log_message('DEBUG', f"View {view['target_view_qualified_name']} depends on a missing object, will retry: {e}")
                    continue
                view['status'] = 'FAILED'
                view['issues'].append({
                    'kind': kind,
                    'severity': 'ERROR',
                    'object': view['target_view_qualified_name'],
                    'message': str(e).strip(),
                })
                self.handle_error(e, f"create_view {view['target_view_qualified_name']}")
            pending = retry if progress else []

    def get_validation_tasks(self):
        tasks = []
        queries = self.config_parser.get_validation_queries()
        if queries:
            for query in queries:
                task = {
                    'object_name': query['name'],
                    'source_query': query['source_query'],
                    'target_query': query.get('target_query'),
                    'ordered': bool(query.get('ordered', False)),
                    'issues': [],
                    'target_sql': None,
                }
                if not task['target_query']:
                    try:
                        translation = self.translator.translate_query(query['source_query'])
                        task['target_query'] = translation['target_sql']
                        task['issues'] = translation['issues']
                    except TranslationError as e:
                        self.config_parser.print_log_message('ERROR', f"Validation query {query['name']} could not be translated: {e}")
                        task['error'] = f"Translation of source query failed: {e}"
                        task['issues'] = [{
                            'kind': 'parse_error',
                            'severity': 'ERROR',
                            'object': query['name'],
                            'message': str(e),
                        }]
                tasks.append(task)
            return tasks

        for view in self.views:
            task = {
                'object_name': f"{view['source_schema']}.{view['source_view_name']}",
                'source_query': self.source_connection.get_view_select_sql(view['source_schema'], view['source_view_name']),
                'target_query': f"SELECT * FROM {view['target_view_qualified_name']}",
                'ordered': False,
                'issues': view['issues'],
                'target_sql': view['translation']['target_sql'] if view['translation'] else None,
            }
            # Without view creation the views are expected to exist in the target already
            if view['status'] != 'CREATED' and not (view['status'] == 'CONVERTED' and not self.config_parser.should_create_views()):
                task['error'] = f"View was not created in target database (status {view['status']})"
            tasks.append(task)
        return tasks

    def run_validate_views(self):
        if not self.config_parser.is_validation_enabled():
            self.config_parser.print_log_message('INFO', "Skipping validation as requested.")
            return

        try:
            tasks = self.get_validation_tasks()
        except Exception as e:
            self.handle_error(e, 'prepare validation queries')
            return

        workers_requested = self.config_parser.get_parallel_workers_count()
        self.config_parser.print_log_message('INFO', f"Validating {len(tasks)} objects with {workers_requested} workers.")
        if workers_requested > 1:
            with concurrent.futures.ThreadPoolExecutor(max_workers=workers_requested) as executor:
                self.validations = list(executor.map(self.validation_worker, tasks))
        else:
            self.validations = [self.validation_worker(task) for task in tasks]

        failed = [validation for validation in self.validations if validation['status'] == 'ERROR']
        if failed and self.on_error_action == 'stop':
            self.run_summary()
            self.config_parser.print_log_message('ERROR', f"Validation failed for {len(failed)} objects. Stopping due to error.")
            sys.exit(1)

    def validation_worker(self, task):
        validation = {
            'object_name': task['object_name'],
            'source_query': task['source_query'],
            'target_query': task['target_query'],
            'status': 'ERROR',
            'message': task.get('error', ''),
            'source_result': None,
            'target_result': None,
            'comparison': None,
            'issues': list(task['issues']),
            'target_sql': task['target_sql'],
        }
        if task.get('error'):
            self.report_generator.write_validation_report(validation)
            return validation

        if self.config_parser.get_parallel_workers_count() > 1:
            source_connection = self.load_connector('source')
            target_connection = self.load_connector('target')
        else:
            source_connection = self.source_connection
            target_connection = self.target_connection

        max_rows = self.config_parser.get_validation_max_rows()
        try:
            validation['source_result'] = source_connection.fetch_result_set(task['source_query'], max_rows)
        except Exception as e:
            validation['message'] = f"Source query failed: {e}"
            self.config_parser.print_log_message('ERROR', f"Validation of {task['object_name']}: {validation['message']}")

        try:
            validation['target_result'] = target_connection.fetch_result_set(task['target_query'], max_rows)
        except Exception as e:
            kind = target_connection.classify_error(e)
            validation['issues'].append({
                'kind': kind,
                'severity': 'ERROR',
                'object': task['object_name'],
                'message': str(e).strip(),
            })
            validation['message'] = (validation['message'] + '; ' if validation['message'] else '') + f"Target query failed ({kind}): {str(e).strip()}"
            self.config_parser.print_log_message('ERROR', f"Validation of {task['object_name']}: {validation['message']}")

        if validation['source_result'] is not None and validation['target_result'] is not None:
            comparison = self.comparator.compare(validation['source_result'], validation['target_result'], task['ordered'])
            validation['comparison'] = comparison
            validation['status'] = comparison['status']
            validation['message'] = comparison['message']

        log_level = 'INFO' if validation['status'] == 'MATCH' else 'WARNING'
        self.config_parser.print_log_message(log_level, f"Validation of {task['object_name']}: {validation['status']} - {validation['message']}")
        self.report_generator.write_validation_report(validation)
        return validation

    def run_summary(self):
        if self.views:
            self.config_parser.print_log_message('INFO', "Views summary:")
            rows = [[view['source_schema'] + '.' + view['source_view_name'], view['target_view_qualified_name'], view['status'], len(view['issues'])]
                    for view in self.views]
            for line in tabulate(rows, headers=['Source', 'Target', 'Status', 'Issues'], tablefmt="github").split('\n'):
                self.config_parser.print_log_message('INFO', line)
        if self.validations:
            path = self.report_generator.write_summary_report(self.validations)
            self.config_parser.print_log_message('INFO', f"Validation summary written to {path}")

    def run_translate_files(self, paths):
        """Offline translation of T-SQL scripts, one output file per input file."""
        translated_files = {}
        for path in paths:
            self.config_parser.print_log_message('INFO', f"Translating file {path}")
            try:
                with open(path, 'r', encoding='utf-8') as file:
                    script = file.read()
                results = self.translator.translate_script(script)

                support_functions = []
                for result in results:
                    for name in result['support_functions']:
                        if name not in support_functions:
                            support_functions.append(name)

                parts = [f"-- Translated from T-SQL by {MigratorConstants.get_full_name()} {MigratorConstants.get_version()}",
                         f"-- Source: {os.path.basename(path)}"]
                parts.extend(self.translator.get_support_functions_sql(support_functions))
                for result in results:
                    for issue in result['issues']:
                        parts.append(f"-- {issue['severity']}: {issue['kind']} ({issue['object']}): {issue['message']}")
                    parts.append(result['target_sql'])

                base_name = os.path.splitext(os.path.basename(path))[0]
                output_path = self.report_generator.write_file(f"{base_name}.pg.sql", "\n\n".join(parts) + "\n")
                issues_count = sum(len(result['issues']) for result in results)
                self.config_parser.print_log_message('INFO', f"Translated {len(results)} statements from {path} into {output_path}, {issues_count} issues")
                translated_files[path] = results
            except Exception as e:
                self.handle_error(e, f"translate file {path}")
        return translated_files

    def handle_error(self, e, description=None):
        self.config_parser.print_log_message('ERROR', f"An error in {self.__class__.__name__} ({description}): {e}")
        self.config_parser.print_log_message('ERROR', ''.join(traceback.format_exception(type(e), e, e.__traceback__)))
        if self.on_error_action == 'stop':
            self.config_parser.print_log_message('ERROR', "Stopping due to error.")
            sys.exit(1)

if __name__ == "__main__":
    print("This script is not meant to be run directly")
