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

import re
import string
import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

class TranslationError(Exception):
    pass

# Templates are PostgreSQL SQL, {0}, {1} ... are the translated call arguments
FUNCTION_TEMPLATES = {
    'GETUTCDATE': "(NOW() AT TIME ZONE 'UTC')",
    'SYSDATETIME': "CURRENT_TIMESTAMP",
    'SYSUTCDATETIME': "(NOW() AT TIME ZONE 'UTC')",
    'DB_NAME': "CURRENT_DATABASE()",
    'SUSER_SNAME': "CURRENT_USER",
    'SUSER_NAME': "CURRENT_USER",
    'USER_NAME': "CURRENT_USER",
    'HOST_NAME': "CAST(INET_CLIENT_ADDR() AS TEXT)",
    'NEWID': "GEN_RANDOM_UUID()",
    'DATALENGTH': "OCTET_LENGTH({0})",
    'SPACE': "REPEAT(' ', {0})",
    'REPLICATE': "REPEAT({0}, {1})",
    'EOMONTH': "CAST(DATE_TRUNC('month', CAST({0} AS DATE)) + INTERVAL '1 month' - INTERVAL '1 day' AS DATE)",
    'ISNUMERIC': "CASE WHEN CAST({0} AS TEXT) ~ '^[[:space:]]*[-+]?([0-9]+[.]?[0-9]*|[.][0-9]+)([eE][-+]?[0-9]+)?[[:space:]]*$' THEN 1 ELSE 0 END",
    'SQUARE': "POWER({0}, 2)",
}

# DATEDIFF counts unit boundaries crossed between start {0} and end {1}
DATEDIFF_TEMPLATES = {
    'year': "(EXTRACT(YEAR FROM CAST({1} AS TIMESTAMP)) - EXTRACT(YEAR FROM CAST({0} AS TIMESTAMP)))",
    'quarter': "((EXTRACT(YEAR FROM CAST({1} AS TIMESTAMP)) - EXTRACT(YEAR FROM CAST({0} AS TIMESTAMP))) * 4 + (EXTRACT(QUARTER FROM CAST({1} AS TIMESTAMP)) - EXTRACT(QUARTER FROM CAST({0} AS TIMESTAMP))))",
    'month': "((EXTRACT(YEAR FROM CAST({1} AS TIMESTAMP)) - EXTRACT(YEAR FROM CAST({0} AS TIMESTAMP))) * 12 + (EXTRACT(MONTH FROM CAST({1} AS TIMESTAMP)) - EXTRACT(MONTH FROM CAST({0} AS TIMESTAMP))))",
    'week': "((CAST(DATE_TRUNC('week', CAST({1} AS DATE) + 1) AS DATE) - CAST(DATE_TRUNC('week', CAST({0} AS DATE) + 1) AS DATE)) / 7)",
    'day': "(CAST({1} AS DATE) - CAST({0} AS DATE))",
    'hour': "CAST(EXTRACT(EPOCH FROM (DATE_TRUNC('hour', CAST({1} AS TIMESTAMP)) - DATE_TRUNC('hour', CAST({0} AS TIMESTAMP)))) / 3600 AS BIGINT)",
    'minute': "CAST(EXTRACT(EPOCH FROM (DATE_TRUNC('minute', CAST({1} AS TIMESTAMP)) - DATE_TRUNC('minute', CAST({0} AS TIMESTAMP)))) / 60 AS BIGINT)",
    'second': "CAST(EXTRACT(EPOCH FROM (DATE_TRUNC('second', CAST({1} AS TIMESTAMP)) - DATE_TRUNC('second', CAST({0} AS TIMESTAMP)))) AS BIGINT)",
    'millisecond': "CAST(EXTRACT(EPOCH FROM (DATE_TRUNC('milliseconds', CAST({1} AS TIMESTAMP)) - DATE_TRUNC('milliseconds', CAST({0} AS TIMESTAMP)))) * 1000 AS BIGINT)",
}

DATEPART_ALIASES = {
    'year': 'year', 'yy': 'year', 'yyyy': 'year',
    'quarter': 'quarter', 'qq': 'quarter', 'q': 'quarter',
    'month': 'month', 'mm': 'month', 'm': 'month',
    'week': 'week', 'wk': 'week', 'ww': 'week',
    'day': 'day', 'dd': 'day', 'd': 'day',
    'dayofyear': 'day', 'dy': 'day', 'y': 'day',
    'hour': 'hour', 'hh': 'hour',
    'minute': 'minute', 'mi': 'minute', 'n': 'minute',
    'second': 'second', 'ss': 'second', 's': 'second',
    'millisecond': 'millisecond', 'ms': 'millisecond',
}

# (target type, keep length / precision parameters)
DATA_TYPES_MAPPING = {
    'DATETIME': ('TIMESTAMP', False),
    'DATETIME2': ('TIMESTAMP', False),
    'SMALLDATETIME': ('TIMESTAMP', False),
    'DATETIMEOFFSET': ('TIMESTAMPTZ', False),
    'BIT': ('BOOLEAN', False),
    'TINYINT': ('SMALLINT', False),
    'UTINYINT': ('SMALLINT', False),
    'MONEY': ('NUMERIC(19, 4)', False),
    'SMALLMONEY': ('NUMERIC(10, 4)', False),
    'UNIQUEIDENTIFIER': ('UUID', False),
    'NVARCHAR': ('VARCHAR', True),
    'NCHAR': ('CHAR', True),
    'NTEXT': ('TEXT', False),
    'VARBINARY': ('BYTEA', False),
    'BINARY': ('BYTEA', False),
    'IMAGE': ('BYTEA', False),
}

MAX_LENGTH_TYPES = {
    'VARCHAR': 'TEXT',
    'NVARCHAR': 'TEXT',
    'VARBINARY': 'BYTEA',
}

UNSUPPORTED_FUNCTIONS = {
    'OBJECT_ID', 'OBJECT_NAME', 'SCHEMA_NAME', 'APP_NAME', 'PATINDEX',
    'FORMATMESSAGE', 'CHECKSUM', 'BINARY_CHECKSUM', 'NEWSEQUENTIALID',
    'SCOPE_IDENTITY', 'IDENT_CURRENT', 'OBJECTPROPERTY', 'COLUMNPROPERTY',
    'SERVERPROPERTY', 'DATABASEPROPERTYEX', 'TRY_PARSE', 'PARSE',
}

# Unsupported T-SQL functions sqlglot parses into typed nodes, with their T-SQL names
UNSUPPORTED_FUNCTION_NODES = {
    getattr(exp, class_name): func_name
    for class_name, func_name in (('ObjectId', 'OBJECT_ID'), ('CurrentSchema', 'SCHEMA_NAME'))
    if hasattr(exp, class_name)
}

SUPPORT_FUNCTIONS = {
    'isdate': """CREATE OR REPLACE FUNCTION {schema}.isdate(value text)
RETURNS integer
LANGUAGE plpgsql STABLE
AS $$
BEGIN
    IF value IS NULL THEN
        RETURN 0;
    END IF;
    PERFORM value::timestamp;
    RETURN 1;
EXCEPTION
    WHEN others THEN
        RETURN 0;
END;
$$;""",
}

# Wrappers sqlglot puts around DATEDIFF arguments when reading T-SQL
DATE_ARGUMENT_WRAPPERS = tuple(
    getattr(exp, name) for name in ('TimeStrToTime', 'TsOrDsToDate', 'TsOrDsToTimestamp') if hasattr(exp, name)
)

class SQLTranslator:
    """
    Rule based translation of SQL Server (T-SQL) views and queries into PostgreSQL.
    Parsing and generation is done by sqlglot, rules are applied as transformations
    of the parsed expression tree.
    """

    def __init__(self, config_parser):
        self.config_parser = config_parser
        self.target_schema = config_parser.get_target_schema()
        self.source_schema = config_parser.get_source_schema()
        self.source_db_name = config_parser.get_source_db_name()
        self.schema_mapping = config_parser.get_schema_mapping()
        self.quote_identifiers = config_parser.should_quote_identifiers()
        self.qualify_unqualified_tables = config_parser.should_qualify_unqualified_tables()
        self.isdate_strategy = config_parser.get_isdate_strategy()
        self.strict = config_parser.is_strict_translation()
        self.pretty = bool(config_parser.get_translation_settings().get('pretty', False))
        self.function_templates = self.get_function_templates()
        self.data_types_mapping = self.get_data_types_mapping()

    ## Rule tables
    def get_function_templates(self):
        templates = {name: template for name, template in FUNCTION_TEMPLATES.items()}
        for source_name, template in self.config_parser.get_functions_substitution():
            templates[str(source_name).upper()] = template
        return templates

    def get_data_types_mapping(self):
        mapping = dict(DATA_TYPES_MAPPING)
        for source_type, target_type in self.config_parser.get_data_types_substitution():
            mapping[str(source_type).upper()] = (target_type, '(' not in target_type)
        return mapping

    def get_support_functions_sql(self, names, schema=None):
        schema = schema or self.target_schema
        return [SUPPORT_FUNCTIONS[name].format(schema=self.format_identifier(schema, convert_case=False)) for name in names]

    ## Helpers
    def format_identifier(self, name, convert_case=True):
        if convert_case:
            name = self.config_parser.convert_names_case(name)
        if self.quote_identifiers:
            return '"' + name.replace('"', '""') + '"'
        return name

    def new_result(self, source_name=None):
        return {
            'source_name': source_name,
            'target_schema': self.target_schema,
            'target_name': None,
            'select_sql': None,
            'target_sql': None,
            'issues': [],
            'support_functions': [],
        }

    def add_issue(self, result, kind, severity, obj, message):
        result['issues'].append({
            'kind': kind,
            'severity': severity,
            'object': obj,
            'message': message,
        })
        self.config_parser.print_log_message('ERROR' if severity == 'ERROR' else 'WARNING',
                                             f"Translation of {result['source_name'] or 'query'}: {kind} ({obj}): {message}")

    def check_strict(self, result):
        if self.strict:
            errors = [issue for issue in result['issues'] if issue['severity'] == 'ERROR']
            if errors:
                raise TranslationError(f"Translation of {result['source_name'] or 'query'} failed: "
                                       + "; ".join(f"{e['kind']} ({e['object']})" for e in errors))

    def split_batches(self, script):
        batches = re.split(r'^\s*GO\s*(?:\d+)?\s*;?\s*$', script, flags=re.IGNORECASE | re.MULTILINE)
        return [batch.strip() for batch in batches if batch.strip()]

    def preprocess(self, sql, result):
        sql = re.sub(r'^\s*SET\s+(ANSI_NULLS|QUOTED_IDENTIFIER|NOCOUNT|ANSI_PADDING|ARITHABORT)\s+(ON|OFF)\s*;?\s*$', '',
                     sql, flags=re.IGNORECASE | re.MULTILINE)
        sql = re.sub(r'\bCREATE\s+OR\s+ALTER\s+VIEW\b', 'CREATE VIEW', sql, flags=re.IGNORECASE)
        sql = re.sub(r'^(\s*)ALTER\s+VIEW\b', r'\1CREATE VIEW', sql, flags=re.IGNORECASE)
        sql = re.sub(r'\bWITH\s+(?:SCHEMABINDING|ENCRYPTION|VIEW_METADATA)(?:\s*,\s*(?:SCHEMABINDING|ENCRYPTION|VIEW_METADATA))*\s+(?=AS\b)',
                     '', sql, flags=re.IGNORECASE)
        if re.search(r'\bWITH\s+CHECK\s+OPTION\s*;?\s*$', sql, flags=re.IGNORECASE):
            sql = re.sub(r'\bWITH\s+CHECK\s+OPTION(\s*;?\s*)$', r'\1', sql, flags=re.IGNORECASE)
            self.add_issue(result, 'unsupported_construct', 'WARNING', 'WITH CHECK OPTION', "WITH CHECK OPTION was removed, add it manually if needed")

        def top_percent_replacer(match):
            if float(match.group(1)) == 100:
                return ''
            self.add_issue(result, 'unsupported_construct', 'ERROR', match.group(0).strip(), "TOP ... PERCENT has no PostgreSQL equivalent")
            return match.group(0)
        sql = re.sub(r'\bTOP\s*\(?\s*(\d+(?:\.\d+)?)\s*\)?\s+PERCENT\b', top_percent_replacer, sql, flags=re.IGNORECASE)
        return sql.strip()

    def parse(self, sql, result):
        try:
            return [expression for expression in sqlglot.parse(sql, read='tsql') if expression is not None]
        except SqlglotError as e:
            self.add_issue(result, 'parse_error', 'ERROR', result['source_name'] or 'query', str(e))
            return None

    ## Public API
    def translate_query(self, sql):
        """Translate a single SELECT statement, raises TranslationError if it cannot be parsed."""
        result = self.new_result()
        sql = self.preprocess(sql, result)
        expressions = self.parse(sql, result)
        if expressions is None:
            raise TranslationError(result['issues'][-1]['message'])
        if len(expressions) != 1 or not isinstance(expressions[0], exp.Query):
            raise TranslationError(f"Expected exactly one SELECT statement, got: {sql}")

        converted = self.convert_expression(expressions[0], result)
        result['select_sql'] = converted.sql(dialect='postgres', pretty=self.pretty)
        result['target_sql'] = result['select_sql']
        self.check_strict(result)
        return result

    def translate_view(self, settings: dict):
        """
        Translate a view definition.
        settings: view_code, optional source_schema, source_view_name, target_schema, target_view_name
        """
        view_code = settings['view_code']
        source_view_name = settings.get('source_view_name')
        result = self.new_result(source_view_name)
        if settings.get('target_schema'):
            result['target_schema'] = settings['target_schema']

        sql = self.preprocess(view_code, result)
        expressions = self.parse(sql, result)
        if expressions is None:
            result['target_sql'] = f"-- ERROR parsing view: {result['issues'][-1]['message']}\n/*\n{view_code}\n*/"
            self.check_strict(result)
            return result

        if len(expressions) != 1:
            self.add_issue(result, 'unsupported_statement', 'ERROR', source_view_name or 'view',
                           f"Expected one statement in view definition, found {len(expressions)}")
            result['target_sql'] = f"-- ERROR: view definition contains {len(expressions)} statements\n/*\n{view_code}\n*/"
            self.check_strict(result)
            return result

        return self.translate_view_expression(expressions[0], result, settings)

    def translate_script(self, script):
        """Translate all batches of a T-SQL script, returns one result per statement."""
        results = []
        for batch in self.split_batches(script):
            batch_result = self.new_result()
            sql = self.preprocess(batch, batch_result)
            expressions = self.parse(sql, batch_result)
            if expressions is None:
                batch_result['target_sql'] = f"-- ERROR parsing batch: {batch_result['issues'][-1]['message']}\n/*\n{batch}\n*/"
                results.append(batch_result)
                continue
            for expression in expressions:
                if isinstance(expression, exp.Create) and str(expression.args.get('kind', '')).upper() == 'VIEW':
                    view_result = self.new_result()
                    view_result['issues'].extend(batch_result['issues'])
                    results.append(self.translate_view_expression(expression, view_result, {}))
                elif isinstance(expression, exp.Query):
                    query_result = self.new_result()
                    query_result['issues'].extend(batch_result['issues'])
                    converted = self.convert_expression(expression, query_result)
                    query_result['select_sql'] = converted.sql(dialect='postgres', pretty=self.pretty)
                    query_result['target_sql'] = query_result['select_sql'] + ';'
                    self.check_strict(query_result)
                    results.append(query_result)
                else:
                    other_result = self.new_result()
                    statement_sql = expression.sql(dialect='tsql')
                    self.add_issue(other_result, 'unsupported_statement', 'WARNING', expression.key.upper(),
                                   "Only views and SELECT statements are translated")
                    other_result['target_sql'] = f"-- Statement not translated:\n/*\n{statement_sql}\n*/"
                    results.append(other_result)
        return results

    ## Translation of one statement
    def translate_view_expression(self, expression, result, settings):
        column_names = []
        if isinstance(expression, exp.Create):
            if str(expression.args.get('kind', '')).upper() != 'VIEW':
                self.add_issue(result, 'unsupported_statement', 'ERROR', expression.key.upper(), "Only CREATE VIEW statements are supported")
                result['target_sql'] = f"-- Statement not translated:\n/*\n{expression.sql(dialect='tsql')}\n*/"
                self.check_strict(result)
                return result
            view_target = expression.this
            if isinstance(view_target, exp.Schema):
                column_names = [column.name for column in view_target.expressions]
                view_target = view_target.this
            if not result['source_name']:
                result['source_name'] = view_target.name
            query = expression.expression
        else:
            query = expression

        if not isinstance(query, exp.Query):
            self.add_issue(result, 'unsupported_statement', 'ERROR', result['source_name'] or 'view', "View body is not a SELECT statement")
            result['target_sql'] = f"-- Statement not translated:\n/*\n{expression.sql(dialect='tsql')}\n*/"
            self.check_strict(result)
            return result

        converted = self.convert_expression(query, result)
        result['select_sql'] = converted.sql(dialect='postgres', pretty=self.pretty)

        target_view_name = settings.get('target_view_name') or self.config_parser.convert_names_case(result['source_name'] or 'unnamed_view')
        result['target_name'] = target_view_name
        columns_sql = ''
        if column_names:
            columns_sql = ' (' + ', '.join(self.format_identifier(name) for name in column_names) + ')'
        result['target_sql'] = (f"CREATE OR REPLACE VIEW {self.format_identifier(result['target_schema'], convert_case=False)}."
                                f"{self.format_identifier(target_view_name, convert_case=False)}{columns_sql} AS\n{result['select_sql']};")
        self.check_strict(result)
        return result

    def convert_expression(self, expression, result):
        cte_names = {cte.alias.lower() for cte in expression.find_all(exp.CTE) if cte.alias}

        expression = expression.transform(self.convert_identifier)
        expression = expression.transform(lambda node: self.replace_functions(node, result))
        expression = self.replace_string_concatenation(expression)
        expression = expression.transform(self.replace_data_types)
        expression = expression.transform(lambda node: self.replace_schema_names(node, result, cte_names))
        self.check_unsupported(expression, result)
        return expression

    ## Rules
    def convert_identifier(self, node):
        if isinstance(node, exp.Identifier):
            node.set('this', self.config_parser.convert_names_case(node.this))
            if self.quote_identifiers:
                node.set('quoted', True)
        return node

    def render_template(self, template, arguments, result):
        arguments_sql = [argument.transform(lambda node: self.replace_functions(node, result)).sql(dialect='postgres')
                         for argument in arguments]
        return sqlglot.parse_one(template.format(*arguments_sql), read='postgres')

    def template_arity(self, template):
        indexes = [int(field) for _, field, _, _ in string.Formatter().parse(template) if field and field.isdigit()]
        return max(indexes) + 1 if indexes else 0

    def replace_functions(self, node, result):
        if isinstance(node, exp.DateDiff):
            return self.replace_datediff(node, node.args.get('unit'), node.expression, node.this, result)

        unsupported_name = UNSUPPORTED_FUNCTION_NODES.get(type(node))
        if unsupported_name and any(node.args.get(key) is not None for key in node.arg_types):
            # Keep the T-SQL call with its arguments, it is reported as unsupported
            arguments = [node.args[key].transform(lambda child: self.replace_functions(child, result))
                         for key in node.arg_types if node.args.get(key) is not None]
            return exp.Anonymous(this=unsupported_name, expressions=arguments)

        last_day = getattr(exp, 'LastDay', None)
        if last_day is not None and isinstance(node, last_day) and not node.args.get('unit'):
            return self.render_template(self.function_templates['EOMONTH'], [node.this], result)

        if isinstance(node, exp.TryCast) or (isinstance(node, exp.Cast) and node.args.get('safe')):
            self.add_issue(result, 'unsupported_construct', 'WARNING', 'TRY_CAST',
                           "TRY_CAST/TRY_CONVERT translated to CAST, invalid values raise errors in PostgreSQL")
            return exp.Cast(this=node.this.transform(lambda child: self.replace_functions(child, result)), to=node.args.get('to'))

        if isinstance(node, exp.Anonymous):
            func_name = str(node.name).upper()
            arguments = node.expressions
            if func_name in ('DATEDIFF', 'DATEDIFF_BIG') and len(arguments) == 3:
                return self.replace_datediff(node, arguments[0], arguments[1], arguments[2], result)
            if func_name == 'ISDATE' and len(arguments) == 1:
                return self.replace_isdate(arguments[0], result)
            if func_name in self.function_templates:
                template = self.function_templates[func_name]
                if self.template_arity(template) != len(arguments):
                    self.add_issue(result, 'unsupported_function', 'ERROR', func_name,
                                   f"{func_name} called with {len(arguments)} arguments, translation expects {self.template_arity(template)}")
                    return node
                self.config_parser.print_log_message('DEBUG3', f"Replacing function {func_name} with template {template}")
                return self.render_template(template, arguments, result)
        return node

    def replace_datediff(self, node, unit, start, end, result):
        unit_name = (unit.name if unit is not None else 'day').lower()
        datepart = DATEPART_ALIASES.get(unit_name)
        if not datepart:
            self.add_issue(result, 'unsupported_construct', 'ERROR', f"DATEDIFF({unit_name})", f"Unsupported DATEDIFF unit: {unit_name}")
            return node
        while isinstance(start, DATE_ARGUMENT_WRAPPERS):
            start = start.this
        while isinstance(end, DATE_ARGUMENT_WRAPPERS):
            end = end.this
        return self.render_template(DATEDIFF_TEMPLATES[datepart], [start, end], result)

    def replace_isdate(self, argument, result):
        if self.isdate_strategy == 'pg_input_is_valid':
            template = "CASE WHEN PG_INPUT_IS_VALID(CAST({0} AS TEXT), 'timestamp') THEN 1 ELSE 0 END"
        else:
            if 'isdate' not in result['support_functions']:
                result['support_functions'].append('isdate')
            schema = self.format_identifier(result['target_schema'], convert_case=False)
            template = schema + ".isdate(CAST({0} AS TEXT))"
        return self.render_template(template, [argument], result)

    def replace_string_concatenation(self, expression):
        # Deepest additions first, so chains 'a' + b + 'c' are converted completely
        for node in reversed(list(expression.find_all(exp.Add))):
            operands = (node.this, node.expression)
            if any(isinstance(o, exp.DPipe) or (isinstance(o, exp.Literal) and o.is_string) for o in operands):
                replacement = exp.DPipe(this=node.this, expression=node.expression)
                if node is expression:
                    expression = replacement
                else:
                    node.replace(replacement)
        return expression

    def replace_data_types(self, node):
        if isinstance(node, exp.DataType):
            if node.this == exp.DataType.Type.USERDEFINED and node.args.get('kind'):
                type_name = str(node.args['kind'])
            else:
                type_name = node.this.value if isinstance(node.this, exp.DataType.Type) else str(node.this)
            type_name = type_name.upper()
            parameters = node.expressions
            if type_name in MAX_LENGTH_TYPES and any(p.sql(dialect='tsql').upper() == 'MAX' for p in parameters):
                return exp.DataType.build(MAX_LENGTH_TYPES[type_name])
            if type_name in self.data_types_mapping:
                target_type, keep_parameters = self.data_types_mapping[type_name]
                new_type = exp.DataType.build(target_type)
                if keep_parameters and parameters:
                    new_type.set('expressions', parameters)
                return new_type
        return node

    def map_schema_identifier(self, schema_name):
        target = self.schema_mapping.get(schema_name.lower())
        if target is not None:
            return exp.Identifier(this=target, quoted=self.quote_identifiers)
        if schema_name.lower() == 'information_schema':
            return exp.Identifier(this='information_schema', quoted=False)
        return None

    def replace_schema_names(self, node, result, cte_names):
        # Schema qualified function calls, e.g. CROSS APPLY dbo.fn(...)
        if isinstance(node, exp.Dot) and isinstance(node.expression, exp.Func):
            schema = node.this
            if isinstance(schema, exp.Column) and not schema.table:
                schema = schema.this
            if isinstance(schema, exp.Identifier):
                mapped = self.map_schema_identifier(schema.name)
                if mapped is not None:
                    node.set('this', mapped)
            return node

        if isinstance(node, (exp.Table, exp.Column)):
            catalog = node.args.get('catalog')
            if catalog is not None and catalog.name:
                if not self.source_db_name or catalog.name.lower() != self.source_db_name.lower():
                    self.add_issue(result, 'cross_database_reference', 'WARNING', node.sql(dialect='tsql'),
                                   f"Reference to database {catalog.name} removed, object is expected in the target database")
                node.set('catalog', None)

            schema = node.args.get('db')
            if schema is not None and schema.name:
                mapped = self.map_schema_identifier(schema.name)
                if mapped is not None:
                    node.set('db', mapped)
                if schema.name.lower() == 'sys':
                    self.add_issue(result, 'unsupported_construct', 'ERROR', node.sql(dialect='tsql'),
                                   "SQL Server catalog views have no PostgreSQL equivalent")
            elif (isinstance(node, exp.Table) and self.qualify_unqualified_tables
                  and isinstance(node.this, exp.Identifier) and node.name.lower() not in cte_names):
                node.set('db', exp.Identifier(this=result['target_schema'], quoted=self.quote_identifiers))

            if isinstance(node, exp.Table) and node.args.get('hints'):
                node.set('hints', None)
        return node

    def check_unsupported(self, expression, result):
        for node in expression.find_all(exp.Func):
            func_name = str(node.name).upper() if isinstance(node, exp.Anonymous) else node.sql_name()
            if func_name in UNSUPPORTED_FUNCTIONS:
                self.add_issue(result, 'unsupported_function', 'ERROR', func_name,
                               f"Function {func_name} has no PostgreSQL equivalent and must be rewritten manually")

if __name__ == "__main__":
    print("This script is not meant to be run directly")
