import logging
import os
import tempfile
import yaml
from tsql_pg_migrator.config_parser import ConfigParser

TEST_LOG_FILE = os.path.join(tempfile.gettempdir(), 'tsql_pg_migrator_tests.log')

class DummyArgs:
    def __init__(self, config=None, input=None, output_dir=None, dry_run=False, log_level='INFO', log_file=TEST_LOG_FILE):
        self.config = config
        self.input = input
        self.output_dir = output_dir
        self.dry_run = dry_run
        self.log_level = log_level
        self.log_file = log_file
        self.version = False

def write_config(directory, config):
    path = os.path.join(directory, 'config.yaml')
    with open(path, 'w') as file:
        yaml.safe_dump(config, file)
    return path

def make_config_parser(config=None, **args):
    """ConfigParser over a temporary YAML file, an empty config means file mode."""
    config_file = None
    if config is not None:
        directory = tempfile.mkdtemp()
        config_file = write_config(directory, config)
    return ConfigParser(DummyArgs(config=config_file, **args), logging.getLogger('migrator'))

DATABASE_CONFIG = {
    'source': {
        'type': 'mssql',
        'connectivity': 'odbc',
        'host': 'mssql.example.com',
        'port': 1433,
        'database': 'Clinic',
        'schema': 'dbo',
        'username': 'sa',
        'password': 'secret',
        'odbc': {'driver': 'ODBC Driver 18 for SQL Server', 'trust_server_certificate': True},
    },
    'target': {
        'type': 'postgresql',
        'host': 'localhost',
        'port': 5432,
        'database': 'clinic',
        'schema': 'public',
        'username': 'postgres',
        'password': 'secret',
    },
}
