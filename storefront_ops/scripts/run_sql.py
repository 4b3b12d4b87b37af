# storefront_ops/scripts/run_sql.py
import argparse
import sys
from pathlib import Path

from storefront_ops.db import db, QueryExecutor
from storefront_ops.exceptions import StorefrontError
from storefront_ops.logging_setup import get_logger

logger = get_logger('run_sql')

def split_statements(sql: str):
    """Split a script into statements on ';', skipping blanks and '--' comment lines."""
    lines = [line for line in sql.splitlines() if not line.strip().startswith('--')]
    return [stmt.strip() for stmt in "\n".join(lines).split(';') if stmt.strip()]

def execute_sql_file(file_path, connection_string=None):
    """Execute the statements of a SQL file in one transaction.
    
    Args:
        file_path: Path of the SQL script
        connection_string: Optional database URL overriding the configuration
        
    Returns:
        Total number of affected rows
    """
    with open(file_path, 'r') as f:
        statements = split_statements(f.read())
    
    if connection_string is not None or not db.is_initialized:
        db.initialize(connection_string)
    
    affected = 0
    with db.session_scope() as session:
        executor = QueryExecutor(session)
        for statement in statements:
            count = executor.execute(statement)
            affected += max(count, 0)
    
    logger.info(f"Executed {len(statements)} statements from {file_path}, {affected} rows affected")
    return affected

def main():
    parser = argparse.ArgumentParser(description='Execute a SQL script against the storefront database')
    parser.add_argument('file', type=Path, help='SQL file to execute')
    parser.add_argument('--database-url', help='Database URL (overrides config/settings.ini)')
    args = parser.parse_args()
    
    try:
        affected = execute_sql_file(args.file, args.database_url)
    except (OSError, StorefrontError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    
    print(f"{affected} rows affected")
    return 0

if __name__ == "__main__":
    sys.exit(main())
