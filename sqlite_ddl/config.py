"""
Configuration file for the DDL front end.
Contains the tunable parameters for rendering, error reporting and logging.
"""

# ============================================================================
# Serializer Configuration
# ============================================================================

# Indentation for each column / table constraint line inside CREATE TABLE
INDENT = '  '

# Quote character used when an identifier has to be quoted
IDENTIFIER_QUOTE = '"'

# Separator between items of a column list: PRIMARY KEY (a, b)
COLUMN_LIST_SEPARATOR = ', '

# ============================================================================
# Parser Configuration
# ============================================================================

# Parser error messages include line and column numbers
PARSER_DETAILED_ERRORS = True

# Maximum length of the "found" excerpt quoted in error messages
ERROR_EXCERPT_LENGTH = 20

# ============================================================================
# Debug and Logging
# ============================================================================

# Enable debug logging
DEBUG = False

# Log file location (None logs to stderr)
LOG_FILE = None

# Verbose output
VERBOSE = False

# Format for log records
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

# ============================================================================
# REPL Configuration
# ============================================================================

PROMPT = 'ddl> '
CONTINUATION_PROMPT = ' -> '
