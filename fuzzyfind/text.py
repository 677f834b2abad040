"""Centralized user-facing text for the fuzzyfind CLI."""

from __future__ import annotations


class Styles:
    ERROR = "red"
    WARNING = "yellow"
    SUCCESS = "green"
    INFO = "dim"
    TITLE = "bold cyan"
    TABLE_HEADER = "bold magenta"


class Messages:
    APP_HELP = "fuzzyfind - instant fuzzy file-name search over a directory tree."
    HELP_QUERY = "Text matched against file names (empty lists entries in scan order)."
    HELP_SEARCH_PATH = "Root directory to scan."
    HELP_SEARCH_TOP = "Number of results to display (defaults to the configured value)."
    HELP_INCLUDE_HIDDEN = "Include hidden files and directories."
    HELP_RESPECT_GITIGNORE = "Do not skip entries matched by .gitignore files."
    HELP_IGNORE_PATTERNS = (
        "Ignore pattern; '*.ext' matches a file-name suffix, anything else matches "
        "when it appears in the relative path. Repeat or comma-separate."
    )
    HELP_EXTENSIONS = "Only show results with these extensions (e.g. py, .md)."
    HELP_KIND = "Restrict results to files, directories or both."
    HELP_SEARCH_FORMAT = "Output format: rich, porcelain (tab separated) or porcelain-z."
    HELP_VERBOSE = "Log engine activity to stderr."
    HELP_INTERACTIVE = "Scan a directory once and filter it as you type queries."
    HELP_EXTENSIONS_COMMAND = "List the file extensions found under a directory."
    HELP_SET_TOP = "Set the default number of results."
    HELP_SET_BATCH = "Set the number of entries scored per parallel batch."
    HELP_SET_CACHE_CAPACITY = "Set how many distinct queries the result cache holds."
    HELP_SET_WORKERS = "Set the worker thread count used for scanning and scoring."
    HELP_SET_IGNORE = "Replace the default ignore patterns (comma separated)."
    HELP_CLEAR_IGNORE = "Remove all default ignore patterns."
    HELP_SET_INCLUDE_HIDDEN = "Set whether hidden entries are scanned by default (true/false)."
    HELP_SET_RESPECT_GITIGNORE = "Set whether .gitignore rules apply by default (true/false)."
    HELP_SHOW_CONFIG = "Show current configuration."

    ERROR_TOP_INVALID = "--top must be greater than 0."
    ERROR_BATCH_INVALID = "Batch size must be greater than 0."
    ERROR_CACHE_CAPACITY_INVALID = "Cache capacity must be >= 0."
    ERROR_WORKERS_INVALID = "Worker count must be greater than 0."
    ERROR_IGNORE_CONFLICT = "--set-ignore and --clear-ignore cannot be used together."
    ERROR_BOOLEAN_INVALID = "Invalid boolean value '{value}'. Use true/false."
    ERROR_EXTENSIONS_EMPTY = "--ext was given but no usable extension remained."
    ERROR_CONFIG_JSON_INVALID = "Config JSON must be an object."
    ERROR_CONFIG_VALUE_INVALID = "Config value for '{field}' is invalid."

    INFO_SCAN_RUNNING = "Scanning {path}..."
    INFO_SCAN_PROGRESS = "Scanning {path}... {count} entries found"
    INFO_SCAN_DONE = "Found {count} entries under {path}."
    INFO_SCAN_ERRORS = "Skipped {count} unreadable director{plural}."
    INFO_NO_ENTRIES = "No files found in the selected directory."
    INFO_NO_RESULTS = "No matching files found."
    INFO_NO_EXTENSIONS = "No file extensions found."
    INFO_INTERACTIVE_HINT = "Type a query and press Enter. ':r' rescans, ':q' quits."
    INFO_INTERACTIVE_PROMPT = "query"
    INFO_TOP_SET = "Default result count set to {value}."
    INFO_BATCH_SET = "Batch size set to {value}."
    INFO_CACHE_CAPACITY_SET = "Cache capacity set to {value}."
    INFO_WORKERS_SET = "Worker count set to {value}."
    INFO_IGNORE_SET = "Ignore patterns set to {value}."
    INFO_IGNORE_CLEARED = "Ignore patterns cleared."
    INFO_INCLUDE_HIDDEN_SET = "Hidden entries {value} by default."
    INFO_RESPECT_GITIGNORE_SET = ".gitignore rules {value} by default."
    INFO_CONFIG_SUMMARY = (
        "Default results: {top}\n"
        "Batch size: {batch}\n"
        "Cache capacity: {cache}\n"
        "Workers: {workers}\n"
        "Ignore patterns: {ignore}\n"
        "Include hidden: {hidden}\n"
        "Respect .gitignore: {gitignore}"
    )

    TABLE_TITLE = "fuzzyfind results"
    TABLE_HEADER_INDEX = "#"
    TABLE_HEADER_SCORE = "Score"
    TABLE_HEADER_PATH = "Path"
    TABLE_SUMMARY = "{shown} of {total} indexed entries"
