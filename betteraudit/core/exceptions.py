# Copyright (c) 2025 Anush Krishna
# Licensed under the MIT License. See LICENSE file in the project root.

"""Custom exception hierarchy for betteraudit.

All exceptions inherit from BetterAuditError so the CLI can catch
application-specific errors separately from standard Python exceptions.

Exception Hierarchy
-------------------
BetterAuditError (base)
├── ConfigurationError
│   └── UnsupportedConfigTypeError
├── ConfigLoadError
├── ToolExecutionError
└── FileSystemError

Examples
--------
>>> try:
...     raise UnsupportedConfigTypeError('audit.txt')
... except BetterAuditError as e:
...     print(e.details['extension'])
txt
"""


class BetterAuditError(Exception):
    """Base exception for all betteraudit errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    details : dict, optional
        Dictionary containing additional error context. Default is None.

    Attributes
    ----------
    message : str
        The error message.
    details : dict
        Additional error context information.

    Examples
    --------
    >>> error = BetterAuditError("Something went wrong", {"code": 500})
    >>> error.message
    'Something went wrong'
    >>> error.details['code']
    500
    """

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(BetterAuditError):
    """Raised when there are configuration-related issues.

    Parameters
    ----------
    config_key : str
        Configuration key that caused the error.
    message : str
        Error message describing the configuration issue.
    details : dict, optional
        Additional context. Default is None.

    Examples
    --------
    >>> error = ConfigurationError('timeout_s', 'Must be a positive integer')
    >>> error.config_key
    'timeout_s'
    """

    def __init__(self, config_key: str, message: str, details: dict = None):
        details = details or {}
        details['config_key'] = config_key
        super().__init__(f"Configuration error for '{config_key}': {message}", details)
        self.config_key = config_key


class UnsupportedConfigTypeError(ConfigurationError):
    """Raised when an exceptions file has an extension we cannot load.

    Only ``.nsprc`` files and ``.js``/``.ts`` modules are understood. There
    is no fallback for an explicitly named file of another type.

    Parameters
    ----------
    file_path : str
        The configuration path as given by the user.

    Examples
    --------
    >>> error = UnsupportedConfigTypeError('path/to/config.txt')
    >>> error.file_path
    'path/to/config.txt'
    """

    def __init__(self, file_path: str, details: dict = None):
        details = details or {}
        details['path'] = file_path
        details['extension'] = file_path.rsplit('.', 1)[-1]
        super().__init__('config_file', f"Unsupported file type: {file_path}", details)
        self.file_path = file_path


class ConfigLoadError(BetterAuditError):
    """Raised when an executable configuration module cannot be loaded.

    The static ``.nsprc`` reader never raises this; it degrades to "no
    configuration" instead.

    Parameters
    ----------
    file_path : str
        Path of the module that failed to load.
    message : str
        Error message describing the failure.
    details : dict, optional
        Additional context (exit code, stderr, etc.). Default is None.
    """

    def __init__(self, file_path: str, message: str, details: dict = None):
        details = details or {}
        details['path'] = file_path
        super().__init__(f"Failed to load config module '{file_path}': {message}", details)
        self.file_path = file_path


class ToolExecutionError(BetterAuditError):
    """Raised when an external tool (npm, node) fails to execute.

    Parameters
    ----------
    tool_name : str
        Name of the tool that failed.
    message : str
        Error message describing the failure.
    details : dict, optional
        Additional error context (exit code, stderr, etc.). Default is None.

    Examples
    --------
    >>> error = ToolExecutionError('npm', 'Command not found')
    >>> error.tool_name
    'npm'
    >>> error.details['tool']
    'npm'
    """

    def __init__(self, tool_name: str, message: str, details: dict = None):
        details = details or {}
        details['tool'] = tool_name
        super().__init__(f"Tool '{tool_name}' failed: {message}", details)
        self.tool_name = tool_name


class FileSystemError(BetterAuditError):
    """Raised when file system lookups fail.

    Parameters
    ----------
    path : str
        File or directory path that caused the error.
    message : str
        Error message describing the file system failure.
    details : dict, optional
        Additional context. Default is None.

    Examples
    --------
    >>> error = FileSystemError('/', 'Project root not found')
    >>> error.path
    '/'
    """

    def __init__(self, path: str, message: str, details: dict = None):
        details = details or {}
        details['path'] = path
        super().__init__(f"File system error for '{path}': {message}", details)
        self.path = path
