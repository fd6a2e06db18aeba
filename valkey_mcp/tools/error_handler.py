"""
valkey_mcp/tools/error_handler.py
=================================

Error types raised by the tools, and user-friendly formatting of failures.

Error taxonomy
--------------
Every error a tool raises derives from ``ValkeyToolError``:

- ``InvalidInputError``: the raw JSON arguments could not be decoded or did
  not match the declared field types.
- ``ToolValidationError``: the arguments decoded fine but break a business
  rule (empty key, conflicting flags, slot out of range).  Always raised
  before any command is sent.
- ``CommandError``: the server or the connection failed.  Each layer
  prefixes its own context, so the final message reads like
  ``failed to get string for key 'k': GET failed: <cause>``.
- ``DuplicateToolError`` / ``ToolNotFoundError`` / ``ToolExecutionError``:
  raised by the registry.

Absence (missing key, missing field) is never an error; tools report it
through ``exists`` flags.

Design Strategy
---------------
Raw server replies such as ``WRONGTYPE Operation against a key holding the
wrong kind of value`` are precise but terse.  ``ErrorHandler`` matches the
exception message against known patterns and returns a short explanation
plus concrete suggestions that an LLM client can act on.  It is implemented
as static methods; the patterns are class-level constants.
"""

import re
from typing import Dict, List, Tuple


class ValkeyToolError(Exception):
    """Base class for every error raised by a tool or the registry."""


class InvalidInputError(ValkeyToolError):
    """Malformed JSON input, or input whose values have the wrong type."""


class ToolValidationError(ValkeyToolError):
    """Input that violates a business rule; no command was sent."""


class CommandError(ValkeyToolError):
    """A Valkey command failed."""


class DuplicateToolError(ValkeyToolError):
    """A tool with the same name is already registered."""


class ToolNotFoundError(ValkeyToolError):
    """No tool with the requested name is registered."""


class ToolExecutionError(ValkeyToolError):
    """A registered tool raised while executing."""


class ErrorHandler:
    """Translates raw exceptions into user-friendly messages with suggestions.

    Attributes
    ----------
    VALKEY_ERRORS:
        Map of error pattern (regex) → ``{type, message, suggestions}``.
    """

    # ── Valkey error patterns ─────────────────────────────────────────────────
    # Keys are regex patterns matched against the lowercased exception message.
    VALKEY_ERRORS: Dict[str, dict] = {
        "wrongtype": {
            "type": "WrongType",
            "message": "The key holds a different data type than this command expects.",
            "suggestions": [
                "Use get_key_type to see what the key actually holds",
                "Pick the tool matching that type (string, hash, list, set, stream)",
            ],
        },
        "noscript": {
            "type": "ScriptNotFound",
            "message": "No script with this SHA1 is loaded on the server.",
            "suggestions": [
                "Load the script first with script_load",
                "Or run the source directly with eval_script",
            ],
        },
        "not an integer|not a valid float|would overflow": {
            "type": "NotANumber",
            "message": "The stored value (or the amount given) is not a valid number.",
            "suggestions": [
                "Check the current value with get_string or get_hash_field",
                "Only increment keys and fields that hold integers",
            ],
        },
        "no such key": {
            "type": "KeyNotFound",
            "message": "The key does not exist.",
            "suggestions": [
                "Check the key name spelling",
                "Use scan_keys to find existing keys",
            ],
        },
        "busykey": {
            "type": "KeyExists",
            "message": "The target key already exists.",
            "suggestions": [
                "Delete the existing key with delete_keys before restoring",
                "Restore into a different key name",
            ],
        },
        "dump payload version or checksum are wrong|bad data format": {
            "type": "InvalidDump",
            "message": "The serialized payload is corrupt or from an incompatible server version.",
            "suggestions": [
                "Pass the exact base64 string returned by dump_key",
                "Make sure source and target servers run compatible versions",
            ],
        },
        "index out of range": {
            "type": "IndexOutOfRange",
            "message": "The list index is outside the list.",
            "suggestions": [
                "Check the list size with get_list_length",
                "Use negative indexes to count from the end",
            ],
        },
        "noauth|wrongpass|invalid password|invalid username-password": {
            "type": "AuthenticationFailed",
            "message": "The server rejected the credentials.",
            "suggestions": [
                "Set VALKEY_PASSWORD (or the password in VALKEY_URL)",
                "Verify the ACL user has access to this command",
            ],
        },
        "noperm": {
            "type": "PermissionDenied",
            "message": "The connected user is not allowed to run this command or touch this key.",
            "suggestions": [
                "Check the ACL rules for the configured user",
            ],
        },
        "cluster support disabled": {
            "type": "ClusterDisabled",
            "message": "The server is not running in cluster mode.",
            "suggestions": [
                "Cluster tools only work against a cluster-enabled server",
                "Use server_info to inspect a standalone server instead",
            ],
        },
        "unknown option or number of arguments for config|unsupported config parameter|unknown option": {
            "type": "UnknownConfig",
            "message": "The configuration parameter is unknown or cannot be changed at runtime.",
            "suggestions": [
                "Check the parameter name with config_get using a glob such as 'max*'",
            ],
        },
        "connection refused|error connecting|timeout|timed out|connection reset|connection closed": {
            "type": "ConnectionError",
            "message": "Could not reach the Valkey server.",
            "suggestions": [
                "Check that the server is running and VALKEY_URL is correct",
                "Try server_ping to measure connectivity",
                "Retry once the server is reachable again",
            ],
        },
    }

    @staticmethod
    def handle_valkey_error(error: Exception) -> Tuple[str, str, List[str]]:
        """Match an exception to a known Valkey error pattern.

        Parameters
        ----------
        error:
            Exception raised by a tool, usually a ``CommandError``.

        Returns
        -------
        Tuple[str, str, List[str]]
            ``(error_type, user_message, suggestions)``
        """
        error_str = str(error).lower()
        for pattern, info in ErrorHandler.VALKEY_ERRORS.items():
            if re.search(pattern, error_str):
                return info["type"], info["message"], info["suggestions"]

        if isinstance(error, InvalidInputError):
            return (
                "InvalidInput",
                "The tool arguments could not be parsed.",
                ["Check the argument names and types against the tool's input schema"],
            )
        if isinstance(error, ToolValidationError):
            return (
                "ValidationError",
                "The tool arguments are not valid for this operation.",
                ["Fix the argument described in the technical details and retry"],
            )

        return (
            "ValkeyError",
            "An error occurred while running the Valkey command.",
            [
                "Check the error details above",
                "Verify the key exists and holds the expected type",
            ],
        )

    @staticmethod
    def format_error_response(
        error: Exception,
        error_type: str,
        message: str,
        suggestions: List[str],
        tool_name: str = "",
    ) -> str:
        """Render a user-facing error response string.

        Parameters
        ----------
        error:
            Original exception (used for the technical details section).
        error_type:
            Short error category label.
        message:
            User-friendly description of what went wrong.
        suggestions:
            Ordered list of things to try.
        tool_name:
            Optional name of the tool that failed.

        Returns
        -------
        str
            Markdown-formatted error response.
        """
        response = f"❌ **{error_type}**\n\n{message}\n\n"

        if tool_name:
            response += f"**Tool:** `{tool_name}`\n\n"

        if suggestions:
            response += "**💡 Suggestions:**\n"
            for i, suggestion in enumerate(suggestions, 1):
                response += f"{i}. {suggestion}\n"

        response += f"\n**Technical Details:**\n{error}"
        return response

    @staticmethod
    def describe(error: Exception, tool_name: str = "") -> str:
        """Classify ``error`` and render it in one call."""
        error_type, message, suggestions = ErrorHandler.handle_valkey_error(error)
        return ErrorHandler.format_error_response(error, error_type, message, suggestions, tool_name)
