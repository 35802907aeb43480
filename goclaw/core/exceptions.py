"""Custom exception hierarchy for the assistant.

Provides typed exceptions so the agent loop and the CLI can decide
which failures end a turn and which are fed back to the model.
"""


class GoclawError(Exception):
    """Base exception for all assistant errors.

    All custom exceptions inherit from this, allowing:
        try:
            ...
        except GoclawError as e:
            # Handle any assistant-specific error
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(GoclawError):
    """Error in configuration.

    Raised at startup when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that caused the error
    """

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(f"Configuration error: {message}", details)
        self.config_key = config_key


class StorageError(GoclawError):
    """Error from the conversation memory store.

    Attributes:
        operation: The store operation that failed
    """

    def __init__(self, message: str, operation: str = "unknown", details: dict | None = None):
        super().__init__(f"Storage error during {operation}: {message}", details)
        self.operation = operation


class LLMError(GoclawError):
    """Error from LLM communication.

    Raised when the completion endpoint cannot be reached.

    Attributes:
        provider: LLM provider (e.g., "zhipu")
        status_code: HTTP status code if applicable
    """

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(f"LLM error ({provider}): {message}", details)
        self.provider = provider
        self.status_code = status_code


class ApiError(LLMError):
    """Non-2xx response from the completion endpoint.

    Attributes:
        status_code: HTTP status code
        body: Raw response body
    """

    def __init__(self, status_code: int, body: str, provider: str = "zhipu"):
        super().__init__(
            f"API error (status {status_code}): {body}",
            provider=provider,
            status_code=status_code,
        )
        self.body = body


class DecodeError(LLMError):
    """Completion endpoint returned a body that is not a valid response."""

    def __init__(self, message: str, provider: str = "zhipu", details: dict | None = None):
        super().__init__(f"failed to decode response: {message}", provider=provider, details=details)


class ToolError(GoclawError):
    """Error during tool dispatch or execution.

    Tool errors never abort a turn; the agent loop renders them as the
    tool result so the model can recover.

    Attributes:
        tool_name: Name of the tool that failed
    """

    def __init__(self, tool_name: str, message: str, details: dict | None = None):
        super().__init__(message, details)
        self.tool_name = tool_name


class UnknownTool(ToolError):
    """The model asked for a tool that is not registered."""

    def __init__(self, tool_name: str):
        super().__init__(tool_name, f"tool not found: {tool_name}")


class ArgumentParseError(ToolError):
    """Tool-call arguments are not a JSON object matching the tool schema."""

    def __init__(self, tool_name: str, message: str, details: dict | None = None):
        super().__init__(tool_name, f"failed to parse arguments: {message}", details)


class ToolExecutionError(ToolError):
    """A tool handler failed while executing."""

    def __init__(self, tool_name: str, message: str, details: dict | None = None):
        super().__init__(tool_name, f"tool execution failed: {message}", details)


class TurnBudgetExceeded(GoclawError):
    """The model kept requesting tools past the per-turn round limit.

    Attributes:
        rounds: Number of tool rounds executed before giving up
    """

    def __init__(self, rounds: int):
        super().__init__(f"tool-call budget exceeded after {rounds} rounds")
        self.rounds = rounds
