"""Errors raised by the knowledge-base agent."""


class KBAgentError(Exception):
    """Base class for every error the agent reports to the user"""


class ConfigError(KBAgentError):
    """Invalid value in the environment or .env file"""


class FileAccessError(KBAgentError):
    """The knowledge base file could not be read"""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class ParseError(KBAgentError):
    """JSON content did not match the expected shape"""


class EmptyResponseError(ParseError):
    """The API answered with zero choices"""


class AuthError(KBAgentError):
    """No API key configured"""


class NetworkError(KBAgentError):
    """Transport failure: DNS, refused connection, timeout"""


class ApiError(KBAgentError):
    """The API answered with a status other than 200"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error {status_code}: {body}")
