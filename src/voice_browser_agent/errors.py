"""Exception hierarchy for the browser agent backend."""


class AgentError(Exception):
    """Base exception for all agent errors."""


class NotFoundError(AgentError):
    """A referenced record does not exist."""


class TemplateNotFoundError(NotFoundError):
    """Unknown task template id."""


class SessionNotFoundError(NotFoundError):
    """Unknown browser session id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


# Collaborators
class GeneratorError(AgentError):
    """The completion service failed or returned an unusable payload."""


class WordPressError(AgentError):
    """A WordPress REST call failed."""
