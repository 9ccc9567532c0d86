class SessionError(Exception):
    code: str = "session_error"

    def __init__(self, message: str = "", *, code: str | None = None):
        super().__init__(message or self.__class__.__name__)
        if code:
            self.code = code


class SessionNotFoundError(SessionError):
    code = "not_found"


class NotAParticipantError(SessionError):
    code = "not_a_participant"
