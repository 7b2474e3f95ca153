"""
Error taxonomy shared by every module.

Collaborator failures (Supabase table calls, Supabase Auth, the step source)
are converted to one of these at the service boundary. The ranking engine and
friend directory only ever raise InternalConsistencyError.
"""


class StepQuestError(Exception):
    status_code = 500
    kind = "error"

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail or self.kind


class NotFoundError(StepQuestError):
    """Profile or friend code lookup miss"""
    status_code = 404
    kind = "not_found"


class UnauthenticatedError(StepQuestError):
    status_code = 401
    kind = "unauthenticated"


class PermissionDeniedError(StepQuestError):
    """Step source refused access to step data"""
    status_code = 403
    kind = "permission_denied"


class UnavailableError(StepQuestError):
    status_code = 503
    kind = "unavailable"


class WriteError(StepQuestError):
    """Profile update failed; the caller retries on the next user action"""
    status_code = 502
    kind = "write_error"


class InternalConsistencyError(StepQuestError):
    """A broken invariant: negative rank gap, duplicate friend code, ..."""
    status_code = 500
    kind = "internal_consistency"


class SelfReferenceError(StepQuestError):
    status_code = 400
    kind = "self_reference"
