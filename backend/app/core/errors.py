"""Domain errors raised by the orchestrators.

Each error carries the HTTP status it maps to. Only not-found and
missing-parameter errors are reported to clients with their own status
and message; everything else surfaces as a generic 500.
"""


class FlowBoardError(Exception):
    def __init__(self, message: str, http_status: int = 500):
        super().__init__(message)
        self.message = message
        self.http_status = http_status

    def to_response(self) -> dict:
        return {"error": self.message}

    def log_context(self) -> dict:
        return {}


class ResourceNotFoundError(FlowBoardError):
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} not found", 404)
        self.resource_type = resource_type
        self.resource_id = resource_id

    def log_context(self) -> dict:
        return {"resource_type": self.resource_type, "resource_id": self.resource_id}


class MissingParameterError(FlowBoardError):
    def __init__(self, name: str):
        super().__init__(f"{name} is required", 400)
        self.name = name

    def log_context(self) -> dict:
        return {"parameter": self.name}


class InvalidInputError(FlowBoardError):
    def __init__(self, message: str, field: str):
        super().__init__(message, 500)
        self.field = field

    def log_context(self) -> dict:
        return {"field": self.field}


CLIENT_ERRORS = (ResourceNotFoundError, MissingParameterError)
