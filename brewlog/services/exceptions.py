"""Domain errors raised by the recommendation services."""


class NotFoundError(Exception):
    """Requested record does not exist or is not owned by the caller."""

    pass


class ExperimentNotFoundError(NotFoundError):
    """Experiment not found for this user."""

    def __init__(self, message: str = "Experiment not found"):
        super().__init__(message)


class MappingNotFoundError(NotFoundError):
    """Effect mapping not found for this user."""

    def __init__(self, message: str = "Mapping not found"):
        super().__init__(message)


class DismissalNotFoundError(NotFoundError):
    """No dismissal exists for this experiment/mapping pair."""

    def __init__(self, message: str = "Dismissal not found"):
        super().__init__(message)


class UnsupportedDialectError(RuntimeError):
    """Database backend lacks a feature the service relies on."""

    def __init__(self, dialect: str, feature: str):
        super().__init__(f"{feature} is not supported on the '{dialect}' database")
        self.dialect = dialect
