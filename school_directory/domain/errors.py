class DirectoryError(Exception):
    """Базовая ошибка домена; message уходит клиенту как есть."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(DirectoryError):
    pass


class ConflictError(InvalidInput):
    pass


class NotFound(DirectoryError):
    pass


class InternalError(DirectoryError):
    def __init__(self, message: str = "internal server error"):
        super().__init__(message)
