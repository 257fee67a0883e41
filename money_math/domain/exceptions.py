"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Input would make a calculation meaningless (negative amount, empty term, ...)"""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


class InvalidSlabTableError(InvalidInputError):
    """Tax slab table is not contiguous from zero to an open top slab"""

    def __init__(self, message: str):
        super().__init__("slabs", message)
