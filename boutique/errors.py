# boutique/errors.py


class BoutiqueError(Exception):
    """Base class for errors raised by the service layer."""


class NotFoundError(BoutiqueError):
    def __init__(self, what: str, ident):
        super().__init__(f"{what} {ident} not found")
        self.what = what
        self.ident = ident


class OrderNumberingError(BoutiqueError):
    """The order-number counter could not be advanced."""


class NoSubscriptionsError(BoutiqueError):
    """The user has no registered push endpoints."""


class StorageError(BoutiqueError):
    """The file storage service rejected or failed an operation."""
