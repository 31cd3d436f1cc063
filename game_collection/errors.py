"""Error kinds raised by the game service."""


class GameCollectionError(Exception):
    """Base class for every error the game service signals."""

    message = "erreur"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(GameCollectionError):
    """One or more field rules failed. Carries every message, never just the first."""

    message = "payload invalide"

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class InvalidIdError(GameCollectionError):
    message = "id invalide"


class NotFoundError(GameCollectionError):
    message = "non trouvé"


class NoFieldsError(GameCollectionError):
    message = "Aucun champ à mettre à jour"


class StoreUnavailableError(GameCollectionError):
    """The store failed. The cause is chained and logged, never shown to clients."""

    message = "erreur serveur"
