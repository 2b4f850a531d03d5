# storefront/domain/errors.py


class UserInputError(ValueError):
    """Bledy wejscia uzytkownika - obslugiwane lokalnie, nigdy fatalne."""


class EmptyCartError(UserInputError):
    pass


class UnknownItemError(UserInputError):
    pass


class InvalidQuantityError(UserInputError):
    pass


class RegistrationError(UserInputError):
    pass


class AuthenticationError(Exception):
    pass


class SessionNotFound(LookupError):
    pass


class CheckoutStateError(RuntimeError):
    """Operacja niedozwolona w aktualnym stanie checkoutu."""


class PersistenceFailure(Exception):
    """Blad zapisu/odczytu snapshotu. Nie wychodzi poza SnapshotStore."""
