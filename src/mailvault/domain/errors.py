"""Error taxonomy shared by the producer and consumer paths."""


class MailvaultError(Exception):
    """Base class for all mailvault errors."""


class AuthError(MailvaultError):
    """A presented token was missing or did not match the shared secret."""


class EmailValidationError(MailvaultError):
    """An email record failed structural validation."""


class TransportError(MailvaultError):
    """The queue could not accept, return or delete a message."""


class ParseError(MailvaultError):
    """A dequeued message body could not be decoded."""


class ArchiveError(MailvaultError):
    """Writing an archived record to the object store failed."""


class SecretStoreError(MailvaultError):
    """The shared token could not be fetched from the secret store."""
