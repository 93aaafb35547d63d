"""Argument errors raised before any request reaches the SMS Pilot API."""


class SmsPilotArgumentError(ValueError):
    """Base class for invalid client or send arguments."""


class InvalidAPIKeyError(SmsPilotArgumentError):
    pass


class InvalidLocaleError(SmsPilotArgumentError):
    pass


class InvalidMessageError(SmsPilotArgumentError):
    pass


class InvalidPhoneError(SmsPilotArgumentError):
    pass


class InvalidSenderNameError(SmsPilotArgumentError):
    pass
