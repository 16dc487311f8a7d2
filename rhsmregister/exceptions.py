# This file is part of rhsm-register. See LICENSE file for license information.


class RegistrationError(Exception):
    """Base class for refusals raised before any command is run."""


class ValidationError(RegistrationError):
    pass


class RequiresForceError(RegistrationError):
    MESSAGE = "Require force => true to register already registered server"

    def __init__(self, name=None):
        self.name = name
        super().__init__(self.MESSAGE)
