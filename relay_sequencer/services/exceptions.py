"""
Service Layer Exceptions

Custom exceptions for the ProgramService and the repositories it reads from.
"""


class ProgramNotFoundError(LookupError):
    """Raised when no program with the requested id exists in the store."""

    def __init__(self, program_id: str):
        super().__init__(f"Program '{program_id}' not found.")
        self.program_id = program_id


class ProgramDisabledError(Exception):
    """Raised when starting a program that has been switched off by the user."""

    def __init__(self, program_id: str):
        super().__init__(f"Program '{program_id}' is disabled.")
        self.program_id = program_id


class RelayDisabledError(Exception):
    """Raised when manually switching an output the user has disabled."""

    def __init__(self, relay: int):
        super().__init__(f"Relay {relay} is disabled.")
        self.relay = relay


class EngineBusyError(Exception):
    """Raised when manual relay control is attempted while a program or an all-off sweep is running."""

    def __init__(self):
        super().__init__("A program is running; stop it before switching relays by hand.")
