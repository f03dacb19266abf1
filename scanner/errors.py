class MerterError(Exception):
    pass


class InputError(MerterError):
    """Bad csv file, unreadable settings or similar user-facing problems."""


class TransportError(MerterError):
    def __init__(self, endpoint: str, message: str):
        super().__init__(f"{endpoint or '<no endpoint>'}: {message}")
        self.endpoint = endpoint
        self.message = message
