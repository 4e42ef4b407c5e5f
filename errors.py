class MinerError(Exception):
    """Base error for the miner."""


class InputMissing(MinerError):
    """Wallet file is missing, unreadable or empty."""


class NetworkError(MinerError):
    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status


class SigningError(MinerError):
    pass


class ActivationError(MinerError):
    """On-chain mining activation did not go through."""
