from eth_account import Account
from eth_account.messages import encode_defunct
from web3 import Web3

from errors import SigningError


def sign_message(message: str, private_key: str) -> str:
    """Personal-sign (EIP-191) ``message`` and return the 0x-prefixed signature."""
    try:
        signed_message = Account.sign_message(encode_defunct(text=message), private_key)
    except (ValueError, TypeError) as e:
        raise SigningError(f"Error signing message: {e}") from e
    return Web3.to_hex(signed_message.signature)
