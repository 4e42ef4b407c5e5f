import json

import requests
from eth_account import Account
from web3 import Web3, HTTPProvider

from abi import MINING_ABI
from api_client import normalize_proxy
from config import CHAIN_ID, MINING_CONTRACT, MINING_GAS, TAKER_RPC, TX_RECEIPT_TIMEOUT
from errors import ActivationError

mining_abi = json.loads(MINING_ABI)


def get_w3(proxy: str = None) -> Web3:
    """Web3 client for the Taker RPC; socks URLs go through PySocks via requests."""
    session = requests.Session()
    if proxy:
        proxy = normalize_proxy(proxy)
        session.proxies = {"http": proxy, "https": proxy}
    return Web3(HTTPProvider(TAKER_RPC, session=session))


def activate_mining(private_key: str, proxy: str = None, w3: Web3 = None) -> str:
    """Send the mining contract's ``active()`` call and return the tx hash.

    Blocking; run it in an executor from async code. Raises ActivationError
    when the wallet has no balance, the tx reverts, or the RPC fails.
    """
    w3 = w3 or get_w3(proxy)
    address = Account.from_key(private_key).address
    try:
        balance = w3.eth.get_balance(address)
        if balance == 0:
            raise ActivationError(f"Wallet {address} has no balance to pay for gas")
        contract = w3.eth.contract(address=Web3.to_checksum_address(MINING_CONTRACT), abi=mining_abi)
        tx = contract.functions.active().build_transaction({
            "from": address,
            "nonce": w3.eth.get_transaction_count(address),
            "gas": MINING_GAS,
            "gasPrice": w3.eth.gas_price,
            "chainId": CHAIN_ID,
        })
        signed = w3.eth.account.sign_transaction(tx, private_key)
        tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
        receipt = w3.eth.wait_for_transaction_receipt(tx_hash, TX_RECEIPT_TIMEOUT)
    except ActivationError:
        raise
    except Exception as e:
        raise ActivationError(f"Error during mining activation: {e}") from e
    if receipt.status != 1:
        raise ActivationError(f"Activation tx reverted: {w3.to_hex(tx_hash)}")
    return w3.to_hex(tx_hash)
