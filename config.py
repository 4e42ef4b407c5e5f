import os

API_BASE_URL = os.getenv("TAKER_API", "https://lightmining-api.taker.xyz/")
INVITE_CODE = os.getenv("TAKER_INVITE_CODE", "XX89R")
WALLETS_PATH = os.getenv("WALLETS_PATH", "wallets.json")

REQUEST_TIMEOUT = 30
RETRY_COUNT = 3
RETRY_DELAY = 3
MINING_INTERVAL = 24 * 60 * 60
CYCLE_DELAY = 60 * 60

TAKER_RPC = os.getenv("TAKER_RPC", "https://rpc-mainnet.taker.xyz/")
CHAIN_ID = 1125
MINING_CONTRACT = "0xB3eFE5105b835E5Dd9D206445Dbd66DF24b912AB"
MINING_GAS = 182832
TX_RECEIPT_TIMEOUT = 120

LOG_SERVER_ENABLED = os.getenv("LOG_SERVER_ENABLED", "1") == "1"
LOG_SERVER_HOST = os.getenv("LOG_SERVER_HOST", "127.0.0.1")
LOG_SERVER_PORT = int(os.getenv("LOG_SERVER_PORT", "8080"))
LOG_BUFFER_SIZE = 1000
