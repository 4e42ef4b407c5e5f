import asyncio
import json
import os
import sys
import threading

from api_client import ApiClient
from config import CYCLE_DELAY, LOG_SERVER_ENABLED, LOG_SERVER_HOST, LOG_SERVER_PORT, WALLETS_PATH
from errors import InputMissing
from flask_log_server import run_flask
from logger import Colors, WalletLogger
from models import Wallet
from wallet_manager import WalletManager

BANNER = f"""{Colors.banner}{Colors.bold}
  _____     _               _     _ _         __  __ _
 |_   _|_ _| | _____ _ __  | |   (_) |_ ___  |  \\/  (_)_ __   ___ _ __
   | |/ _` | |/ / _ \\ '__| | |   | | __/ _ \\ | |\\/| | | '_ \\ / _ \\ '__|
   | | (_| |   <  __/ |    | |___| | ||  __/ | |  | | | | | |  __/ |
   |_|\\__,_|_|\\_\\___|_|    |_____|_|\\__\\___| |_|  |_|_|_| |_|\\___|_|
{Colors.reset}"""

log = WalletLogger("runner", viewer=False)


def read_wallets(path=WALLETS_PATH):
    if not os.path.exists(path):
        raise InputMissing(f"No wallets found in {path}")
    try:
        with open(path, "r") as f:
            records = json.load(f)
    except (OSError, ValueError) as e:
        raise InputMissing(f"Could not read {path}: {e}") from e
    if not isinstance(records, list):
        raise InputMissing(f"{path} must contain a list of wallets")
    wallets = []
    for i, record in enumerate(records):
        try:
            wallets.append(Wallet.from_record(record))
        except (KeyError, TypeError, ValueError) as e:
            log.error(f"Skipping wallet #{i + 1} in {path}: missing or invalid privateKey ({e})")
    if not wallets:
        raise InputMissing(f"No wallets found in {path}")
    return wallets


async def process_wallet(wallet):
    async with ApiClient(wallet.proxy) as client:
        manager = WalletManager(wallet, client, WalletLogger(wallet.address))
        return await manager.process()


async def run_forever(wallets, process=process_wallet, sleep=asyncio.sleep):
    while True:
        log.info(f"Starting processing all wallets: {len(wallets)}")
        for wallet in wallets:
            try:
                await process(wallet)
            except Exception as e:
                log.error(f"Unexpected error for wallet {wallet.address}: {e}")
        log.info(f"All wallets processed, cooling down for {CYCLE_DELAY // 3600} hour(s) before checking again...")
        await sleep(CYCLE_DELAY)


def start_log_server():
    flask_thread = threading.Thread(target=run_flask, daemon=True)
    flask_thread.start()
    log.info(f"Log viewer running at http://{LOG_SERVER_HOST}:{LOG_SERVER_PORT}/")


async def main():
    print(BANNER)
    wallets = read_wallets()
    if LOG_SERVER_ENABLED:
        start_log_server()
    await run_forever(wallets)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except InputMissing as e:
        log.error(f"{e} - exiting program.")
        sys.exit(1)
    except KeyboardInterrupt:
        print("Stopped.")
