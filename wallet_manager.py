import asyncio
import time
from datetime import datetime

from config import INVITE_CODE, RETRY_COUNT, RETRY_DELAY
from contract import activate_mining
from errors import ActivationError, NetworkError, SigningError
from models import Failure, MinerStatus, Ok, Session, UserInfo, dig
from signer import sign_message


def format_ts(ts):
    return datetime.fromtimestamp(ts).strftime('%Y-%m-%d %H:%M:%S')


class WalletManager:
    """Runs one wallet through nonce, login, status check and mining.

    Collaborators are injected so the whole cycle can be driven without
    network access: ``client`` is an ApiClient, ``log`` a WalletLogger,
    ``activate`` the blocking on-chain helper.
    """

    def __init__(self, wallet, client, log, sleep=asyncio.sleep, clock=time.time,
                 activate=activate_mining, retries=RETRY_COUNT, retry_delay=RETRY_DELAY):
        self.wallet = wallet
        self.client = client
        self.log = log
        self.sleep = sleep
        self.clock = clock
        self.activate = activate
        self.retries = retries
        self.retry_delay = retry_delay

    async def with_retries(self, label, call):
        """Await ``call()`` up to ``1 + retries`` times, sleeping between attempts.

        Only NetworkError is retried. Returns Ok(response) or Failure(error, attempts).
        """
        last_error = None
        attempts = self.retries + 1
        for attempt in range(attempts):
            try:
                return Ok(await call())
            except NetworkError as e:
                last_error = e
                if attempt < self.retries:
                    self.log.error(f"Failed to {label}: {e}")
                    self.log.warn(f"Retrying in {self.retry_delay}s... ({self.retries - attempt} attempts left)")
                    await self.sleep(self.retry_delay)
        self.log.error(f"Failed to {label} after {attempts} attempts: {last_error}")
        return Failure(last_error, attempts)

    async def get_nonce(self):
        return await self.with_retries(
            "get nonce",
            lambda: self.client.post("wallet/generateNonce", {"walletAddress": self.wallet.address}),
        )

    async def login(self, session):
        return await self.with_retries(
            "login",
            lambda: self.client.post("wallet/login", {
                "address": self.wallet.address,
                "invitationCode": INVITE_CODE,
                "message": session.nonce,
                "signature": session.signature,
            }),
        )

    async def get_user(self, token):
        return await self.with_retries("get user data", lambda: self.client.get("user/getUserInfo", token))

    async def get_miner_status(self, token):
        return await self.with_retries(
            "get miner status", lambda: self.client.get("assignment/totalMiningTime", token)
        )

    async def start_mine(self, token):
        return await self.with_retries(
            "start mining", lambda: self.client.post("assignment/startMining", {}, token=token)
        )

    async def process(self):
        """Run one cycle for the wallet and return the stage it ended on."""
        address = self.wallet.address

        self.log.stage("nonce")
        nonce_result = await self.get_nonce()
        nonce = dig(nonce_result.value, "data", "nonce") if isinstance(nonce_result, Ok) else None
        if not nonce or not isinstance(nonce, str):
            self.log.error(f"Failed to retrieve nonce for wallet: {address} (got {nonce!r})")
            return self._finish("nonce_failed")
        session = Session(nonce=nonce)

        try:
            session.signature = sign_message(nonce, self.wallet.private_key)
        except SigningError as e:
            self.log.error(f"Failed to sign message for wallet {address}: {e}")
            return self._finish("sign_failed")

        self.log.stage("login")
        self.log.info(f"Trying to login for wallet: {address}")
        login_result = await self.login(session)
        token = dig(login_result.value, "data", "token") if isinstance(login_result, Ok) else None
        if not token:
            self.log.error(f"Login failed for wallet: {address}")
            return self._finish("login_failed")
        session.token = token
        self.log.info("Login successful")

        self.log.info("Trying to check user info...")
        user_result = await self.get_user(session.token)
        user_data = dig(user_result.value, "data") if isinstance(user_result, Ok) else None
        if isinstance(user_data, dict):
            user = UserInfo.from_payload(user_data)
            self.log.info(
                f"User info: userId={user.user_id} twName={user.twitter_handle} totalReward={user.total_reward}"
            )
            if not user.twitter_handle:
                self.log.warn(f"This wallet ({address}) is not bound to Twitter/X")
        else:
            self.log.error(f"Failed to get user data for wallet: {address}")

        self.log.stage("status")
        self.log.info("Trying to check user miner status...")
        status_result = await self.get_miner_status(session.token)
        status_data = dig(status_result.value, "data") if isinstance(status_result, Ok) else None
        if not isinstance(status_data, dict):
            self.log.error(f"Failed to get miner status for wallet: {address}")
            return self._finish("status_failed")
        try:
            miner_status = MinerStatus.from_payload(status_data)
            last_time = format_ts(miner_status.last_mining_time)
            next_time = format_ts(miner_status.next_mining_time)
        except (TypeError, ValueError, OverflowError, OSError) as e:
            self.log.error(f"Bad lastMiningTime {status_data.get('lastMiningTime')!r} for wallet {address}: {e}")
            return self._finish("status_failed")
        self.log.info(f"Last mining time: {last_time}")

        if not miner_status.is_eligible(self.clock()):
            self.log.warn(f"Mining already started, next mining time is: {next_time}")
            return self._finish("cooldown")

        return await self.trigger_mining(session)

    async def trigger_mining(self, session):
        address = self.wallet.address
        self.log.stage("mining")
        self.log.info(f"Trying to start mining for wallet: {address}")
        mine_result = await self.start_mine(session.token)
        if isinstance(mine_result, Failure):
            self.log.error(f"Failed to start mining for wallet: {address}")
            return self._finish("start_failed")
        self.log.info(f"Mine response: {mine_result.value}")

        self.log.info(f"Trying to activate mining on-chain for wallet: {address}")
        loop = asyncio.get_running_loop()
        try:
            tx_hash = await loop.run_in_executor(None, self.activate, self.wallet.private_key, self.wallet.proxy)
        except ActivationError as e:
            self.log.error(f"Wallet already started mining today or has no Taker balance: {e}")
            return self._finish("activation_failed")
        self.log.info(f"Mining activated on-chain: {tx_hash}")
        return self._finish("mined")

    def _finish(self, stage):
        self.log.stage(stage)
        return stage
