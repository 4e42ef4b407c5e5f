from dataclasses import dataclass
from typing import Any

from eth_account import Account

from config import MINING_INTERVAL


@dataclass(frozen=True)
class Wallet:
    address: str
    private_key: str
    proxy: str | None = None

    @classmethod
    def from_record(cls, record: dict) -> "Wallet":
        private_key = record["privateKey"]
        address = record.get("address") or Account.from_key(private_key).address
        return cls(address=address, private_key=private_key, proxy=record.get("proxy") or None)


@dataclass
class Session:
    nonce: str
    signature: str = ""
    token: str = ""


@dataclass(frozen=True)
class UserInfo:
    user_id: Any
    twitter_handle: str | None
    total_reward: Any

    @classmethod
    def from_payload(cls, data: dict) -> "UserInfo":
        return cls(
            user_id=data.get("userId"),
            twitter_handle=data.get("twName") or None,
            total_reward=data.get("totalReward", 0),
        )


@dataclass(frozen=True)
class MinerStatus:
    last_mining_time: int

    @classmethod
    def from_payload(cls, data: dict) -> "MinerStatus":
        return cls(last_mining_time=int(data.get("lastMiningTime") or 0))

    @property
    def next_mining_time(self) -> int:
        return self.last_mining_time + MINING_INTERVAL

    def is_eligible(self, now: float) -> bool:
        return now > self.next_mining_time


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class Failure:
    error: Exception
    attempts: int


Result = Ok | Failure


def dig(payload, *keys):
    """Walk nested dicts, returning None as soon as a level is missing."""
    for key in keys:
        if not isinstance(payload, dict):
            return None
        payload = payload.get(key)
    return payload
