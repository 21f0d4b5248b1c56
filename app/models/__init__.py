from .user import User
from .prayer import PrayerRequest, PrayerLog
from .prayer_chain import PrayerChain, ChainMember, PrayerCommitment
from .system_log import SystemLog

__all__ = [
    "User",
    "PrayerRequest",
    "PrayerLog",
    "PrayerChain",
    "ChainMember",
    "PrayerCommitment",
    "SystemLog",
]
