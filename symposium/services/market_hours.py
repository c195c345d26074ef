from __future__ import annotations

from datetime import datetime, time
from zoneinfo import ZoneInfo

IST = ZoneInfo("Asia/Kolkata")
MARKET_OPEN_TIME = time(9, 15)
MARKET_CLOSE_TIME = time(15, 30)


def is_market_open(now: datetime | None = None) -> bool:
    """Return whether the NSE/BSE cash session is open in Asia/Kolkata time."""
    current = now or datetime.now(IST)

    if current.tzinfo is None:
        ist_now = current.replace(tzinfo=IST)
    else:
        ist_now = current.astimezone(IST)

    if ist_now.weekday() >= 5:
        return False

    current_time = ist_now.time().replace(second=0, microsecond=0)
    return MARKET_OPEN_TIME <= current_time <= MARKET_CLOSE_TIME
