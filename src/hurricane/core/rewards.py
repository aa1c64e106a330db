from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Optional

from hurricane.core.scores import MAX_SCORE, TX_SLOTS
from hurricane.core.subjects import Subject

BARS_PER_CYCLE = 10
# Bars earned by a perfect score in each slot kind.
SLOT_BARS = {"tx": 1, "gk": 2, "ck": 3}

QUOTES = [
    "Chúc mừng bạn đã nỗ lực! 🌪️",
    "Chăm chỉ mới thành công! ✨",
    "Bứt phá mọi giới hạn cùng Hurricane AI! 🚀",
    "Học tập là chìa khóa của tương lai! 🔑",
    "Bạn đang đi đúng hướng đấy! 🌟",
    "Kiên trì là mẹ thành công! 💪",
]


def lifetime_bars(subjects: Iterable[Subject]) -> int:
    total = 0
    for s in subjects:
        if not s.is_graded:
            continue
        for entry in (s.hk1, s.hk2):
            total += sum(SLOT_BARS["tx"] for slot in TX_SLOTS if entry.get(slot) == MAX_SCORE)
            if entry.gk == MAX_SCORE:
                total += SLOT_BARS["gk"]
            if entry.ck == MAX_SCORE:
                total += SLOT_BARS["ck"]
    return total


def current_bars(total: int, redeemed_cycles: int) -> int:
    return max(0, total - redeemed_cycles * BARS_PER_CYCLE)


@dataclass(frozen=True)
class RewardClaim:
    redeemed_cycles: int
    quote: Optional[str]

    @property
    def claimed(self) -> bool:
        return self.quote is not None


def claim_reward(total: int, redeemed_cycles: int, rng: Optional[random.Random] = None) -> RewardClaim:
    if current_bars(total, redeemed_cycles) < BARS_PER_CYCLE:
        return RewardClaim(redeemed_cycles=redeemed_cycles, quote=None)
    quote = (rng or random).choice(QUOTES)
    return RewardClaim(redeemed_cycles=redeemed_cycles + 1, quote=quote)
