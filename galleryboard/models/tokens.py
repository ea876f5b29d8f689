"""Enumerated tokens accepted by the filtering engine."""

from enum import Enum


class RangeToken(str, Enum):
    """Named date-range buckets, evaluated relative to "today"."""

    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    THIS_WEEK = "thisWeek"
    THIS_MONTH = "thisMonth"
    NEXT_30 = "next30"


class VenueType(str, Enum):
    """Venue classification used by the venue-type filter and badges."""

    ALL = "all"
    MAJOR = "major"
    INDEPENDENT = "independent"


# Explicit "no temporal filter" request. Omitting the range means UPCOMING.
ALL_TIME = "all"

# Prefecture sentinel meaning "do not filter by prefecture"
ALL_PREFECTURES = "all"

DEFAULT_RANGE = RangeToken.UPCOMING

PREFECTURES: tuple[str, ...] = (
    "北海道",
    "青森県",
    "岩手県",
    "宮城県",
    "秋田県",
    "山形県",
    "福島県",
    "茨城県",
    "栃木県",
    "群馬県",
    "埼玉県",
    "千葉県",
    "東京都",
    "神奈川県",
    "新潟県",
    "富山県",
    "石川県",
    "福井県",
    "山梨県",
    "長野県",
    "岐阜県",
    "静岡県",
    "愛知県",
    "三重県",
    "滋賀県",
    "京都府",
    "大阪府",
    "兵庫県",
    "奈良県",
    "和歌山県",
    "鳥取県",
    "島根県",
    "岡山県",
    "広島県",
    "山口県",
    "徳島県",
    "香川県",
    "愛媛県",
    "高知県",
    "福岡県",
    "佐賀県",
    "長崎県",
    "熊本県",
    "大分県",
    "宮崎県",
    "鹿児島県",
    "沖縄県",
)
