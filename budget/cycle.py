"""給料日サイクル（25日〜翌月24日）の月度計算.

period_for_date()        : 日付が属する月度を返す
current_period()         : 今日が属する月度
adjacent_period()        : 前後の月度へ移動（月度の切り替えは必ずこれを使う）
previous_period_month()  : 今日の月度の一つ前 (year, month)。光熱費の参照用
period_from_key()        : 'YYYY-MM' から月度を組み立てる
resolve_period()         : URL の ?period= を月度に。不正なら今日の月度
remaining_days()         : 月度末日までの残り日数（今日を含む、最小 1）

月度は開始月の名前で呼ぶ。例: 2023-12-25〜2024-01-24 は「12月度」。
"""

from dataclasses import dataclass
from datetime import date

PERIOD_START_DAY = 25
PERIOD_END_DAY = 24


@dataclass(frozen=True)
class Period:
    """一つの月度。永続化せず、必要なたびに計算し直す."""

    year: int
    month: int
    start: date
    end: date
    label: str

    @property
    def key(self):
        """外部の光熱費テーブルと突き合わせる 'YYYY-MM' 形式のキー."""
        return period_key(self.year, self.month)

    @property
    def start_str(self):
        return self.start.isoformat()

    @property
    def end_str(self):
        return self.end.isoformat()

    @property
    def month_label(self):
        return f"{self.month}月度"


def format_date(year, month, day):
    """'YYYY-MM-DD' 形式（月・日はゼロ埋め）."""
    return f"{year}-{month:02d}-{day:02d}"


def period_key(year, month):
    return f"{year}-{month:02d}"


def _shift_month(year, month, step):
    month += step
    if month == 0:
        return year - 1, 12
    if month == 13:
        return year + 1, 1
    return year, month


def _build_period(year, month):
    end_year, end_month = _shift_month(year, month, 1)
    return Period(
        year=year,
        month=month,
        start=date(year, month, PERIOD_START_DAY),
        end=date(end_year, end_month, PERIOD_END_DAY),
        label=f"{month}月度（{month}/{PERIOD_START_DAY}〜{end_month}/{PERIOD_END_DAY}）",
    )


def period_for_date(d):
    """25日以降 → 当月度、24日以前 → 前月度."""
    if d.day >= PERIOD_START_DAY:
        return _build_period(d.year, d.month)
    year, month = _shift_month(d.year, d.month, -1)
    return _build_period(year, month)


def current_period(today=None):
    return period_for_date(today or date.today())


def adjacent_period(year, month, direction):
    """月度を direction (-1 / +1) だけ移動した月度を返す."""
    if direction not in (-1, 1):
        raise ValueError(f"direction must be -1 or 1, got {direction!r}")
    return _build_period(*_shift_month(year, month, direction))


def previous_period_month(today=None):
    """今日が属する月度の一つ前の (year, month)."""
    current = current_period(today)
    return _shift_month(current.year, current.month, -1)


def period_from_key(key):
    """'YYYY-MM' から月度を組み立てる。不正な値は ValueError."""
    try:
        year_part, month_part = key.split("-")
        year, month = int(year_part), int(month_part)
    except (AttributeError, ValueError):
        raise ValueError(f"invalid period key: {key!r}")
    if not 1 <= month <= 12 or not 2 <= year <= 9998:
        raise ValueError(f"invalid period key: {key!r}")
    return _build_period(year, month)


def resolve_period(key, today=None):
    """?period= の値から月度を決める。空か不正なら today の月度."""
    if key:
        try:
            return period_from_key(key)
        except ValueError:
            pass
    return current_period(today)


def remaining_days(period_end, today=None):
    """今日から period_end までの日数（両端を含む）。今日が末日を過ぎていても 1 を下回らない."""
    if isinstance(period_end, str):
        period_end = date.fromisoformat(period_end)
    today = today or date.today()
    return max(1, (period_end - today).days + 1)
