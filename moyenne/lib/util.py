import datetime
import typing as t
from collections.abc import Mapping

KT = t.TypeVar("KT")
VT = t.TypeVar("VT")
RecursiveMapping = VT | Mapping[KT, "RecursiveMapping[KT, VT]"]


def deep_update(
    d1: dict[KT, RecursiveMapping[KT, VT]], d2: Mapping[KT, RecursiveMapping[KT, VT]]
) -> dict[KT, RecursiveMapping[KT, VT]]:
    result = d1.copy()
    for k, v in d2.items():
        if isinstance(v, Mapping) and k in result and isinstance(result[k], Mapping):
            result[k] = deep_update(result[k], v)  # type: ignore
        else:
            result[k] = v
    return result


def utc_isoformat(ts: datetime.datetime) -> str:
    """
    Fixed-width ISO-8601 UTC rendering, e.g. 2024-01-31T08:00:00.000Z

    Naive datetimes are taken to be UTC already. Every string has the same
    width so lexical order matches chronological order.
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=datetime.UTC)
    ts = ts.astimezone(datetime.UTC)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"
