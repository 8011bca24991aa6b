from __future__ import annotations

import datetime
import enum
import functools
import json as pyjson
import typing as t

import pydantic as p

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]


def encode_datetime(obj: datetime.datetime | datetime.date) -> str:
    return obj.isoformat()


def encode_enum(obj: enum.Enum) -> JSONValue:
    return obj.value


def encode_pydantic(obj: p.BaseModel) -> dict[str, JSONValue]:
    return obj.model_dump(mode="json", by_alias=True)


@functools.cache
def _encoder_map() -> dict[type, t.Callable[[t.Any], JSONValue]]:
    return {
        datetime.date: encode_datetime,
        datetime.datetime: encode_datetime,
        enum.Enum: encode_enum,
    }


# stdlib-compatible JSON encoder
class JSONEncoder(pyjson.JSONEncoder):
    def default(self, o: t.Any) -> JSONValue:
        if isinstance(o, p.BaseModel):
            return encode_pydantic(o)

        encoders = _encoder_map()
        for tp in encoders:
            if isinstance(o, tp):
                return encoders[tp](o)

        return pyjson.JSONEncoder.default(self, o)


def dumps(obj: t.Any, *, indent: int | None = None, sort_keys: bool = False, **kw: t.Any) -> str:
    return pyjson.dumps(obj, cls=JSONEncoder, indent=indent, sort_keys=sort_keys, **kw)
