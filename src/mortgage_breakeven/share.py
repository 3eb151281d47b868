"""
Compact share tokens for scenario inputs.

A token is the scenario's inputs (never its results) as JSON, deflated with
zlib and base64url-encoded without padding, so it can be carried in a URL.
Every calculation is deterministic, so recomputing from decoded inputs
reproduces the original result exactly.

    token = encode_inputs(RemortgageInputs(...))
    inputs = decode_inputs(token)
"""

from __future__ import annotations

import base64
import binascii
import json
import zlib
from dataclasses import asdict, fields
from enum import Enum
from typing import Any, TypeAlias

from .cashback import CashbackInputs, CashbackOption, CashbackType
from .products import BerRating
from .remortgage import RemortgageInputs
from .rent_vs_buy import RentVsBuyInputs

ScenarioInputs: TypeAlias = RemortgageInputs | RentVsBuyInputs | CashbackInputs

FORMAT_VERSION = 1

_TAGS: dict[type, str] = {
    RemortgageInputs: "remortgage",
    RentVsBuyInputs: "rent-vs-buy",
    CashbackInputs: "cashback",
}


def _to_json(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    return value


def encode_inputs(inputs: ScenarioInputs) -> str:
    """Encode scenario inputs as a URL-safe token."""
    tag = _TAGS.get(type(inputs))
    if tag is None:
        raise ValueError(f"cannot encode {type(inputs).__name__}")
    # asdict keeps enums as members; _to_json swaps in their values
    payload = {"v": FORMAT_VERSION, "type": tag, "inputs": _to_json(asdict(inputs))}
    raw = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(zlib.compress(raw, 9)).rstrip(b"=").decode("ascii")


def _build(cls: type, data: dict[str, Any]) -> Any:
    names = {f.name for f in fields(cls)}
    unknown = set(data) - names
    if unknown:
        raise ValueError(f"unexpected {cls.__name__} fields: {sorted(unknown)}")
    return cls(**data)


def _remortgage(data: dict[str, Any]) -> RemortgageInputs:
    if data.get("ber") is not None:
        data["ber"] = BerRating(data["ber"])
    return _build(RemortgageInputs, data)


def _cashback(data: dict[str, Any]) -> CashbackInputs:
    options = []
    for option in data.get("options", []):
        option = dict(option)
        option["cashback_type"] = CashbackType(option.get("cashback_type", "flat"))
        options.append(_build(CashbackOption, option))
    data["options"] = tuple(options)
    return _build(CashbackInputs, data)


_DECODERS = {
    "remortgage": _remortgage,
    "rent-vs-buy": lambda data: _build(RentVsBuyInputs, data),
    "cashback": _cashback,
}


def decode_inputs(token: str) -> ScenarioInputs:
    """
    Decode a token produced by encode_inputs.

    Raises:
        ValueError: If the token is not valid base64url, does not inflate, is
            not JSON of the expected shape, or fails input validation
    """
    try:
        padded = token + "=" * (-len(token) % 4)
        raw = zlib.decompress(base64.urlsafe_b64decode(padded.encode("ascii")))
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, zlib.error, UnicodeError, json.JSONDecodeError) as e:
        raise ValueError(f"malformed share token: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("inputs"), dict):
        raise ValueError("malformed share token: missing inputs")
    if payload.get("v") != FORMAT_VERSION:
        raise ValueError(f"unsupported share token version {payload.get('v')!r}")
    decoder = _DECODERS.get(payload.get("type"))
    if decoder is None:
        raise ValueError(f"unknown scenario type {payload.get('type')!r}")
    try:
        return decoder(dict(payload["inputs"]))
    except (TypeError, KeyError) as e:
        raise ValueError(f"malformed share token: {e}") from e
