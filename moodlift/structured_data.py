from __future__ import annotations

import html
import json

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def stable_hash(text: str) -> str:
    """Deterministic, non-cryptographic id hash.

    Same arithmetic as the browser-side helper: ``h = h * 31 + unit`` over the
    UTF-16 code units, wrapped to a signed 32-bit integer, then ``abs`` in base 36.
    """
    encoded = text.encode("utf-16-le")
    value = 0
    for idx in range(0, len(encoded), 2):
        unit = encoded[idx] | (encoded[idx + 1] << 8)
        value = (value * 31 + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return _to_base36(abs(value))


def serialize(script) -> str:
    return json.dumps(script, separators=(",", ":"), ensure_ascii=False)


def render_structured_data(script, script_id: str | None = None) -> str:
    payload = serialize(script)
    resolved_id = script_id or f"jsonld-{stable_hash(payload)}"
    body = payload.replace("</", "<\\/")
    return (
        f'<script id="{html.escape(resolved_id, quote=True)}" type="application/ld+json">'
        f"{body}</script>"
    )
