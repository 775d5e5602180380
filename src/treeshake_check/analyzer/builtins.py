"""Allowlist of standard JavaScript entry points that are free of observable side effects.

Keyed by dotted callee name as written in source: a bare global (``Map``) or a
one-level member (``Math.max``). New builtins = new entries, no analyzer changes.
"""

from __future__ import annotations

# ── Global constructors and functions ───────────────────────────────────────

_GLOBALS: frozenset[str] = frozenset({
    "Array", "ArrayBuffer", "BigInt", "BigInt64Array", "BigUint64Array",
    "Boolean", "DataView", "Date", "Error", "EvalError", "Float32Array",
    "Float64Array", "Int8Array", "Int16Array", "Int32Array", "Map", "Number",
    "Object", "Promise", "RangeError", "ReferenceError", "RegExp", "Set",
    "String", "Symbol", "SyntaxError", "TypeError", "URIError", "Uint8Array",
    "Uint8ClampedArray", "Uint16Array", "Uint32Array", "WeakMap", "WeakRef",
    "WeakSet",
    "decodeURI", "decodeURIComponent", "encodeURI", "encodeURIComponent",
    "escape", "isFinite", "isNaN", "parseFloat", "parseInt", "unescape",
})

# ── Static members ──────────────────────────────────────────────────────────

_MEMBERS: frozenset[str] = frozenset({
    # Array
    "Array.from", "Array.isArray", "Array.of",
    # ArrayBuffer
    "ArrayBuffer.isView",
    # Date
    "Date.now", "Date.parse", "Date.UTC",
    # JSON
    "JSON.parse", "JSON.stringify",
    # Math
    "Math.abs", "Math.acos", "Math.acosh", "Math.asin", "Math.asinh",
    "Math.atan", "Math.atan2", "Math.atanh", "Math.cbrt", "Math.ceil",
    "Math.clz32", "Math.cos", "Math.cosh", "Math.exp", "Math.expm1",
    "Math.floor", "Math.fround", "Math.hypot", "Math.imul", "Math.log",
    "Math.log10", "Math.log1p", "Math.log2", "Math.max", "Math.min",
    "Math.pow", "Math.random", "Math.round", "Math.sign", "Math.sin",
    "Math.sinh", "Math.sqrt", "Math.tan", "Math.tanh", "Math.trunc",
    # Number
    "Number.isFinite", "Number.isInteger", "Number.isNaN",
    "Number.isSafeInteger", "Number.parseFloat", "Number.parseInt",
    # Object
    "Object.create", "Object.entries", "Object.freeze", "Object.fromEntries",
    "Object.getOwnPropertyDescriptor", "Object.getOwnPropertyDescriptors",
    "Object.getOwnPropertyNames", "Object.getOwnPropertySymbols",
    "Object.getPrototypeOf", "Object.hasOwn", "Object.is", "Object.isExtensible",
    "Object.isFrozen", "Object.isSealed", "Object.keys", "Object.values",
    # Promise
    "Promise.all", "Promise.allSettled", "Promise.any", "Promise.race",
    "Promise.reject", "Promise.resolve",
    # Reflect
    "Reflect.getOwnPropertyDescriptor", "Reflect.getPrototypeOf", "Reflect.has",
    "Reflect.isExtensible", "Reflect.ownKeys",
    # String
    "String.fromCharCode", "String.fromCodePoint", "String.raw",
    # Symbol
    "Symbol.for", "Symbol.keyFor",
    # Intl
    "Intl.Collator", "Intl.DateTimeFormat", "Intl.DisplayNames",
    "Intl.ListFormat", "Intl.Locale", "Intl.NumberFormat", "Intl.PluralRules",
    "Intl.RelativeTimeFormat", "Intl.Segmenter", "Intl.getCanonicalLocales",
    "Intl.supportedValuesOf",
    # Two-level entries. Never matched by lookup, which reconstructs one level only.
    "Intl.Collator.supportedLocalesOf",
    "Intl.DateTimeFormat.supportedLocalesOf",
    "Intl.NumberFormat.supportedLocalesOf",
    "Intl.PluralRules.supportedLocalesOf",
})

BUILTIN_REGISTRY: frozenset[str] = _GLOBALS | _MEMBERS


def is_pure_builtin(name: str | None) -> bool:
    """Return True if ``name`` is a known-pure builtin.

    Only bare identifiers and one-level dotted names can match.
    """
    if not name or name.count(".") > 1:
        return False
    return name in BUILTIN_REGISTRY


def get_all_builtin_names() -> frozenset[str]:
    """Return every registered dotted name, including unreachable deeper ones."""
    return BUILTIN_REGISTRY
