"""Arbitrary-precision signed integers built from fixed-width limbs.

A `BigInt` is a sign in {-1, 0, 1} and a tuple of 32-bit limbs stored least significant first. The tuple never ends
in a zero limb and zero is uniquely `(0, ())`. Values are immutable: every operator returns a new `BigInt`.

Division follows the floor convention throughout: the quotient rounds toward negative infinity and the remainder
carries the sign of the divisor, so `a % n` lies in `[0, n)` for any positive `n`. Modular code relies on this.

Typical usage example:

    a = BigInt("123456789012345678901234567890")
    b = BigInt.parse("0xdeadbeef", 16)
    q, r = divmod(a * b, BigInt(97))
    text = (q + r).format(16)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import re
from typing import Iterable

from hacrypt.errors import BigIntArithmeticError
from hacrypt.errors import DivisionByZeroError
from hacrypt.errors import ParseError

LIMB_BITS: int = 32
BASE: int = 1 << LIMB_BITS
MASK: int = BASE - 1

_DEC_CHUNK: int = 9
_DEC_CHUNK_BASE: int = 10**_DEC_CHUNK
_HEX_CHUNK: int = LIMB_BITS // 4
_DEC_RE = re.compile(r"[+-]?[0-9]+")
_HEX_RE = re.compile(r"[+-]?(?:0[xX])?[0-9a-fA-F]+")


def _normalize(limbs: list[int]) -> list[int]:
    """Strip most significant zero limbs in place and return the list."""
    while limbs and limbs[-1] == 0:
        limbs.pop()
    return limbs


def _cmp_mag(a: tuple[int, ...] | list[int], b: tuple[int, ...] | list[int]) -> int:
    """Three-way comparison of two normalized magnitudes."""
    if len(a) != len(b):
        return -1 if len(a) < len(b) else 1
    for i in range(len(a) - 1, -1, -1):
        if a[i] != b[i]:
            return -1 if a[i] < b[i] else 1
    return 0


def _add_mag(a, b) -> list[int]:
    if len(a) < len(b):
        a, b = b, a
    out = []
    carry = 0
    for i, x in enumerate(a):
        t = x + (b[i] if i < len(b) else 0) + carry
        out.append(t & MASK)
        carry = t >> LIMB_BITS
    if carry:
        out.append(carry)
    return out


def _sub_mag(a, b) -> list[int]:
    """Subtract magnitude `b` from `a`, where `a >= b`."""
    out = []
    borrow = 0
    for i, x in enumerate(a):
        t = x - (b[i] if i < len(b) else 0) - borrow
        borrow = 1 if t < 0 else 0
        out.append(t & MASK)
    return _normalize(out)


def _mul_mag(a, b) -> list[int]:
    """Schoolbook multiplication of two magnitudes."""
    if not a or not b:
        return []
    out = [0] * (len(a) + len(b))
    for i, x in enumerate(a):
        if x == 0:
            continue
        carry = 0
        for j, y in enumerate(b):
            t = out[i + j] + x * y + carry
            out[i + j] = t & MASK
            carry = t >> LIMB_BITS
        out[i + len(b)] = carry
    return _normalize(out)


def _mul_small_add(a, m: int, c: int) -> list[int]:
    """Compute `a * m + c` for single-limb `m` and `c`."""
    out = []
    carry = c
    for x in a:
        t = x * m + carry
        out.append(t & MASK)
        carry = t >> LIMB_BITS
    while carry:
        out.append(carry & MASK)
        carry >>= LIMB_BITS
    return _normalize(out)


def _divmod_small(a, d: int) -> tuple[list[int], int]:
    """Divide a magnitude by a single non-zero limb."""
    out = [0] * len(a)
    r = 0
    for i in range(len(a) - 1, -1, -1):
        out[i], r = divmod((r << LIMB_BITS) | a[i], d)
    return _normalize(out), r


def _shl_mag(a, bits: int) -> list[int]:
    if not a:
        return []
    whole, bits = divmod(bits, LIMB_BITS)
    out = [0] * whole
    if bits == 0:
        out.extend(a)
        return out
    carry = 0
    for x in a:
        out.append(((x << bits) & MASK) | carry)
        carry = x >> (LIMB_BITS - bits)
    if carry:
        out.append(carry)
    return out


def _shr_mag(a, bits: int) -> list[int]:
    whole, bits = divmod(bits, LIMB_BITS)
    if whole >= len(a):
        return []
    a = a[whole:]
    if bits == 0:
        return list(a)
    out = []
    for i, x in enumerate(a):
        hi = a[i + 1] if i + 1 < len(a) else 0
        out.append((x >> bits) | ((hi << (LIMB_BITS - bits)) & MASK))
    return _normalize(out)


def _divmod_mag(a, b) -> tuple[list[int], list[int]]:
    """Long division of magnitudes, Knuth TAOCP Vol. 2, 4.3.1 Algorithm D.

    Args:
        a: Dividend magnitude.
        b: Divisor magnitude, non-empty.

    Returns:
        Quotient and remainder magnitudes.
    """
    if _cmp_mag(a, b) < 0:
        return [], list(a)
    if len(b) == 1:
        q, r = _divmod_small(a, b[0])
        return q, [r] if r else []
    # D1: scale so the top divisor limb has its high bit set.
    shift = LIMB_BITS - b[-1].bit_length()
    v = _shl_mag(b, shift)
    u = _shl_mag(a, shift)
    u.extend([0] * (len(a) + 1 - len(u)))
    n = len(v)
    m = len(u) - n - 1
    v_top, v_next = v[-1], v[-2]
    q = [0] * (m + 1)
    for j in range(m, -1, -1):
        # D3: estimate the quotient limb from the top two limbs, then correct it at most twice.
        qhat, rhat = divmod((u[j + n] << LIMB_BITS) | u[j + n - 1], v_top)
        while qhat >= BASE or qhat * v_next > ((rhat << LIMB_BITS) | u[j + n - 2]):
            qhat -= 1
            rhat += v_top
            if rhat >= BASE:
                break
        # D4: multiply and subtract.
        borrow = 0
        carry = 0
        for i in range(n):
            p = qhat * v[i] + carry
            carry = p >> LIMB_BITS
            t = u[i + j] - (p & MASK) - borrow
            u[i + j] = t & MASK
            borrow = 1 if t < 0 else 0
        t = u[j + n] - carry - borrow
        u[j + n] = t & MASK
        if t < 0:
            # D6: the estimate was one too large, add the divisor back.
            qhat -= 1
            carry = 0
            for i in range(n):
                t = u[i + j] + v[i] + carry
                u[i + j] = t & MASK
                carry = t >> LIMB_BITS
            u[j + n] = (u[j + n] + carry) & MASK
        q[j] = qhat
    return _normalize(q), _shr_mag(_normalize(u[:n]), shift)


class BigInt:
    """Immutable arbitrary-precision signed integer.

    Accepts Python `int` operands on either side of every operator and compares (and hashes) equal to the `int` of
    the same value.

    Attributes:
        sign: -1, 0 or 1.
        limbs: Little-endian tuple of 32-bit limbs of the magnitude.
    """

    __slots__ = ("_sign", "_limbs")

    def __init__(self, value: "int | str | BigInt" = 0) -> None:
        """Initialize a BigInt.

        Args:
            value: A Python int, another BigInt, or text. Text is decimal unless prefixed with `0x` (after an
                optional sign), in which case it is hexadecimal.

        Raises:
            ParseError: If text is malformed.
            TypeError: If the value has an unsupported type.
        """
        if isinstance(value, BigInt):
            sign, limbs = value._sign, value._limbs
        elif isinstance(value, int):
            sign, limbs = _int_parts(value)
        elif isinstance(value, str):
            body = value.strip().lstrip("+-")
            base = 16 if body[:2] in ("0x", "0X") else 10
            parsed = BigInt.parse(value, base)
            sign, limbs = parsed._sign, parsed._limbs
        else:
            raise TypeError(f"Cannot construct BigInt from {type(value).__name__}")
        object.__setattr__(self, "_sign", sign)
        object.__setattr__(self, "_limbs", limbs)

    @classmethod
    def _make(cls, sign: int, limbs: Iterable[int]) -> "BigInt":
        obj = object.__new__(cls)
        limbs = tuple(_normalize(list(limbs)))
        object.__setattr__(obj, "_sign", sign if limbs else 0)
        object.__setattr__(obj, "_limbs", limbs)
        return obj

    @classmethod
    def from_int(cls, value: int) -> "BigInt":
        """Convert a Python int."""
        return cls._make(*_int_parts(value))

    @classmethod
    def from_limbs(cls, limbs: Iterable[int], negative: bool = False) -> "BigInt":
        """Build a value from little-endian 32-bit limbs.

        Args:
            limbs: Limbs, least significant first. Leading zero limbs are allowed and dropped.
            negative: Whether the value is negative.

        Returns:
            The represented integer.

        Raises:
            ValueError: If a limb is outside `[0, 2**32)`.
        """
        limbs = list(limbs)
        if any(not 0 <= x <= MASK for x in limbs):
            raise ValueError("Limbs must be in range [0, 2**32 - 1]")
        return cls._make(-1 if negative else 1, limbs)

    @classmethod
    def from_bytes(cls, data: bytes) -> "BigInt":
        """Read an unsigned big-endian octet string."""
        data = bytes(-len(data) % 4) + data
        limbs = [int.from_bytes(data[i:i + 4], "big") for i in range(len(data) - 4, -1, -4)]
        return cls._make(1, limbs)

    @classmethod
    def parse(cls, text: str, base: int = 10) -> "BigInt":
        """Parse canonical text.

        Decimal text is `[+-]?[0-9]+`, hexadecimal text is `[+-]?(0x)?[0-9a-fA-F]+`. Surrounding whitespace is
        ignored; anything else, including underscores, is malformed.

        Args:
            text: The text to parse.
            base: 10 or 16.

        Returns:
            The parsed integer.

        Raises:
            ParseError: If the text is malformed for the base.
            ValueError: If the base is unsupported.
        """
        if base not in (10, 16):
            raise ValueError("Base must be 10 or 16")
        if not isinstance(text, str):
            raise ParseError(f"Expected text, got {type(text).__name__}")
        text = text.strip()
        pattern = _DEC_RE if base == 10 else _HEX_RE
        if not pattern.fullmatch(text):
            raise ParseError(f"Malformed base-{base} integer: {text!r}")
        sign = -1 if text[0] == "-" else 1
        digits = text.lstrip("+-")
        limbs: list[int] = []
        if base == 16:
            if digits[:2] in ("0x", "0X"):
                digits = digits[2:]
            for end in range(len(digits), 0, -_HEX_CHUNK):
                limbs.append(int(digits[max(0, end - _HEX_CHUNK):end], 16))
        else:
            head = len(digits) % _DEC_CHUNK or _DEC_CHUNK
            limbs = _mul_small_add(limbs, 10**head, int(digits[:head]))
            for start in range(head, len(digits), _DEC_CHUNK):
                limbs = _mul_small_add(limbs, _DEC_CHUNK_BASE, int(digits[start:start + _DEC_CHUNK]))
        return cls._make(sign, limbs)

    def format(self, base: int = 10) -> str:
        """Format as canonical text that `parse` reads back exactly.

        Args:
            base: 10 for plain decimal, 16 for lowercase hexadecimal with a `0x` prefix.

        Returns:
            The text, with a leading `-` for negative values only.
        """
        if base not in (10, 16):
            raise ValueError("Base must be 10 or 16")
        prefix = "-" if self._sign < 0 else ""
        if base == 16:
            if not self._limbs:
                return "0x0"
            parts = [f"{self._limbs[-1]:x}"] + [f"{x:08x}" for x in reversed(self._limbs[:-1])]
            return prefix + "0x" + "".join(parts)
        if not self._limbs:
            return "0"
        chunks = []
        mag = list(self._limbs)
        while mag:
            mag, r = _divmod_small(mag, _DEC_CHUNK_BASE)
            chunks.append(r)
        parts = [str(chunks[-1])] + [f"{c:09d}" for c in reversed(chunks[:-1])]
        return prefix + "".join(parts)

    def to_int(self) -> int:
        """Convert to a Python int."""
        value = 0
        for x in reversed(self._limbs):
            value = (value << LIMB_BITS) | x
        return -value if self._sign < 0 else value

    def to_bytes(self, length: int | None = None) -> bytes:
        """Write an unsigned big-endian octet string.

        Args:
            length: Exact output length, left-padded with zero bytes. Defaults to the minimal length (at least 1).

        Returns:
            The octet string.

        Raises:
            OverflowError: If the value is negative or does not fit in `length` bytes.
        """
        if self._sign < 0:
            raise OverflowError("Cannot convert a negative BigInt to unsigned bytes")
        raw = b"".join(x.to_bytes(4, "big") for x in reversed(self._limbs)).lstrip(b"\x00")
        if length is None:
            length = max(1, len(raw))
        if len(raw) > length:
            raise OverflowError(f"BigInt too large for {length} bytes")
        return bytes(length - len(raw)) + raw

    @property
    def sign(self) -> int:
        return self._sign

    @property
    def limbs(self) -> tuple[int, ...]:
        return self._limbs

    def is_zero(self) -> bool:
        return self._sign == 0

    def is_odd(self) -> bool:
        return bool(self._limbs) and self._limbs[0] & 1 == 1

    def is_even(self) -> bool:
        return not self.is_odd()

    def bit_length(self) -> int:
        """Number of bits in the magnitude, 0 for zero."""
        if not self._limbs:
            return 0
        return (len(self._limbs) - 1) * LIMB_BITS + self._limbs[-1].bit_length()

    def test_bit(self, index: int) -> bool:
        """Whether bit `index` of the magnitude is set."""
        if index < 0:
            raise BigIntArithmeticError("Bit index must be non-negative")
        whole, bit = divmod(index, LIMB_BITS)
        if whole >= len(self._limbs):
            return False
        return (self._limbs[whole] >> bit) & 1 == 1

    def lowest_set_bit(self) -> int:
        """Index of the least significant set bit of the magnitude."""
        if not self._limbs:
            raise BigIntArithmeticError("Zero has no set bits")
        for i, x in enumerate(self._limbs):
            if x:
                return i * LIMB_BITS + (x & -x).bit_length() - 1
        raise AssertionError("unreachable for a normalized value")

    def __setattr__(self, name, value):
        raise AttributeError("BigInt is immutable")

    def __delattr__(self, name):
        raise AttributeError("BigInt is immutable")

    def __reduce__(self):
        return (BigInt, (self.format(16),))

    def __repr__(self) -> str:
        return f"BigInt('{self.format(10)}')"

    def __str__(self) -> str:
        return self.format(10)

    def __int__(self) -> int:
        return self.to_int()

    def __index__(self) -> int:
        return self.to_int()

    def __bool__(self) -> bool:
        return self._sign != 0

    def __hash__(self) -> int:
        return hash(self.to_int())

    def __eq__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._sign == other._sign and self._limbs == other._limbs

    def __lt__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _compare(self, other) < 0

    def __le__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _compare(self, other) <= 0

    def __gt__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _compare(self, other) > 0

    def __ge__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _compare(self, other) >= 0

    def __neg__(self) -> "BigInt":
        return BigInt._make(-self._sign, self._limbs)

    def __pos__(self) -> "BigInt":
        return self

    def __abs__(self) -> "BigInt":
        return BigInt._make(1, self._limbs)

    def __add__(self, other) -> "BigInt":
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _signed_add(self._sign, self._limbs, other._sign, other._limbs)

    def __radd__(self, other) -> "BigInt":
        return self.__add__(other)

    def __sub__(self, other) -> "BigInt":
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _signed_add(self._sign, self._limbs, -other._sign, other._limbs)

    def __rsub__(self, other) -> "BigInt":
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other.__sub__(self)

    def __mul__(self, other) -> "BigInt":
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return BigInt._make(self._sign * other._sign, _mul_mag(self._limbs, other._limbs))

    def __rmul__(self, other) -> "BigInt":
        return self.__mul__(other)

    def __divmod__(self, other) -> tuple["BigInt", "BigInt"]:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _floor_divmod(self, other)

    def __rdivmod__(self, other) -> tuple["BigInt", "BigInt"]:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _floor_divmod(other, self)

    def __floordiv__(self, other) -> "BigInt":
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _floor_divmod(self, other)[0]

    def __rfloordiv__(self, other) -> "BigInt":
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _floor_divmod(other, self)[0]

    def __mod__(self, other) -> "BigInt":
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _floor_divmod(self, other)[1]

    def __rmod__(self, other) -> "BigInt":
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _floor_divmod(other, self)[1]

    def __pow__(self, exponent, modulus=None) -> "BigInt":
        exponent = _coerce(exponent)
        if exponent is NotImplemented:
            return NotImplemented
        if modulus is not None:
            modulus = _coerce(modulus)
            if modulus is NotImplemented:
                return NotImplemented
            # pylint: disable-next=import-outside-toplevel,cyclic-import
            from hacrypt.modular import mod_exp
            return mod_exp(self, exponent, modulus)
        if exponent._sign < 0:
            raise BigIntArithmeticError("Negative exponent outside of a modulus")
        result = ONE
        for i in range(exponent.bit_length() - 1, -1, -1):
            result = result * result
            if exponent.test_bit(i):
                result = result * self
        return result

    def __rpow__(self, base, modulus=None) -> "BigInt":
        base = _coerce(base)
        if base is NotImplemented:
            return NotImplemented
        return base.__pow__(self, modulus)

    def __lshift__(self, count: int) -> "BigInt":
        count = int(count)
        if count < 0:
            raise BigIntArithmeticError("Negative shift count")
        return BigInt._make(self._sign, _shl_mag(self._limbs, count))

    def __rshift__(self, count: int) -> "BigInt":
        count = int(count)
        if count < 0:
            raise BigIntArithmeticError("Negative shift count")
        mag = _shr_mag(self._limbs, count)
        if self._sign < 0 and _cmp_mag(_shl_mag(mag, count), self._limbs) != 0:
            # Floor semantics: bits shifted out of a negative value round away from zero.
            mag = _add_mag(mag, [1])
        return BigInt._make(self._sign, mag)

    def __and__(self, other) -> "BigInt":
        other = _bitwise_operand(self, other)
        if other is NotImplemented:
            return NotImplemented
        return BigInt._make(1, [x & y for x, y in zip(self._limbs, other._limbs)])

    __rand__ = __and__

    def __or__(self, other) -> "BigInt":
        other = _bitwise_operand(self, other)
        if other is NotImplemented:
            return NotImplemented
        a, b = _pad(self._limbs, other._limbs)
        return BigInt._make(1, [x | y for x, y in zip(a, b)])

    __ror__ = __or__

    def __xor__(self, other) -> "BigInt":
        other = _bitwise_operand(self, other)
        if other is NotImplemented:
            return NotImplemented
        a, b = _pad(self._limbs, other._limbs)
        return BigInt._make(1, [x ^ y for x, y in zip(a, b)])

    __rxor__ = __xor__


def _int_parts(value: int) -> tuple[int, tuple[int, ...]]:
    sign = (value > 0) - (value < 0)
    mag = abs(value)
    limbs = []
    while mag:
        limbs.append(mag & MASK)
        mag >>= LIMB_BITS
    return sign, tuple(limbs)


def _coerce(value):
    if isinstance(value, BigInt):
        return value
    if isinstance(value, int):
        return BigInt.from_int(value)
    return NotImplemented


def _bitwise_operand(this: BigInt, other):
    other = _coerce(other)
    if other is NotImplemented:
        return NotImplemented
    if this._sign < 0 or other._sign < 0:
        raise BigIntArithmeticError("Bitwise operations are defined for non-negative values only")
    return other


def _pad(a: tuple[int, ...], b: tuple[int, ...]) -> tuple[tuple[int, ...], tuple[int, ...]]:
    width = max(len(a), len(b))
    return a + (0,) * (width - len(a)), b + (0,) * (width - len(b))


def _compare(x: BigInt, y: BigInt) -> int:
    if x._sign != y._sign:
        return -1 if x._sign < y._sign else 1
    c = _cmp_mag(x._limbs, y._limbs)
    return c if x._sign >= 0 else -c


def _signed_add(sa: int, a: tuple[int, ...], sb: int, b: tuple[int, ...]) -> BigInt:
    if sa == 0:
        return BigInt._make(sb, b)
    if sb == 0:
        return BigInt._make(sa, a)
    if sa == sb:
        return BigInt._make(sa, _add_mag(a, b))
    c = _cmp_mag(a, b)
    if c == 0:
        return ZERO
    if c > 0:
        return BigInt._make(sa, _sub_mag(a, b))
    return BigInt._make(sb, _sub_mag(b, a))


def _floor_divmod(x: BigInt, y: BigInt) -> tuple[BigInt, BigInt]:
    if y._sign == 0:
        raise DivisionByZeroError("Division by zero")
    if x._sign == 0:
        return ZERO, ZERO
    q_mag, r_mag = _divmod_mag(x._limbs, y._limbs)
    q = BigInt._make(x._sign * y._sign, q_mag)
    r = BigInt._make(x._sign, r_mag)
    if r._sign != 0 and x._sign != y._sign:
        q = q - ONE
        r = r + y
    return q, r


ZERO = BigInt._make(0, ())
ONE = BigInt._make(1, (1,))
TWO = BigInt._make(1, (2,))
