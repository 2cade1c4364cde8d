"""The KISS pseudo-random number generator, 1999 specification, on 32-bit words."""

from __future__ import annotations

_MASK32 = 0xFFFFFFFF


class Kiss99:
    """KISS generator; calling the instance yields the next 32-bit number."""

    __slots__ = ("z", "w", "jsr", "jcong")

    def __init__(
        self,
        z: int = 362436069,
        w: int = 521288629,
        jsr: int = 123456789,
        jcong: int = 380116160,
    ) -> None:
        self.z = z & _MASK32
        self.w = w & _MASK32
        self.jsr = jsr & _MASK32
        self.jcong = jcong & _MASK32

    def __call__(self) -> int:
        self.z = (36969 * (self.z & 0xFFFF) + (self.z >> 16)) & _MASK32
        self.w = (18000 * (self.w & 0xFFFF) + (self.w >> 16)) & _MASK32

        self.jcong = (69069 * self.jcong + 1234567) & _MASK32

        jsr = self.jsr
        jsr ^= (jsr << 17) & _MASK32
        jsr ^= jsr >> 13
        jsr ^= (jsr << 5) & _MASK32
        self.jsr = jsr

        return (((((self.z << 16) + self.w) & _MASK32) ^ self.jcong) + self.jsr) & _MASK32

    def __iter__(self):
        while True:
            yield self()

    def __repr__(self) -> str:
        return f"Kiss99(z={self.z}, w={self.w}, jsr={self.jsr}, jcong={self.jcong})"