"""
Checksum Module - Internet checksum for ICMP Echo packets.

Implements the ones-complement checksum described in RFC 1071
"Computing the Internet Checksum":

1. Sum the data as 16-bit big-endian words in a wide accumulator
2. An odd trailing byte is added to the sum as-is (not shifted)
3. Fold the carries back into the low 16 bits until none remain
4. Return the ones-complement of the folded sum

All functions are pure and thread-safe.
"""

from typing import Union


BytesLike = Union[bytes, bytearray, memoryview]


class ChecksumError(Exception):
    """Raised when checksum calculation fails."""
    pass


def checksum(data: BytesLike) -> int:
    """
    Calculate the Internet checksum of a buffer.

    Args:
        data: Bytes to checksum

    Returns:
        16-bit checksum value
    """
    return OptimizedChecksum.in_cksum(data)


class OptimizedChecksum:
    """
    RFC 1071 ones-complement checksum calculator.

    Example:
        >>> OptimizedChecksum.in_cksum(b'\\x00\\x01')
        65534
        >>> OptimizedChecksum.verify(b'\\x08\\x00\\xf7\\xff\\x00\\x00\\x00\\x00')
        True
    """

    @staticmethod
    def _fold_32_to_16(sum32: int) -> int:
        """
        Fold a wide sum to 16 bits with carry propagation per RFC 1071.

        The high 16 bits are added to the low 16 bits until the high
        16 bits are zero.

        Args:
            sum32: Accumulated sum

        Returns:
            16-bit folded sum
        """
        while sum32 >> 16:
            sum32 = (sum32 & 0xFFFF) + (sum32 >> 16)
        return sum32

    @staticmethod
    def _ones_complement_16(value: int) -> int:
        """Return the ones-complement of a 16-bit value."""
        return (~value) & 0xFFFF

    @staticmethod
    def _word_sum(data: BytesLike) -> int:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise ChecksumError(
                f"Data must be bytes-like, got {type(data).__name__}"
            )

        data = bytes(data)
        length = len(data)
        total = 0
        for i in range(0, length - 1, 2):
            # Big-endian 16-bit word
            total += (data[i] << 8) | data[i + 1]

        if length % 2:
            # Trailing byte contributes its own value
            total += data[-1]

        return total

    @classmethod
    def in_cksum(cls, data: BytesLike, start: int = 0) -> int:
        """
        Compute the Internet checksum per RFC 1071.

        Args:
            data: Bytes to checksum
            start: Initial value to add to the sum (default 0)

        Returns:
            16-bit ones-complement checksum

        Raises:
            ChecksumError: If data is not bytes-like

        Example:
            >>> OptimizedChecksum.in_cksum(b'\\x00\\x01\\x00\\x02')
            65532
        """
        total = start + cls._word_sum(data)
        return cls._ones_complement_16(cls._fold_32_to_16(total))

    @classmethod
    def icmp_checksum(cls, icmp_data: BytesLike) -> int:
        """
        Calculate ICMP checksum per RFC 792.

        The checksum covers the whole ICMP message (header and payload).
        The checksum field (bytes 2-3) must be zero when building.

        Args:
            icmp_data: ICMP message bytes

        Returns:
            16-bit checksum value
        """
        return cls.in_cksum(icmp_data)

    @classmethod
    def verify(cls, data: BytesLike) -> bool:
        """
        Verify a buffer that carries its own checksum.

        Summing a buffer with a correctly embedded checksum gives 0xFFFF,
        so its checksum is zero.
        """
        return cls.in_cksum(data) == 0
