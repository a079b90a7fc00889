"""An in-memory store of records claimed in 8 byte words.

Word 0 holds a signature and the first free position. Every record starts
with its claimed size in words; free space is marked with a negative size.
"""

from __future__ import annotations

import struct

SIGNATURE = 0x53_74_6F_31
PRIMARY = 1

_I32_MIN = -(2**31)
_I64_MIN = -(2**63)


class StoreError(Exception):
    """Raised on inconsistent store content or access outside a record."""


def _wrap(value: int, bits: int) -> int:
    mask = (1 << bits) - 1
    value &= mask
    return value - (1 << bits) if value >> (bits - 1) else value


class Store:
    """A growable byte area handing out records of whole 8 byte words."""

    def __init__(self, size: int) -> None:
        self.references: list[tuple[int, int]] = []
        self._size = size
        self._data = bytearray(size * 8)
        struct.pack_into("<I", self._data, 0, SIGNATURE)
        struct.pack_into("<I", self._data, 4, 1)
        # the complete store starts as one free block
        self.set_int(PRIMARY, 0, 1 - size)

    def __len__(self) -> int:
        return self._size

    # raw access

    def _read(self, fmt: str, offset: int):
        width = struct.calcsize(fmt)
        if offset < 0 or offset + width > len(self._data):
            raise StoreError(f"Access outside store at byte {offset}")
        return struct.unpack_from(fmt, self._data, offset)[0]

    def _write(self, fmt: str, offset: int, value) -> None:
        width = struct.calcsize(fmt)
        if offset < 0 or offset + width > len(self._data):
            raise StoreError(f"Access outside store at byte {offset}")
        struct.pack_into(fmt, self._data, offset, value)

    @staticmethod
    def _offset(rec: int, fld: int) -> int:
        return rec * 8 + fld

    # allocation

    def claim(self, size: int) -> int:
        """Claim a record of ``size`` words and return its number."""
        req_size = size
        pos = PRIMARY
        last = pos
        claim = self.get_int(pos, 0)
        while pos < self._size and (claim >= 0 or -claim < req_size):
            last = pos
            pos += abs(claim)
            if pos >= self._size:
                claim = 0
                break
            if pos == last:
                raise StoreError(f"Inconsistent database zero sized block {pos}")
            claim = self.get_int(pos, 0)
        if pos + size > self._size:
            cur = self._size
            self._resize_store(
                self._size + size + claim if claim < 0 else self._size + size
            )
            increase = self._size - cur
            if claim < 0:
                self.set_int(last, 0, claim - increase)
                pos = last
            else:
                self.set_int(cur, 0, increase)
                pos = cur
            self.validate(0)
            if claim <= 0:
                return pos
        claim = -self.get_int(pos, 0)
        if claim < 0:
            raise StoreError(f"Claimed space twice {pos}")
        if claim > size * 4 // 3:
            self.set_int(pos, 0, req_size)
            self.set_int(pos + size, 0, req_size - claim)
        else:
            self.set_int(pos, 0, claim)
        return pos

    def resize(self, rec: int, size: int) -> int:
        """Make a record at least ``size`` words; it may move."""
        req_size = size
        claim = self.get_int(rec, 0)
        if claim >= req_size:
            return rec
        following = rec + claim
        if following < self._size:
            next_size = self.get_int(following, 0)
            total = claim - next_size
            if next_size < 0 and total > req_size:
                if total > req_size * 4 // 3:
                    self.set_int(rec, 0, req_size)
                    self.set_int(rec + size, 0, req_size - total)
                else:
                    self.set_int(rec, 0, total)
                return rec
        new = self.claim(size)
        self._copy(rec, new)
        self.delete(rec)
        return new

    def delete(self, rec: int) -> None:
        """Free a record, merging it with free space that follows it."""
        claim = self.get_int(rec, 0)
        while rec + claim < self._size:
            following = self.get_int(rec + claim, 0)
            if following >= 0:
                break
            claim -= following
        self.set_int(rec, 0, -claim)

    def validate(self, recs: int) -> None:
        """Walk all blocks; with ``recs`` non-zero also check the record count."""
        pos = PRIMARY
        alloc = 0
        while pos < self._size:
            claim = self.get_int(pos, 0)
            if claim == 0:
                raise StoreError(f"Inconsistent database zero sized block {pos}")
            if pos + abs(claim) > self._size:
                raise StoreError(f"Incorrect record {pos} size {abs(claim)}")
            if claim > 0:
                alloc += 1
            pos += abs(claim)
        if pos != self._size:
            raise StoreError(f"Incorrect {pos} size {self._size}")
        if recs != 0 and alloc != recs:
            raise StoreError(
                f"Inconsistent number of records: claimed {alloc} walk {recs}"
            )

    def _resize_store(self, to_size: int) -> None:
        if to_size < self._size:
            return
        size = max(to_size, self._size * 3 // 2)
        self._data.extend(bytes((size - self._size) * 8))
        self._size = size

    def valid(self, rec: int, fld: int) -> bool:
        """Check that a field lies inside a claimed record."""
        if rec == 0 or rec * 8 + fld > self._size * 8:
            raise StoreError(f"Reading outside store ({rec}.{fld}) > {self._size}")
        if fld != 0:
            size = self._read("<i", rec * 8)
            if size < 1 or rec + size > self._size or fld < 4:
                raise StoreError(
                    f"Reading fields outside record ({rec}.{fld}) > {size}"
                )
        return True

    def _copy(self, rec: int, into: int) -> None:
        length = self.get_int(rec, 0) * 8 - 4
        start = rec * 8 + 4
        target = into * 8 + 4
        self._data[target : target + length] = self._data[start : start + length]

    def move_content(self, rec: int, pos: int, to: int, length: int) -> None:
        """Move bytes inside the content of a record; areas may overlap."""
        start = rec * 8 + 8 + pos
        target = rec * 8 + 8 + to
        if min(start, target) < 0 or max(start, target) + length > len(self._data):
            raise StoreError(f"Move outside store in record {rec}")
        self._data[target : target + length] = self._data[start : start + length]

    # typed fields

    def get_int(self, rec: int, fld: int) -> int:
        self.valid(rec, fld)
        return self._read("<i", self._offset(rec, fld))

    def set_int(self, rec: int, fld: int, val: int) -> None:
        self.valid(rec, fld)
        self._write("<i", self._offset(rec, fld), _wrap(val, 32))

    def get_long(self, rec: int, fld: int) -> int:
        self.valid(rec, fld)
        return self._read("<q", self._offset(rec, fld))

    def set_long(self, rec: int, fld: int, val: int) -> None:
        self.valid(rec, fld)
        self._write("<q", self._offset(rec, fld), _wrap(val, 64))

    def get_short(self, rec: int, fld: int, minimum: int) -> int:
        self.valid(rec, fld)
        read = self._read("<H", self._offset(rec, fld))
        return read + minimum - 1 if read else _I32_MIN

    def set_short(self, rec: int, fld: int, minimum: int, val: int) -> None:
        self.valid(rec, fld)
        stored = 0 if val == _I32_MIN else (val - minimum + 1) & 0xFFFF
        self._write("<H", self._offset(rec, fld), stored)

    def get_byte(self, rec: int, fld: int, minimum: int) -> int:
        self.valid(rec, fld)
        read = self._read("<B", self._offset(rec, fld))
        return read + minimum - 1 if read else _I32_MIN

    def set_byte(self, rec: int, fld: int, minimum: int, val: int) -> None:
        self.valid(rec, fld)
        stored = 0 if val == _I32_MIN else (val - minimum + 1) & 0xFF
        self._write("<B", self._offset(rec, fld), stored)

    def get_str(self, rec: int) -> str:
        length = self.get_int(rec, 4)
        if length < 0 or length > self.get_int(rec, 0) * 8:
            raise StoreError("Inconsistent text store")
        if length // 8 + rec > self._size:
            raise StoreError("Inconsistent text store")
        start = rec * 8 + 8
        return self._data[start : start + length].decode("utf-8")

    def set_str(self, val: str) -> int:
        """Store a text in a new record and return that record."""
        raw = val.encode("utf-8")
        res = self.claim((len(raw) + 15) // 8)
        self.set_int(res, 4, len(raw))
        start = res * 8 + 8
        self._data[start : start + len(raw)] = raw
        return res

    def append_str(self, rec: int, val: str) -> int:
        """Append to a stored text; returns the record, which may have moved."""
        raw = val.encode("utf-8")
        prev = self.get_int(rec, 4)
        res = self.resize(rec, (prev + len(raw) + 15) // 8)
        start = res * 8 + 8 + prev
        self._data[start : start + len(raw)] = raw
        self.set_int(res, 4, prev + len(raw))
        return res

    def get_boolean(self, rec: int, fld: int, mask: int) -> bool:
        self.valid(rec, fld)
        return (self._read("<B", self._offset(rec, fld)) & mask) > 0

    def set_boolean(self, rec: int, fld: int, mask: int, val: bool) -> None:
        self.valid(rec, fld)
        offset = self._offset(rec, fld)
        write = self._read("<B", offset) & ~mask & 0xFF
        if val:
            write |= mask & 0xFF
        self._write("<B", offset, write)

    def get_float(self, rec: int, fld: int) -> float:
        self.valid(rec, fld)
        return self._read("<d", self._offset(rec, fld))

    def set_float(self, rec: int, fld: int, val: float) -> None:
        self.valid(rec, fld)
        self._write("<d", self._offset(rec, fld), val)

    def get_single(self, rec: int, fld: int) -> float:
        self.valid(rec, fld)
        return self._read("<f", self._offset(rec, fld))

    def set_single(self, rec: int, fld: int, val: float) -> None:
        self.valid(rec, fld)
        self._write("<f", self._offset(rec, fld), val)