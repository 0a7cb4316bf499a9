import struct

import pytest

from alpacawire.options import Options


def test_default_is_little_endian():
    assert (12345).to_bytes(2, Options.NONE.byte_order()) == bytes([0x39, 0x30])


def test_big_endian_byte_order():
    order = Options.BIG_ENDIAN.byte_order()
    assert (12345).to_bytes(2, order) == bytes([0x30, 0x39])
    assert (5).to_bytes(2, order) == bytes([0x00, 0x05])


def test_combined_big_endian_fixed_uint32():
    opts = Options(Options.BIG_ENDIAN | Options.FIXED_LENGTH_ENCODING)
    assert (654321).to_bytes(4, opts.byte_order()) == bytes([0x00, 0x09, 0xFB, 0xF1])
    assert opts.fixed_width_integers()


def test_none_uses_varints():
    assert not Options.NONE.fixed_width_integers()


def test_big_endian_implies_fixed_width():
    assert Options.BIG_ENDIAN.fixed_width_integers()


def test_fixed_length_keeps_little_endian():
    opts = Options.FIXED_LENGTH_ENCODING
    assert opts.fixed_width_integers()
    assert struct.pack("<I", 654321) == (654321).to_bytes(4, opts.byte_order())


@pytest.mark.parametrize("flag", [Options.WITH_VERSION, Options.WITH_CHECKSUM])
def test_framing_flags_do_not_change_integers(flag):
    assert not flag.fixed_width_integers()
    assert flag.byte_order() == Options.NONE.byte_order()


def test_flags_combine_and_test_membership():
    opts = Options(Options.WITH_VERSION | Options.WITH_CHECKSUM)
    assert opts == Options(12)
    assert Options.WITH_VERSION in opts
    assert Options.WITH_CHECKSUM in opts
    assert Options.BIG_ENDIAN not in opts
    assert not opts.fixed_width_integers()