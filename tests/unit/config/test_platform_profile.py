"""
Unit tests for platform profiles.
"""

import ctypes

import pytest
from buildcfg.config.platform_profile import (
    PLATFORM_PROFILES,
    PlatformFileError,
    PlatformProfile,
    PlatformType,
    UnsupportedPlatformError,
    get_platform_profile,
    load_platform_file,
    select_profile,
)


class TestPlatformType:
    """Test suite for platform name lookup."""

    def test_from_name(self):
        """Test lookup by command-line name."""
        assert PlatformType.from_name("win64") == PlatformType.WIN64
        assert PlatformType.from_name("unix32") == PlatformType.UNIX32

    def test_from_name_case_insensitive(self):
        """Test that win32A and win32W stay distinct regardless of case."""
        assert PlatformType.from_name("WIN32A") == PlatformType.WIN32A
        assert PlatformType.from_name("win32w") == PlatformType.WIN32W

    def test_from_name_unknown(self):
        """Test unknown names raise."""
        with pytest.raises(UnsupportedPlatformError, match="avr8"):
            PlatformType.from_name("avr8")


class TestPlatformProfiles:
    """Test suite for the compiled-in profiles."""

    @pytest.mark.parametrize("platform_type", list(PLATFORM_PROFILES))
    def test_bit_widths_follow_byte_widths(self, platform_type):
        """Test derived bit widths are 8x the byte widths for every profile."""
        profile = PLATFORM_PROFILES[platform_type]
        assert profile.platform_type == platform_type
        assert profile.char_bit == 8
        assert profile.short_bit == 8 * profile.sizeof_short
        assert profile.int_bit == 8 * profile.sizeof_int
        assert profile.long_bit == 8 * profile.sizeof_long
        assert profile.long_long_bit == 8 * profile.sizeof_long_long

    def test_win32_profiles(self):
        """Test 32-bit Windows layout."""
        for platform_type in (PlatformType.WIN32A, PlatformType.WIN32W):
            profile = PLATFORM_PROFILES[platform_type]
            assert profile.sizeof_long == 4
            assert profile.sizeof_wchar_t == 2
            assert profile.sizeof_size_t == 4
            assert profile.sizeof_pointer == 4
            assert profile.sizeof_long_double == 8
            assert profile.default_sign == ""

    def test_win64_profile(self):
        """Test Windows is LLP64: long stays 32 bits, pointers are 64."""
        profile = PLATFORM_PROFILES[PlatformType.WIN64]
        assert profile.long_bit == 32
        assert profile.sizeof_pointer == 8
        assert profile.sizeof_size_t == 8

    def test_unix32_profile(self):
        """Test 32-bit Unix layout."""
        profile = PLATFORM_PROFILES[PlatformType.UNIX32]
        assert profile.sizeof_long == 4
        assert profile.sizeof_long_double == 12
        assert profile.sizeof_wchar_t == 4
        assert profile.sizeof_pointer == 4

    def test_unix64_profile(self):
        """Test Unix is LP64: long and pointers are 64 bits."""
        profile = PLATFORM_PROFILES[PlatformType.UNIX64]
        assert profile.long_bit == 64
        assert profile.sizeof_long_double == 16
        assert profile.sizeof_pointer == 8

    def test_native_profile_matches_host(self):
        """Test the native profile uses the host's sizes."""
        profile = PLATFORM_PROFILES[PlatformType.NATIVE]
        assert profile.sizeof_int == ctypes.sizeof(ctypes.c_int)
        assert profile.sizeof_long == ctypes.sizeof(ctypes.c_long)
        assert profile.sizeof_pointer == ctypes.sizeof(ctypes.c_void_p)
        assert profile.default_sign in ("s", "u")

    def test_unspecified_profile_has_no_sign(self):
        """Test the unspecified profile leaves char signedness open."""
        profile = PLATFORM_PROFILES[PlatformType.UNSPECIFIED]
        assert profile.default_sign == ""
        assert profile.sizeof_int == ctypes.sizeof(ctypes.c_int)

    def test_custom_has_no_builtin_profile(self):
        """Test custom profiles only come from platform files."""
        assert PlatformType.CUSTOM not in PLATFORM_PROFILES
        assert get_platform_profile("custom") is None

    def test_get_platform_profile(self):
        """Test lookup by name and by type."""
        assert get_platform_profile("unix64") is PLATFORM_PROFILES[PlatformType.UNIX64]
        assert get_platform_profile(PlatformType.WIN64) is PLATFORM_PROFILES[PlatformType.WIN64]
        assert get_platform_profile("nonexistent") is None

    def test_profiles_are_immutable(self):
        """Test profiles cannot be modified in place."""
        profile = PLATFORM_PROFILES[PlatformType.UNIX64]
        with pytest.raises(AttributeError):
            profile.sizeof_int = 2  # type: ignore[misc]


class TestSelectProfile:
    """Test suite for select_profile."""

    def test_select_known(self):
        """Test selecting a known profile."""
        current = PLATFORM_PROFILES[PlatformType.UNIX64]
        selected, profile = select_profile("win32A", current)
        assert selected is True
        assert profile.platform_type == PlatformType.WIN32A

    def test_select_unknown_keeps_current(self):
        """Test unknown names fail and keep the current profile."""
        current = PLATFORM_PROFILES[PlatformType.UNIX32]
        selected, profile = select_profile("vax", current)
        assert selected is False
        assert profile is current
        assert profile.sizeof_long_double == 12


class TestLoadPlatformFile:
    """Test suite for platform XML files."""

    @pytest.fixture
    def base(self):
        """Profile the file is loaded on top of."""
        return PLATFORM_PROFILES[PlatformType.UNIX64]

    @pytest.fixture
    def platform_xml(self, tmp_path):
        """Fixture to provide a temporary platform file path."""
        return tmp_path / "platform.xml"

    def test_char_bit_only(self, platform_xml, base):
        """Test char_bit overrides bit widths and keeps every sizeof."""
        platform_xml.write_text("<platform><char_bit>16</char_bit></platform>")
        profile = load_platform_file(platform_xml, base)

        assert profile.char_bit == 16
        for field_name in (
            "sizeof_bool",
            "sizeof_short",
            "sizeof_int",
            "sizeof_long",
            "sizeof_long_long",
            "sizeof_float",
            "sizeof_double",
            "sizeof_long_double",
            "sizeof_wchar_t",
            "sizeof_size_t",
            "sizeof_pointer",
        ):
            assert getattr(profile, field_name) == getattr(base, field_name)
        assert profile.short_bit == 16 * base.sizeof_short
        assert profile.int_bit == 16 * base.sizeof_int
        assert profile.long_bit == 16 * base.sizeof_long
        assert profile.long_long_bit == 16 * base.sizeof_long_long

    def test_full_file(self, platform_xml, base):
        """Test a file setting every field."""
        platform_xml.write_text(
            """<?xml version="1.0"?>
<platform>
  <char_bit>8</char_bit>
  <default-sign>unsigned</default-sign>
  <sizeof>
    <bool>1</bool>
    <short>2</short>
    <int>2</int>
    <long>4</long>
    <long-long>8</long-long>
    <float>4</float>
    <double>4</double>
    <long-double>4</long-double>
    <pointer>2</pointer>
    <size_t>2</size_t>
    <wchar_t>2</wchar_t>
  </sizeof>
</platform>
"""
        )
        profile = load_platform_file(platform_xml, base)

        assert profile.platform_type == PlatformType.CUSTOM
        assert profile.default_sign == "u"
        assert profile.sizeof_int == 2
        assert profile.int_bit == 16
        assert profile.sizeof_long == 4
        assert profile.long_bit == 32
        assert profile.sizeof_double == 4
        assert profile.sizeof_long_double == 4
        assert profile.sizeof_pointer == 2
        assert profile.sizeof_size_t == 2
        assert profile.sizeof_wchar_t == 2

    def test_partial_sizeof(self, platform_xml, base):
        """Test only listed sizes change."""
        platform_xml.write_text("<platform><sizeof><pointer>4</pointer></sizeof></platform>")
        profile = load_platform_file(platform_xml, base)
        assert profile.sizeof_pointer == 4
        assert profile.sizeof_long == base.sizeof_long
        assert profile.char_bit == base.char_bit

    def test_unknown_elements_ignored(self, platform_xml, base):
        """Test unknown children are skipped."""
        platform_xml.write_text(
            "<platform><endianness>little</endianness>"
            "<sizeof><quad>16</quad><int>8</int></sizeof></platform>"
        )
        profile = load_platform_file(platform_xml, base)
        assert profile.sizeof_int == 8

    def test_base_is_not_modified(self, platform_xml, base):
        """Test loading returns a new profile."""
        platform_xml.write_text("<platform><sizeof><int>2</int></sizeof></platform>")
        load_platform_file(platform_xml, base)
        assert base.sizeof_int == 4
        assert base.platform_type == PlatformType.UNIX64

    def test_missing_file(self, tmp_path, base):
        """Test a nonexistent file raises."""
        with pytest.raises(PlatformFileError, match="Failed to read"):
            load_platform_file(tmp_path / "missing.xml", base)

    def test_malformed_xml(self, platform_xml, base):
        """Test broken XML raises."""
        platform_xml.write_text("<platform><char_bit>8</platform>")
        with pytest.raises(PlatformFileError, match="Failed to read"):
            load_platform_file(platform_xml, base)

    def test_wrong_root(self, platform_xml, base):
        """Test a root other than <platform> raises."""
        platform_xml.write_text("<target><char_bit>8</char_bit></target>")
        with pytest.raises(PlatformFileError, match="Expected <platform>"):
            load_platform_file(platform_xml, base)

    def test_non_numeric_value_skipped(self, platform_xml, base, caplog):
        """Test a non-numeric size is skipped and the rest still applies."""
        platform_xml.write_text(
            "<platform><char_bit>16</char_bit>"
            "<sizeof><int>four</int><pointer>4</pointer></sizeof></platform>"
        )
        profile = load_platform_file(platform_xml, base)
        assert profile.sizeof_int == base.sizeof_int
        assert profile.sizeof_pointer == 4
        assert profile.char_bit == 16
        assert "Ignoring invalid value for <int>" in caplog.text

    def test_blank_value_skipped(self, platform_xml, base):
        """Test an empty size element keeps the base value."""
        platform_xml.write_text(
            "<platform><char_bit>16</char_bit><sizeof><int></int></sizeof></platform>"
        )
        profile = load_platform_file(platform_xml, base)
        assert profile.char_bit == 16
        assert profile.sizeof_int == base.sizeof_int
        assert profile.int_bit == base.sizeof_int * 16

    def test_invalid_sign_skipped(self, platform_xml, base, caplog):
        """Test a default-sign other than s or u is skipped."""
        platform_xml.write_text(
            "<platform><default-sign>x</default-sign><char_bit>16</char_bit></platform>"
        )
        profile = load_platform_file(platform_xml, base)
        assert profile.default_sign == base.default_sign
        assert profile.char_bit == 16
        assert "default-sign" in caplog.text

    def test_returns_platform_profile(self, platform_xml, base):
        """Test the result type."""
        platform_xml.write_text("<platform/>")
        profile = load_platform_file(platform_xml, base)
        assert isinstance(profile, PlatformProfile)
        assert profile.platform_type == PlatformType.CUSTOM
        assert profile.sizeof_int == base.sizeof_int
