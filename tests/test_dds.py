from enum import Enum

import pytest

from overlaykit.dds import FORMATS, UnsupportedFormatError, dds_to_vk


@pytest.mark.parametrize(
    "dds_format, expected",
    [
        ("R8Unorm", "R8_UNORM"),
        ("Rgba8UnormSrgb", "R8G8B8A8_SRGB"),
        ("BC1RgbaUnorm", "BC1_RGBA_UNORM_BLOCK"),
        ("BC6hRgbSfloat", "BC6H_SFLOAT_BLOCK"),
        ("BC7RgbaUnormSrgb", "BC7_SRGB_BLOCK"),
    ],
)
def test_known_formats(dds_format, expected):
    assert dds_to_vk(dds_format) == expected


def test_mapping_is_one_to_one():
    assert len(set(FORMATS.values())) == len(FORMATS)


def test_srgb_formats_stay_srgb():
    for dds_format in FORMATS:
        is_srgb = dds_format.endswith("Srgb")
        assert ("SRGB" in dds_to_vk(dds_format)) == is_srgb


def test_enum_member_accepted():
    Fmt = Enum("Fmt", ["Bgra8Unorm", "Rgba16Unorm"])
    assert dds_to_vk(Fmt.Bgra8Unorm) == "B8G8R8A8_UNORM"
    with pytest.raises(UnsupportedFormatError, match="Rgba16Unorm"):
        dds_to_vk(Fmt.Rgba16Unorm)


@pytest.mark.parametrize("dds_format", ["Rgba16Unorm", "", "bc1rgbaunorm"])
def test_unsupported_format(dds_format):
    with pytest.raises(UnsupportedFormatError):
        dds_to_vk(dds_format)


def test_error_is_value_error():
    with pytest.raises(ValueError, match="Unsupported format"):
        dds_to_vk("R16Snorm")