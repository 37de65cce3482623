"""Mapping of DDS surface formats to Vulkan image formats."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType


class UnsupportedFormatError(ValueError):
    """Raised when a DDS format has no Vulkan counterpart."""


FORMATS = MappingProxyType(
    {
        "R8Unorm": "R8_UNORM",
        "Rgba8Unorm": "R8G8B8A8_UNORM",
        "Rgba8UnormSrgb": "R8G8B8A8_SRGB",
        "Rgba16Float": "R16G16B16A16_SFLOAT",
        "Rgba32Float": "R32G32B32A32_SFLOAT",
        "Bgra8Unorm": "B8G8R8A8_UNORM",
        "Bgra8UnormSrgb": "B8G8R8A8_SRGB",
        # DXT1
        "BC1RgbaUnorm": "BC1_RGBA_UNORM_BLOCK",
        "BC1RgbaUnormSrgb": "BC1_RGBA_SRGB_BLOCK",
        # DXT3
        "BC2RgbaUnorm": "BC2_UNORM_BLOCK",
        "BC2RgbaUnormSrgb": "BC2_SRGB_BLOCK",
        # DXT5
        "BC3RgbaUnorm": "BC3_UNORM_BLOCK",
        "BC3RgbaUnormSrgb": "BC3_SRGB_BLOCK",
        # RGTC1
        "BC4RUnorm": "BC4_UNORM_BLOCK",
        "BC4RSnorm": "BC4_SNORM_BLOCK",
        # RGTC2
        "BC5RgUnorm": "BC5_UNORM_BLOCK",
        "BC5RgSnorm": "BC5_SNORM_BLOCK",
        # BPTC
        "BC6hRgbUfloat": "BC6H_UFLOAT_BLOCK",
        "BC6hRgbSfloat": "BC6H_SFLOAT_BLOCK",
        "BC7RgbaUnorm": "BC7_UNORM_BLOCK",
        "BC7RgbaUnormSrgb": "BC7_SRGB_BLOCK",
    }
)


def dds_to_vk(dds_format: str | Enum) -> str:
    """Return the Vulkan format name for a DDS format name or enum member."""
    name = dds_format.name if isinstance(dds_format, Enum) else dds_format
    try:
        return FORMATS[name]
    except (KeyError, TypeError):
        raise UnsupportedFormatError(f"Unsupported format {name}") from None