"""Artwork type alias table and stem resolution."""

from types import MappingProxyType

# Canonical artwork type -> file name stems Jellyfin recognizes for it.
# Order matters: existing files are reported in alias order.
ARTWORK_TYPE_ALIASES = MappingProxyType({
    'poster': ('poster', 'folder', 'cover', 'default', 'movie'),
    'backdrop': ('backdrop', 'fanart', 'background', 'art'),
    'logo': ('logo', 'clearlogo'),
    'disc': ('disc', 'discart'),
})


def acceptable_stems(stem: str) -> tuple[str, ...]:
    """Return the existing-file stems that count as the same artwork as ``stem``.

    Only canonical type names are table keys. Anything else (custom artwork
    kinds, or an alias such as 'folder' used as an external name) passes
    through and matches itself only.

    Examples:
        >>> acceptable_stems('poster')
        ('poster', 'folder', 'cover', 'default', 'movie')
        >>> acceptable_stems('banner')
        ('banner',)
    """
    return ARTWORK_TYPE_ALIASES.get(stem, (stem,))
