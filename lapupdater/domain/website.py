"""
Website configuration domain objects for lapupdater.

Mirrors the website repository's `src/data/config.json`:

    {
      "driverProfile": {"name", "gear", "featuredLink": {"label", "url"}},
      "featuredLap": {"show", "track", "car", "note"},
      "meta": {"title", "description", "siteUrl", "base", "image"}
    }

Keys are read case-insensitively. Keys this tool does not know about are
kept in `extra` and written back untouched.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _lookup(data: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Case-insensitive dictionary lookup."""
    if key in data:
        return data[key]
    lowered = key.lower()
    for k, v in data.items():
        if isinstance(k, str) and k.lower() == lowered:
            return v
    return default


def _unknown_keys(data: Dict[str, Any], known: List[str]) -> Dict[str, Any]:
    known_lower = {k.lower() for k in known}
    return {
        k: v for k, v in data.items()
        if not (isinstance(k, str) and k.lower() in known_lower)
    }


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _as_bool(value: Any) -> bool:
    try:
        return parse_bool(value)
    except ValueError:
        return False


def _drop_none(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


@dataclass
class FeaturedLink:
    label: Optional[str] = None
    url: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FeaturedLink':
        return cls(
            label=_as_str(_lookup(data, 'label')),
            url=_as_str(_lookup(data, 'url')),
            extra=_unknown_keys(data, ['label', 'url']),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = dict(self.extra)
        d.update(_drop_none({'label': self.label, 'url': self.url}))
        return d


@dataclass
class DriverProfile:
    name: Optional[str] = None
    gear: Optional[str] = None
    featured_link: FeaturedLink = field(default_factory=FeaturedLink)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DriverProfile':
        return cls(
            name=_as_str(_lookup(data, 'name')),
            gear=_as_str(_lookup(data, 'gear')),
            featured_link=FeaturedLink.from_dict(_as_dict(_lookup(data, 'featuredLink'))),
            extra=_unknown_keys(data, ['name', 'gear', 'featuredLink']),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = dict(self.extra)
        d.update(_drop_none({'name': self.name, 'gear': self.gear}))
        d['featuredLink'] = self.featured_link.to_dict()
        return d


@dataclass
class FeaturedLap:
    show: bool = False
    track: Optional[str] = None
    car: Optional[str] = None
    note: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FeaturedLap':
        return cls(
            show=_as_bool(_lookup(data, 'show', False)),
            track=_as_str(_lookup(data, 'track')),
            car=_as_str(_lookup(data, 'car')),
            note=_as_str(_lookup(data, 'note')),
            extra=_unknown_keys(data, ['show', 'track', 'car', 'note']),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = dict(self.extra)
        d['show'] = self.show
        d.update(_drop_none({'track': self.track, 'car': self.car, 'note': self.note}))
        return d


@dataclass
class Meta:
    title: Optional[str] = None
    description: Optional[str] = None
    site_url: Optional[str] = None
    base: Optional[str] = None
    image: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Meta':
        return cls(
            title=_as_str(_lookup(data, 'title')),
            description=_as_str(_lookup(data, 'description')),
            site_url=_as_str(_lookup(data, 'siteUrl')),
            base=_as_str(_lookup(data, 'base')),
            image=_as_str(_lookup(data, 'image')),
            extra=_unknown_keys(data, ['title', 'description', 'siteUrl', 'base', 'image']),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = dict(self.extra)
        d.update(_drop_none({
            'title': self.title,
            'description': self.description,
            'siteUrl': self.site_url,
            'base': self.base,
            'image': self.image,
        }))
        return d


# Editable fields: JSON path -> (section attribute, nested attribute(s))
EDITABLE_FIELDS = {
    'driverProfile.name': ('driver_profile', 'name'),
    'driverProfile.gear': ('driver_profile', 'gear'),
    'driverProfile.featuredLink.label': ('driver_profile', 'featured_link', 'label'),
    'driverProfile.featuredLink.url': ('driver_profile', 'featured_link', 'url'),
    'featuredLap.show': ('featured_lap', 'show'),
    'featuredLap.track': ('featured_lap', 'track'),
    'featuredLap.car': ('featured_lap', 'car'),
    'featuredLap.note': ('featured_lap', 'note'),
    'meta.title': ('meta', 'title'),
    'meta.description': ('meta', 'description'),
    'meta.siteUrl': ('meta', 'site_url'),
    'meta.base': ('meta', 'base'),
    'meta.image': ('meta', 'image'),
}


@dataclass
class WebsiteConfig:
    """The website's editable configuration."""
    driver_profile: DriverProfile = field(default_factory=DriverProfile)
    featured_lap: FeaturedLap = field(default_factory=FeaturedLap)
    meta: Meta = field(default_factory=Meta)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'WebsiteConfig':
        data = _as_dict(data)
        return cls(
            driver_profile=DriverProfile.from_dict(_as_dict(_lookup(data, 'driverProfile'))),
            featured_lap=FeaturedLap.from_dict(_as_dict(_lookup(data, 'featuredLap'))),
            meta=Meta.from_dict(_as_dict(_lookup(data, 'meta'))),
            extra=_unknown_keys(data, ['driverProfile', 'featuredLap', 'meta']),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = dict(self.extra)
        d['driverProfile'] = self.driver_profile.to_dict()
        d['featuredLap'] = self.featured_lap.to_dict()
        d['meta'] = self.meta.to_dict()
        return d

    def get_field(self, path: str) -> Any:
        """Read an editable field by its JSON path, e.g. 'meta.siteUrl'."""
        if path not in EDITABLE_FIELDS:
            raise KeyError(path)
        obj: Any = self
        for attr in EDITABLE_FIELDS[path]:
            obj = getattr(obj, attr)
        return obj

    def set_field(self, path: str, value: Any) -> None:
        """
        Set an editable field by its JSON path.

        Strings are trimmed. `featuredLap.show` accepts booleans or the
        usual true/false spellings.
        """
        if path not in EDITABLE_FIELDS:
            raise KeyError(path)
        attrs = EDITABLE_FIELDS[path]
        target: Any = self
        for attr in attrs[:-1]:
            target = getattr(target, attr)

        if path == 'featuredLap.show':
            value = parse_bool(value)
        elif value is not None:
            value = str(value).strip()
        setattr(target, attrs[-1], value)

    def editable_items(self) -> List[tuple]:
        """(path, value) pairs for every editable field, in form order."""
        return [(path, self.get_field(path)) for path in EDITABLE_FIELDS]


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ('true', '1', 'yes', 'on'):
        return True
    if text in ('false', '0', 'no', 'off', ''):
        return False
    raise ValueError(f"Not a boolean value: {value!r}")


__all__ = [
    'WebsiteConfig',
    'DriverProfile',
    'FeaturedLink',
    'FeaturedLap',
    'Meta',
    'EDITABLE_FIELDS',
    'parse_bool',
]
