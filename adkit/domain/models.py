"""Ad-serving domain entities: advertisers, campaigns, line items and targeting."""

from __future__ import annotations

import enum
import ipaddress
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from bson import ObjectId

from adkit.ortb import Geo

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

_LIFETIME_SPAN = timedelta(microseconds=(2**63 - 1) // 1000)


class TimeUnit(enum.IntEnum):
    """Time units of frequency caps."""

    UNSPECIFIED = 0
    MINUTE = 1
    HOUR = 2
    DAY = 3
    WEEK = 4
    MONTH = 5
    LIFETIME = 6


class TimeZoneType(enum.IntEnum):
    """Whose time zone day parts are expressed in."""

    SYSTEM = 0
    PUBLISHER = 1
    BROWSER = 2


class CreativeRotationType(enum.IntEnum):
    """How the creatives of a line item take turns."""

    EVEN = 0
    OPTIMIZED = 1
    MANUAL = 2
    SEQUENTIAL = 3


class Priority(enum.IntEnum):
    """Serving priority; higher values win."""

    HOUSE = 0
    STANDARD = 1
    SPONSORSHIP = 2


class State(enum.IntEnum):
    """State of an entity."""

    UNKNOWN = 0
    INACTIVE = 1
    PAUSED = 2
    ACTIVE = 3


class Status(enum.IntEnum):
    """Status of an entity, mostly for display."""

    DRAFT = 0
    PENDING_APPROVAL = 1
    DISAPPROVED = 2
    PAUSED = 3
    CANCELLED = 4
    READY = 5
    DELIVERING = 6


class DeliveryPacingType(enum.IntEnum):
    """How delivery is spread over a line item's flight."""

    NONE = 0
    EVEN = 1
    FRONT_LOADED = 2


class GoalType(enum.IntEnum):
    """Period over which a line item's goal should be reached."""

    NONE = 0
    LIFETIME = 1
    DAILY = 2


@dataclass
class Base:
    """Fields shared by persisted entities."""

    oid: Optional[ObjectId] = None
    created: Optional[datetime] = None
    updated: Optional[datetime] = None


def new_base() -> Base:
    """Return a Base with a fresh object id and the current time."""
    return Base(oid=ObjectId(), created=datetime.now(), updated=datetime.now())


@dataclass
class Advertiser(Base):
    name: str = ""
    url: str = ""
    iab_cat: List[str] = field(default_factory=list)
    tax_id: str = ""


@dataclass
class Campaign(Base):
    """A collection of line items grouped around a theme."""

    id: str = ""
    name: str = ""
    advertiser_id: str = ""
    start_date_time: Optional[datetime] = None
    end_date_time: Optional[datetime] = None


@dataclass
class AdUnit:
    id: str = ""


@dataclass
class GamMoney:
    """An amount in micros: a millionth of the currency unit."""

    currency_code: str = ""
    micro_amount: int = 0


@dataclass
class Money:
    currency_code: str = ""
    amount: float = 0.0


@dataclass
class Size:
    """Dimensions of an ad unit, line item or creative."""

    width: int = 0
    height: int = 0
    is_aspect_ratio: bool = False


@dataclass
class FrequencyCap:
    """At most max_impressions per num_time_units time units."""

    max_impressions: int = 0
    num_time_units: int = 0
    time_unit: TimeUnit = TimeUnit.UNSPECIFIED


_UNIT_SPANS = {
    TimeUnit.MINUTE: timedelta(minutes=1),
    TimeUnit.HOUR: timedelta(hours=1),
    TimeUnit.DAY: timedelta(days=1),
    TimeUnit.WEEK: timedelta(days=7),
    TimeUnit.MONTH: timedelta(days=30),
}


def to_duration(cap: FrequencyCap) -> timedelta:
    """Span covered by cap; unspecified and lifetime units span ~292 years."""
    unit = _UNIT_SPANS.get(TimeUnit(cap.time_unit))
    if unit is None:
        return _LIFETIME_SPAN
    return unit * cap.num_time_units


@dataclass
class DayPart:
    """A period of a weekday; times are UTC with the date at the epoch."""

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    week_day: int = 0
    time_zone: TimeZoneType = TimeZoneType.SYSTEM


@dataclass
class BaseSpec:
    """Common part of targeting specifications."""

    type: str = ""

    def kind(self) -> str:
        """The kind of targeting."""
        return self.type


@dataclass
class DayPartSpec(BaseSpec):
    excluded: List[DayPart] = field(default_factory=list)
    targeted: List[DayPart] = field(default_factory=list)


@dataclass
class GeoFence:
    """A circle around a (longitude, latitude) point."""

    point: Tuple[float, float] = (0.0, 0.0)
    radius_meters: int = 0


@dataclass
class GeoFenceSpec(BaseSpec):
    excluded: List[GeoFence] = field(default_factory=list)
    targeted: List[GeoFence] = field(default_factory=list)


@dataclass
class GeoLocationSpec(BaseSpec):
    """Targeting by city, country, region and the like."""

    excluded: List[Geo] = field(default_factory=list)
    targeted: List[Geo] = field(default_factory=list)


@dataclass
class GeoJsonSpec(BaseSpec):
    """Targeting by GeoJSON feature collections."""

    excluded: List[Dict[str, Any]] = field(default_factory=list)
    targeted: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class IpAddrSpec(BaseSpec):
    excluded: List[IPNetwork] = field(default_factory=list)
    targeted: List[IPNetwork] = field(default_factory=list)


def _parse_cidrs(cidrs: Sequence[str]) -> List[IPNetwork]:
    networks = []
    for text in cidrs:
        if "/" not in text:
            continue
        try:
            networks.append(ipaddress.ip_network(text, strict=False))
        except ValueError:
            continue
    return networks


def new_ip_addr_spec(included: Sequence[str], excluded: Sequence[str]) -> IpAddrSpec:
    """Build an IP targeting spec from CIDR strings, skipping invalid ones."""
    return IpAddrSpec(
        type="ipaddrspec",
        targeted=_parse_cidrs(included),
        excluded=_parse_cidrs(excluded),
    )


@dataclass
class LineItem(Base):
    advertiser_id: str = ""
    campaign_id: str = ""
    name: str = ""
    fcap: FrequencyCap = field(default_factory=FrequencyCap)
    priority: Priority = Priority.HOUSE
    targeting: List[BaseSpec] = field(default_factory=list)