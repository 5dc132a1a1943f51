"""OpenRTB bid request and response objects with targeting lookups."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class Publisher:
    """The publisher of an app or site."""

    id: str = ""
    name: str = ""
    domain: str = ""


@dataclass
class App:
    """The application in which an impression is offered."""

    id: str = ""
    name: str = ""
    bundle: str = ""
    domain: str = ""
    publisher: Optional[Publisher] = None


@dataclass
class Site:
    """The website on which an impression is offered."""

    id: str = ""
    name: str = ""
    domain: str = ""
    page: str = ""
    publisher: Optional[Publisher] = None


@dataclass
class Geo:
    """A geographic location."""

    latitude: float = 0.0
    longitude: float = 0.0
    country: str = ""
    region: str = ""
    city: str = ""
    zip: str = ""


@dataclass
class Device:
    """The device through which the user interacts."""

    ua: str = ""
    ip: str = ""
    ifa: str = ""
    geo: Optional[Geo] = None


@dataclass
class User:
    """The human user of the device."""

    id: str = ""
    buyer_id: str = ""
    geo: Optional[Geo] = None


@dataclass
class BidRequest:
    """A bid request with helpers used for targeting and frequency capping."""

    id: str = ""
    app: Optional[App] = None
    site: Optional[Site] = None
    device: Optional[Device] = None
    user: Optional[User] = None

    def app_domain(self) -> str:
        """Domain of the app, its publisher's domain, or its bundle; "" if none."""
        if self.app is None:
            return ""
        if self.app.domain:
            return self.app.domain
        if self.app.publisher is not None and self.app.publisher.domain:
            return self.app.publisher.domain
        return self.app.bundle

    def site_domain(self) -> str:
        """Domain of the site or of its publisher; "" if none."""
        if self.site is None:
            return ""
        if self.site.domain:
            return self.site.domain
        if self.site.publisher is not None and self.site.publisher.domain:
            return self.site.publisher.domain
        return ""

    def geo(self) -> Optional[Geo]:
        """Location for targeting; the device's wins over the user's."""
        if self.device is not None and self.device.geo is not None:
            return self.device.geo
        if self.user is not None and self.user.geo is not None:
            return self.user.geo
        return None

    def geo_point(self) -> Tuple[float, float]:
        """(longitude, latitude), preferring the user's location; zeros if none."""
        for holder in (self.user, self.device):
            if holder is not None and holder.geo is not None:
                return (holder.geo.longitude, holder.geo.latitude)
        return (0.0, 0.0)

    def user_id(self) -> str:
        """Identifier of the user suitable for frequency capping; "" if none."""
        if self.user is not None and self.user.buyer_id:
            return self.user.buyer_id
        if self.user is not None and self.user.id:
            return self.user.id
        if self.device is not None and self.device.ifa:
            return self.device.ifa
        return ""


@dataclass
class Bid:
    """An offer to buy one impression."""

    id: str = ""
    imp_id: str = ""
    price: float = 0.0
    adm: str = ""


@dataclass
class SeatBid:
    """Bids made on behalf of one seat."""

    bids: List[Bid] = field(default_factory=list)
    seat: str = ""


@dataclass
class BidResponse:
    """The answer to a bid request."""

    id: str = ""
    seat_bids: List[SeatBid] = field(default_factory=list)
    currency: str = ""


def make_bid_response(request: BidRequest) -> BidResponse:
    """Return an empty response to request: one seat with no bids."""
    return BidResponse(id=request.id, seat_bids=[SeatBid(bids=[])])