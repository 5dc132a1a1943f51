from adkit.ortb import (
    App,
    BidRequest,
    Device,
    Geo,
    Publisher,
    Site,
    User,
    make_bid_response,
)


def test_empty_request_lookups():
    req = BidRequest()
    assert req.app_domain() == ""
    assert req.site_domain() == ""
    assert req.geo() is None
    assert req.geo_point() == (0.0, 0.0)
    assert req.user_id() == ""


def test_app_domain_precedence():
    pub = Publisher(domain="pub.example.com")
    app = App(domain="app.example.com", bundle="com.example.app", publisher=pub)
    req = BidRequest(app=app)
    assert req.app_domain() == "app.example.com"
    app.domain = ""
    assert req.app_domain() == "pub.example.com"
    pub.domain = ""
    assert req.app_domain() == "com.example.app"
    app.bundle = ""
    assert req.app_domain() == ""


def test_site_domain_precedence():
    pub = Publisher(domain="pub.example.com")
    site = Site(domain="site.example.com", publisher=pub)
    req = BidRequest(site=site)
    assert req.site_domain() == "site.example.com"
    site.domain = ""
    assert req.site_domain() == "pub.example.com"
    site.publisher = None
    assert req.site_domain() == ""


def test_geo_device_wins():
    dgeo = Geo(latitude=1.5, longitude=2.5)
    ugeo = Geo(latitude=3.5, longitude=4.5)
    req = BidRequest(device=Device(geo=dgeo), user=User(geo=ugeo))
    assert req.geo() is dgeo
    req.device = Device()
    assert req.geo() is ugeo


def test_geo_point_prefers_user():
    dgeo = Geo(latitude=1.5, longitude=2.5)
    ugeo = Geo(latitude=3.5, longitude=4.5)
    req = BidRequest(device=Device(geo=dgeo), user=User(geo=ugeo))
    assert req.geo_point() == (4.5, 3.5)
    req.user = None
    assert req.geo_point() == (2.5, 1.5)


def test_user_id_precedence():
    req = BidRequest(
        user=User(id="u1", buyer_id="b1"), device=Device(ifa="ifa-1")
    )
    assert req.user_id() == "b1"
    req.user.buyer_id = ""
    assert req.user_id() == "u1"
    req.user.id = ""
    assert req.user_id() == "ifa-1"


def test_make_bid_response():
    resp = make_bid_response(BidRequest(id="req-42"))
    assert resp.id == "req-42"
    assert len(resp.seat_bids) == 1
    assert resp.seat_bids[0].bids == []