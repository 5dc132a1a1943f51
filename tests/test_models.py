import ipaddress
from datetime import datetime, timedelta

from bson import ObjectId

from adkit.domain.models import (
    Advertiser,
    BaseSpec,
    FrequencyCap,
    LineItem,
    Priority,
    Status,
    TimeUnit,
    new_base,
    new_ip_addr_spec,
    to_duration,
)


def test_new_base_sets_fields():
    before = datetime.now()
    base = new_base()
    after = datetime.now()
    assert isinstance(base.oid, ObjectId)
    assert before <= base.created <= after
    assert before <= base.updated <= after


def test_new_base_ids_unique():
    assert new_base().oid != new_base().oid or False
    ids = {new_base().oid for _ in range(50)}
    assert len(ids) == 50


def test_to_duration_minutes_and_days():
    assert to_duration(FrequencyCap(num_time_units=10, time_unit=TimeUnit.MINUTE)) == timedelta(minutes=10)
    assert to_duration(FrequencyCap(num_time_units=10, time_unit=TimeUnit.DAY)) == timedelta(days=10)


def test_to_duration_lifetime():
    life = to_duration(FrequencyCap(num_time_units=1, time_unit=TimeUnit.LIFETIME))
    assert life == to_duration(FrequencyCap())
    assert life > to_duration(FrequencyCap(num_time_units=255, time_unit=TimeUnit.MONTH))


def test_new_ip_addr_spec_parses_networks():
    spec = new_ip_addr_spec(["192.168.1.1/24"], ["192.168.2.1/24"])
    assert spec.kind() == "ipaddrspec"
    assert len(spec.targeted) == 1
    assert len(spec.excluded) == 1
    assert ipaddress.ip_address("192.168.1.1") in spec.targeted[0]
    assert ipaddress.ip_address("192.168.2.1") not in spec.targeted[0]
    assert spec.targeted[0].prefixlen == 24
    assert ipaddress.ip_address("192.168.2.1") in spec.excluded[0]


def test_new_ip_addr_spec_skips_invalid():
    spec = new_ip_addr_spec(["not-a-cidr", "10.0.0.1", "10.0.0.0/8"], ["999.1.1.1/24"])
    assert len(spec.targeted) == 1
    assert ipaddress.ip_address("10.1.2.3") in spec.targeted[0]
    assert spec.excluded == []


def test_base_spec_kind():
    assert BaseSpec(type="daypart").kind() == "daypart"


def test_enum_ordering():
    assert Priority(0) is Priority.HOUSE
    assert sorted([Priority(2), Priority(0), Priority(1)]) == [
        Priority.HOUSE,
        Priority.STANDARD,
        Priority.SPONSORSHIP,
    ]
    assert Status(0) is Status.DRAFT
    assert Status(6) is Status.DELIVERING
    assert TimeUnit(6) is TimeUnit.LIFETIME
    assert TimeUnit(6) > TimeUnit(5)


def test_line_item_defaults_and_targeting():
    spec = new_ip_addr_spec(["172.16.0.0/12"], [])
    item = LineItem(name="LineItem-1", fcap=FrequencyCap(10, 10, TimeUnit.DAY), targeting=[spec])
    assert item.priority is Priority.HOUSE
    assert item.targeting[0].kind() == "ipaddrspec"
    assert to_duration(item.fcap) == timedelta(days=10)
    assert item.oid is None


def test_advertiser_lists_independent():
    a = Advertiser(name="a")
    b = Advertiser(name="b")
    a.iab_cat.append("IAB1")
    assert b.iab_cat == []