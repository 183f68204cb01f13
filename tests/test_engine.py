from datetime import datetime, timedelta, timezone

import pytest

from worldtimez.core.engine import (
    format_offset,
    format_zone_id,
    generate_slots,
    is_canonical_zone_id,
    localize,
)
from worldtimez.core.errors import InvalidZone


def test_format_zone_id_keeps_canonical_ids():
    assert format_zone_id("Asia/Dhaka") == "Asia/Dhaka"
    assert format_zone_id("America/Los_Angeles") == "America/Los_Angeles"


def test_format_zone_id_repairs_legacy_slugs():
    assert format_zone_id("asia_dhaka") == "Asia/Dhaka"
    assert format_zone_id("asia_sylhet") == "Asia/Dhaka"
    assert format_zone_id("americas_chicago") == "America/Chicago"
    assert format_zone_id("oceania_sydney") == "Australia/Sydney"
    assert format_zone_id("Europe_Paris") == "Europe/Paris"


def test_format_zone_id_without_city_reuses_region():
    assert format_zone_id("europe") == "Europe/Europe"


def test_is_canonical_zone_id():
    assert is_canonical_zone_id("Asia/Dhaka")
    assert not is_canonical_zone_id("invalid id")
    assert not is_canonical_zone_id("UTC")
    assert not is_canonical_zone_id("America/Indiana/Knox")
    assert not is_canonical_zone_id(None)


def test_format_offset_pads_hours_and_minutes():
    assert format_offset(330) == "UTC+05:30"
    assert format_offset(0) == "UTC+00:00"
    assert format_offset(-210) == "UTC-03:30"
    assert format_offset(-600) == "UTC-10:00"


def test_localize_recomputes_offset_and_date(reference):
    info = localize(reference, "Asia/Kolkata")

    assert info.zone_id == "Asia/Kolkata"
    assert (info.local.hour, info.local.minute) == (17, 30)
    assert info.utc_offset_minutes == 330
    assert info.offset_label == "UTC+05:30"
    assert info.date_label == "Mon, Jan 15"
    assert info.is_valid


def test_localize_rolls_over_calendar_date():
    reference = datetime(2024, 1, 15, 20, 0, tzinfo=timezone.utc)
    info = localize(reference, "Asia/Tokyo")
    assert info.date_label == "Tue, Jan 16"


def test_localize_follows_daylight_saving():
    winter = localize(datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc), "America/New_York")
    summer = localize(datetime(2024, 7, 15, 12, 0, tzinfo=timezone.utc), "America/New_York")
    assert winter.utc_offset_minutes == -300
    assert summer.utc_offset_minutes == -240


def test_localize_treats_naive_reference_as_utc():
    info = localize(datetime(2024, 1, 15, 12, 0), "Europe/London")
    assert info.local.hour == 12


def test_localize_repairs_legacy_zone_ids(reference):
    info = localize(reference, "asia_dhaka")
    assert info.zone_id == "Asia/Dhaka"
    assert info.utc_offset_minutes == 360


@pytest.mark.parametrize("zone_id", ["invalid id", "Mars/Olympus_Mons", ""])
def test_localize_rejects_unknown_zones(reference, zone_id):
    with pytest.raises(InvalidZone):
        localize(reference, zone_id)


def test_generate_slots_returns_centered_window(reference):
    slots = generate_slots(reference, "Asia/Kolkata")

    assert len(slots) == 48
    selected = [slot for slot in slots if slot.is_selected]
    assert len(selected) == 1
    assert selected[0] is slots[24]
    assert selected[0].instant == reference
    assert (selected[0].hour, selected[0].minute) == (17, 30)
    assert slots[0].instant == reference - timedelta(hours=12)
    assert slots[-1].instant == reference + timedelta(hours=11, minutes=30)


def test_generate_slots_labels_meridiem(reference):
    slots = generate_slots(reference, "Etc/UTC")
    assert slots[24].meridiem == "PM"
    assert slots[24].label == "12:00 PM"
    assert slots[0].meridiem == "AM"
    assert slots[0].label == "00:00 AM"


def test_generate_slots_is_repeatable(reference):
    assert generate_slots(reference, "Europe/Berlin") == generate_slots(reference, "Europe/Berlin")


def test_generate_slots_keeps_dst_gap_uncorrected():
    # 01:30 EST; clocks jump from 02:00 to 03:00 thirty minutes later.
    reference = datetime(2024, 3, 10, 6, 30, tzinfo=timezone.utc)
    slots = generate_slots(reference, "America/New_York")

    assert (slots[24].hour, slots[24].minute) == (1, 30)
    assert (slots[25].hour, slots[25].minute) == (3, 0)
    elapsed = slots[25].instant.astimezone(timezone.utc) - slots[24].instant.astimezone(timezone.utc)
    assert elapsed == timedelta(minutes=30)


def test_generate_slots_skips_unrepresentable_instants():
    reference = datetime(9999, 12, 31, 22, 0, tzinfo=timezone.utc)
    slots = generate_slots(reference, "Etc/UTC")

    assert len(slots) == 28
    assert sum(slot.is_selected for slot in slots) == 1
    assert (slots[-1].hour, slots[-1].minute) == (23, 30)


def test_generate_slots_custom_window(reference):
    slots = generate_slots(reference, "Etc/UTC", window_size=5, step_minutes=60, center_offset=2)
    assert [slot.hour for slot in slots] == [10, 11, 12, 13, 14]
    assert [slot.offset_index for slot in slots] == [-2, -1, 0, 1, 2]


def test_generate_slots_rejects_bad_window(reference):
    with pytest.raises(ValueError):
        generate_slots(reference, "Etc/UTC", window_size=0)
    with pytest.raises(ValueError):
        generate_slots(reference, "Etc/UTC", window_size=4, center_offset=4)


def test_generate_slots_unknown_zone_raises(reference):
    with pytest.raises(InvalidZone):
        generate_slots(reference, "invalid id")
