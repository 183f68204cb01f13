from datetime import datetime, timezone

from worldtimez.core import entries
from worldtimez.core.entries import TimezoneEntry, identity_key


def _entry(zone_id: str, city: str, country: str = "Somewhere", offset: int = 0) -> TimezoneEntry:
    return TimezoneEntry(
        zone_id=zone_id,
        display_name=f"{city}, {country}",
        city=city,
        country=country,
        population=1000,
        utc_offset_minutes=offset,
    )


DHAKA = _entry("Asia/Dhaka", "Dhaka", "Bangladesh", 360)
SYLHET = _entry("Asia/Dhaka", "Sylhet", "Bangladesh", 360)
LONDON = _entry("Europe/London", "London", "United Kingdom", 0)
TOKYO = _entry("Asia/Tokyo", "Tokyo", "Japan", 540)


def test_identity_key_joins_zone_and_city():
    assert identity_key(DHAKA) == "Asia/Dhaka_Dhaka"
    assert DHAKA.key == "Asia/Dhaka_Dhaka"


def test_entry_dumps_with_stored_field_names():
    assert DHAKA.model_dump(by_alias=True) == {
        "id": "Asia/Dhaka",
        "name": "Dhaka, Bangladesh",
        "city": "Dhaka",
        "country": "Bangladesh",
        "population": 1000,
        "offset": 360,
    }


def test_add_appends_new_entries_in_order():
    result = entries.add(entries.add([], DHAKA), LONDON)
    assert result == [DHAKA, LONDON]


def test_add_same_zone_different_city_is_distinct():
    result = entries.add([DHAKA], SYLHET)
    assert result == [DHAKA, SYLHET]


def test_add_is_idempotent():
    once = entries.add([DHAKA], LONDON)
    assert entries.add(once, LONDON) == once


def test_add_ignores_duplicate_identity_with_other_fields():
    relabelled = _entry("Asia/Dhaka", "Dhaka", "People's Republic of Bangladesh", 999)
    assert entries.add([DHAKA], relabelled) == [DHAKA]


def test_add_keeps_identity_keys_unique():
    result: list = []
    for entry in [DHAKA, LONDON, DHAKA, SYLHET, LONDON, TOKYO, SYLHET]:
        result = entries.add(result, entry)
    keys = [identity_key(entry) for entry in result]
    assert len(keys) == len(set(keys)) == 4


def test_add_does_not_mutate_input():
    original = [DHAKA]
    entries.add(original, LONDON)
    assert original == [DHAKA]


def test_remove_drops_matching_identity():
    assert entries.remove([DHAKA, LONDON, TOKYO], LONDON) == [DHAKA, TOKYO]


def test_remove_absent_entry_is_noop():
    assert entries.remove([DHAKA], LONDON) == [DHAKA]


def test_move_forward_and_back():
    items = [DHAKA, LONDON, TOKYO]
    assert entries.move(items, 0, 2) == [LONDON, TOKYO, DHAKA]
    assert entries.move(items, 2, 0) == [TOKYO, DHAKA, LONDON]
    assert items == [DHAKA, LONDON, TOKYO]


def test_move_produces_permutation():
    items = [DHAKA, SYLHET, LONDON, TOKYO]
    for source in range(len(items)):
        for target in range(len(items)):
            moved = entries.move(items, source, target)
            assert sorted(moved, key=identity_key) == sorted(items, key=identity_key)
            assert moved[target] == items[source]


def test_move_out_of_range_leaves_order_unchanged():
    items = [DHAKA, LONDON]
    assert entries.move(items, 0, 5) == items
    assert entries.move(items, -1, 0) == items
    assert entries.move([], 0, 0) == []


def test_reorder_by_identity_key():
    result = entries.reorder([DHAKA, LONDON, TOKYO], LONDON.key, DHAKA.key)
    assert result == [LONDON, DHAKA, TOKYO]


def test_reorder_unknown_key_is_noop():
    items = [DHAKA, LONDON]
    assert entries.reorder(items, "Nowhere/Land_Nowhere", DHAKA.key) == items
    assert entries.reorder(items, DHAKA.key, DHAKA.key) == items


def test_find_and_index_of():
    items = [DHAKA, LONDON]
    assert entries.index_of(items, LONDON.key) == 1
    assert entries.find(items, LONDON.key) == LONDON
    assert entries.find(items, TOKYO.key) is None


def test_seed_default_uses_host_zone(settings):
    now = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)
    seeded = entries.seed_default(now=now, settings=settings)

    assert len(seeded) == 1
    entry = seeded[0]
    assert entry.zone_id == "Asia/Dhaka"
    assert entry.display_name == "Asia/Dhaka"
    assert entry.city == "Dhaka"
    assert entry.country == "Asia"
    assert entry.utc_offset_minutes == 360
    assert entry.population == 0


def test_seed_default_cleans_underscores(settings):
    now = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)
    entry = entries.seed_default("America/Los_Angeles", now=now, settings=settings)[0]
    assert entry.city == "Los Angeles"
    assert entry.country == "America"
    assert entry.utc_offset_minutes == -420


def test_seed_default_falls_back_for_non_region_zones(settings):
    seeded = entries.seed_default("UTC", settings=settings)
    assert [entry.zone_id for entry in seeded] == ["Etc/UTC"]
    assert seeded[0].city == "UTC"


def test_seed_default_falls_back_for_unknown_zone(settings):
    seeded = entries.seed_default("Mars/Olympus_Mons", settings=settings)
    assert [entry.zone_id for entry in seeded] == ["Etc/UTC"]


def test_seed_default_uses_short_link_for_three_segment_zone(settings):
    now = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)
    seeded = entries.seed_default("America/Indiana/Indianapolis", now=now, settings=settings)

    assert [entry.zone_id for entry in seeded] == ["America/Indianapolis"]
    assert seeded[0].city == "Indianapolis"
    assert seeded[0].country == "America"
    assert seeded[0].utc_offset_minutes == -240


def test_seed_default_short_link_keeps_underscores_readable(settings):
    now = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)
    entry = entries.seed_default("America/Argentina/Buenos_Aires", now=now, settings=settings)[0]

    assert entry.zone_id == "America/Buenos_Aires"
    assert entry.city == "Buenos Aires"
    assert entry.utc_offset_minutes == -180


def test_seed_default_falls_back_when_no_short_link_exists(settings):
    seeded = entries.seed_default("America/Indiana/Knox", settings=settings)
    assert [entry.zone_id for entry in seeded] == ["Etc/UTC"]
