import pytest

from medmap.regions import (
    REGION_DISPLAY_NAMES,
    REGION_KEY_MAP,
    REGIONS,
    RegionIdentity,
    RegionRegistry,
    display_name,
    resolve,
)

REFERENCE_ALIASES = {
    "Республика Карелия": "Karelia",
    "Республика Коми": "Komi",
    "Архангельская обл. без АО": "Arkhangelsk",
    "Ненецкий автономный округ": "Nenets",
    "Вологодская область": "Vologda",
    "Калининградская область": "Kaliningrad",
    "Ленинградская область": "Leningrad",
    "Мурманская область": "Murmansk",
    "Новгородская область": "Novgorod",
    "Псковская область": "Pskov",
    "г. Санкт-Петербург": "CityofSt.Petersburg",
}


def test_alias_map_matches_reference_table():
    assert REGION_KEY_MAP == REFERENCE_ALIASES


@pytest.mark.parametrize("alias,key", sorted(REFERENCE_ALIASES.items()))
def test_resolve_fixed_point_on_aliases(alias, key):
    assert resolve(alias) == key


def test_resolve_st_petersburg():
    assert resolve("г. Санкт-Петербург") == "CityofSt.Petersburg"


@pytest.mark.parametrize("name", ["Карелия", "Омская область", "  Республика Карелия", "республика карелия", "x"])
def test_resolve_unknown_is_identity(name):
    assert resolve(name) == name


def test_short_karelia_label_does_not_reach_geometry_key():
    # подпись "Карелия" не входит в таблицу алиасов и не совпадает с ключом "Karelia"
    assert resolve("Карелия") == "Карелия"
    assert resolve("Карелия") != "Karelia"


def test_display_names_cover_all_subjects():
    assert len(REGIONS) >= 80
    assert REGION_DISPLAY_NAMES["CityofSt.Petersburg"] == "Санкт-Петербург"
    assert REGION_DISPLAY_NAMES["Arkhangel'sk"] == "Архангельская область"
    assert REGION_DISPLAY_NAMES["Arkhangelsk"] == "Архангельская область"
    for alias_key in REGION_KEY_MAP.values():
        assert alias_key in REGION_DISPLAY_NAMES


def test_display_name_fallback():
    assert display_name("Karelia") == "Карелия"
    assert display_name("Карелия") == "Карелия"
    assert display_name("Nowhere") == "Nowhere"


def test_find_by_any_name(registry):
    assert registry.find("Karelia").key == "Karelia"
    assert registry.find("Карелия").key == "Karelia"
    assert registry.find("Республика Карелия").key == "Karelia"
    assert registry.find("Arkhangel'sk").key == "Arkhangelsk"
    assert registry.find("Республика Саха (Якутия)").key == "Sakha"


def test_find_normalized(registry):
    assert registry.find("  республика   карелия ").key == "Karelia"
    assert registry.find("Удмуртская республика").key == "Udmurt"
    assert registry.find("Кемеровская область — Кузбасс").key == "Kemerovo"


@pytest.mark.parametrize("name", [None, "", "Атлантида"])
def test_find_unknown(registry, name):
    assert registry.find(name) is None


def test_suggest_ranks_close_names(registry):
    keys = [k for k, _ in registry.suggest("Карелия респ.")]
    assert keys[0] == "Karelia"
    assert len(keys) == len(set(keys))


def test_suggest_empty(registry):
    assert registry.suggest(None) == []


def test_registry_contains_keys_and_alt_keys(registry):
    assert "Karelia" in registry
    assert "Arkhangel'sk" in registry
    assert "Карелия" not in registry
    assert len(registry) == len(REGIONS)


def test_duplicate_keys_rejected():
    with pytest.raises(ValueError):
        RegionRegistry([RegionIdentity("Omsk", "Омская область"), RegionIdentity("Omsk", "Омск")])


def test_shared_alias_rejected():
    with pytest.raises(ValueError):
        RegionRegistry(
            [
                RegionIdentity("Omsk", "Омская область", source_aliases=("Омская",)),
                RegionIdentity("Tomsk", "Томская область", source_aliases=("Омская",)),
            ]
        )


def test_custom_registry_resolve():
    reg = RegionRegistry([RegionIdentity("Omsk", "Омская область", source_aliases=("Омская обл.",))])
    assert reg.resolve("Омская обл.") == "Omsk"
    assert reg.resolve("Омская область") == "Омская область"
    assert reg.alias_map() == {"Омская обл.": "Omsk"}
