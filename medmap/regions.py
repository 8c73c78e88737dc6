"""
Справочник регионов РФ: одна запись на субъект, все варианты названия в ней.

- key            — ключ геометрии (свойство NAME_1 в GADM)
- display_name   — короткое русское название для подписей
- official_names — названия из статистических форм (для поиска, не для resolve)
- source_aliases — подписи исходной таблицы, которые resolve переводит в key
- alt_keys       — другие написания ключа в геометрии

resolve() работает строго: точное совпадение с source_aliases, иначе имя
возвращается как есть. Поиск по любому варианту названия делает find().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from medmap.matching import top_n_from_norm_map
from medmap.normalization import normalize_region


@dataclass(frozen=True)
class RegionIdentity:
    key: str
    display_name: str
    official_names: Tuple[str, ...] = ()
    source_aliases: Tuple[str, ...] = ()
    alt_keys: Tuple[str, ...] = ()

    def names(self) -> Tuple[str, ...]:
        """Every projection of this region: keys first, then labels."""
        return (self.key, *self.alt_keys, self.display_name, *self.official_names, *self.source_aliases)


def _r(key, display, official=(), aliases=(), alt_keys=()):
    if isinstance(official, str):
        official = (official,)
    return RegionIdentity(key, display, tuple(official), tuple(aliases), tuple(alt_keys))


REGIONS: Tuple[RegionIdentity, ...] = (
    _r("Adygey", "Адыгея", "Республика Адыгея"),
    _r("Altay", "Алтайский край"),
    _r("Amur", "Амурская область"),
    _r("Arkhangelsk", "Архангельская область", ("Архангельская область без автономного округа",),
       aliases=("Архангельская обл. без АО",), alt_keys=("Arkhangel'sk",)),
    _r("Astrakhan", "Астраханская область"),
    _r("Bashkortostan", "Башкортостан", "Республика Башкортостан"),
    _r("Belgorod", "Белгородская область"),
    _r("Bryansk", "Брянская область"),
    _r("Buryat", "Бурятия", "Республика Бурятия"),
    _r("Chechnya", "Чечня", "Чеченская Республика"),
    _r("Chelyabinsk", "Челябинская область"),
    _r("Chukot", "Чукотский АО", "Чукотский автономный округ"),
    _r("Chuvash", "Чувашия", "Чувашская Республика"),
    _r("CityofSt.Petersburg", "Санкт-Петербург", "город Санкт-Петербург", aliases=("г. Санкт-Петербург",)),
    _r("Dagestan", "Дагестан", "Республика Дагестан"),
    _r("Gorno-Altay", "Республика Алтай"),
    _r("Ingush", "Ингушетия", "Республика Ингушетия"),
    _r("Irkutsk", "Иркутская область"),
    _r("Ivanovo", "Ивановская область"),
    _r("Kabardin-Balkar", "Кабардино-Балкария", "Кабардино-Балкарская Республика"),
    _r("Kaliningrad", "Калининградская область", aliases=("Калининградская область",)),
    _r("Kalmyk", "Калмыкия", "Республика Калмыкия"),
    _r("Kaluga", "Калужская область"),
    _r("Kamchatka", "Камчатский край"),
    _r("Karachay-Cherkess", "Карачаево-Черкесия", "Карачаево-Черкесская Республика"),
    _r("Karelia", "Карелия", aliases=("Республика Карелия",)),
    _r("Kemerovo", "Кемеровская область", "Кемеровская область - Кузбасс"),
    _r("Khabarovsk", "Хабаровский край"),
    _r("Khakass", "Хакасия", "Республика Хакасия"),
    _r("Khanty-Mansiy", "ХМАО", "Ханты-Мансийский автономный округ - Югра"),
    _r("Kirov", "Кировская область"),
    _r("Komi", "Коми", aliases=("Республика Коми",)),
    _r("Kostroma", "Костромская область"),
    _r("Krasnodar", "Краснодарский край"),
    _r("Krasnoyarsk", "Красноярский край"),
    _r("Kurgan", "Курганская область"),
    _r("Kursk", "Курская область"),
    _r("Leningrad", "Ленинградская область", aliases=("Ленинградская область",)),
    _r("Lipetsk", "Липецкая область"),
    _r("Magadan", "Магаданская область"),
    _r("Mariy-El", "Марий Эл", "Республика Марий Эл"),
    _r("Mordovia", "Мордовия", "Республика Мордовия"),
    _r("MoscowCity", "Москва", "г. Москва"),
    _r("Moskva", "Московская область"),
    _r("Murmansk", "Мурманская область", aliases=("Мурманская область",)),
    _r("Nenets", "Ненецкий АО", aliases=("Ненецкий автономный округ",)),
    _r("Nizhegorod", "Нижегородская область"),
    _r("NorthOssetia", "Северная Осетия", "Республика Северная Осетия - Алания"),
    _r("Novgorod", "Новгородская область", aliases=("Новгородская область",)),
    _r("Novosibirsk", "Новосибирская область"),
    _r("Omsk", "Омская область"),
    _r("Orel", "Орловская область"),
    _r("Orenburg", "Оренбургская область"),
    _r("Penza", "Пензенская область"),
    _r("Perm'", "Пермский край"),
    _r("Primor'ye", "Приморский край"),
    _r("Pskov", "Псковская область", aliases=("Псковская область",)),
    _r("Rostov", "Ростовская область"),
    _r("Ryazan'", "Рязанская область"),
    _r("Sakha", "Якутия", "Республика Саха (Якутия)"),
    _r("Sakhalin", "Сахалинская область"),
    _r("Samara", "Самарская область"),
    _r("Saratov", "Саратовская область"),
    _r("Smolensk", "Смоленская область"),
    _r("Stavropol'", "Ставропольский край"),
    _r("Sverdlovsk", "Свердловская область"),
    _r("Tambov", "Тамбовская область"),
    _r("Tatarstan", "Татарстан", "Республика Татарстан"),
    _r("Tomsk", "Томская область"),
    _r("Tula", "Тульская область"),
    _r("Tuva", "Тува", "Республика Тыва"),
    _r("Tver", "Тверская область"),
    _r("Tyumen", "Тюменская область", "Тюменская область без автономных округов"),
    _r("Udmurt", "Удмуртия", "Удмуртская Республика"),
    _r("Ulyanovsk", "Ульяновская область"),
    _r("Vladimir", "Владимирская область"),
    _r("Volgograd", "Волгоградская область"),
    _r("Vologda", "Вологодская область", aliases=("Вологодская область",)),
    _r("Voronezh", "Воронежская область"),
    _r("Yamal-Nenets", "ЯНАО", "Ямало-Ненецкий автономный округ"),
    _r("Yaroslavl", "Ярославская область"),
    _r("Yevrey", "Еврейская АО", "Еврейская автономная область"),
    _r("Zabaykalye", "Забайкальский край"),
)


class RegionRegistry:
    """Lookups over region identities by any of their names."""

    def __init__(self, regions: Iterable[RegionIdentity]):
        self.regions: Tuple[RegionIdentity, ...] = tuple(regions)
        self._by_key: Dict[str, RegionIdentity] = {}
        self._by_alias: Dict[str, RegionIdentity] = {}
        self._by_name: Dict[str, RegionIdentity] = {}
        self._by_norm: Dict[str, RegionIdentity] = {}

        keys = [i.key for i in self.regions]
        dupes = sorted({k for k in keys if keys.count(k) > 1})
        if dupes:
            raise ValueError(f"duplicate region keys: {', '.join(dupes)}")

        for ident in self.regions:
            for k in (ident.key, *ident.alt_keys):
                self._claim(self._by_key, k, ident, "key")
            for a in ident.source_aliases:
                self._claim(self._by_alias, a, ident, "source alias")
            for name in ident.names():
                self._claim(self._by_name, name, ident, "name")
                norm = normalize_region(name)
                if norm:
                    self._claim(self._by_norm, norm, ident, "normalized name")

        self._norm_to_key: Dict[str, str] = {n: i.key for n, i in self._by_norm.items()}

    @staticmethod
    def _claim(index: Dict[str, RegionIdentity], name: str, ident: RegionIdentity, what: str) -> None:
        other = index.get(name)
        if other is not None and other.key != ident.key:
            raise ValueError(f"{what} '{name}' is used by both '{other.key}' and '{ident.key}'")
        index[name] = ident

    def __len__(self) -> int:
        return len(self.regions)

    def __contains__(self, key: str) -> bool:
        return key in self._by_key

    def alias_map(self) -> Dict[str, str]:
        """Source label -> canonical key (only labels that differ from geometry naming)."""
        return {alias: ident.key for alias, ident in self._by_alias.items()}

    def display_names(self) -> Dict[str, str]:
        """Canonical key (and alternate geometry spellings) -> display name."""
        return {k: ident.display_name for k, ident in self._by_key.items()}

    def resolve(self, russian_name: str) -> str:
        """Exact alias lookup; unknown names are returned unchanged."""
        ident = self._by_alias.get(russian_name)
        return ident.key if ident is not None else russian_name

    def display_name(self, key: str) -> str:
        ident = self._by_key.get(key)
        return ident.display_name if ident is not None else key

    def get(self, key: str) -> Optional[RegionIdentity]:
        return self._by_key.get(key)

    def find(self, name: Optional[str]) -> Optional[RegionIdentity]:
        """Lookup by any name: exact first, then normalized (case, ё, whitespace)."""
        if not name:
            return None
        ident = self._by_name.get(name)
        if ident is not None:
            return ident
        norm = normalize_region(name)
        if norm is None:
            return None
        return self._by_norm.get(norm)

    def suggest(self, name: Optional[str], n: int = 3, cutoff: float = 0.6) -> List[Tuple[str, float]]:
        """Top-N (key, score 0..1) fuzzy candidates over all names."""
        return top_n_from_norm_map(normalize_region(name), self._norm_to_key, n=n, cutoff=cutoff)


REGISTRY = RegionRegistry(REGIONS)

# Таблицы в "плоском" виде для UI и внешних потребителей
REGION_KEY_MAP: Dict[str, str] = REGISTRY.alias_map()
REGION_DISPLAY_NAMES: Dict[str, str] = REGISTRY.display_names()


def resolve(russian_name: str) -> str:
    return REGISTRY.resolve(russian_name)


def display_name(key: str) -> str:
    return REGISTRY.display_name(key)
