import pytest

from medmap.regions import REGIONS, RegionRegistry

SAMPLE_CSV = """Заболеваемость врожденными аномалиями по субъектам РФ
Субъект;Население;Случаи;На 100 тыс.;Случаи;На 100 тыс.;Случаи;На 100 тыс.;Случаи;На 100 тыс.;Случаи;На 100 тыс.;Случаи;На 100 тыс.
Российская Федерация;146000000;250000,0;170,3;60000;41,1;30000;20,5;5000;3,4;300;0,2;100;0,1
Северо-Западный ФО;13900000;20000,0;143,9;5000;36,0;2500;18,0;400;2,9;30;0,2;10;0,1
Республика Карелия;530000;1200,4;226,4;300;56,6;150;28,3;20;3,8;2;0,4;1;0,2
Республика Коми;730000;1500,6;205,5;410;56,2;160;21,9;25;3,4;3;0,4;0;0
г. Санкт-Петербург;5600000;8000,0;142,9;2100;37,5;900;16,1;100;1,8;10;0,2;5;0,1

Калужская область;1000000;900;90,0;200;20,0
"""


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV


@pytest.fixture
def registry():
    return RegionRegistry(REGIONS)


def make_feature_collection(keys, prop="NAME_1"):
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {prop: k},
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[[30 + i, 60], [31 + i, 60], [31 + i, 61], [30 + i, 61], [30 + i, 60]]],
                },
            }
            for i, k in enumerate(keys)
        ],
    }


@pytest.fixture
def feature_collection():
    return make_feature_collection
