import pytest

from address_suggest.pipeline_types import CommuneGeoContext


SPRINGFIELD_BBOX = (48.80, 48.90, 2.25, 2.40)


def make_feature(label, lon=2.33, lat=48.86, **props):
    properties = {"label": label}
    properties.update(props)
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
        "properties": properties,
    }


class FakeBan:
    """Stand-in for BanClient: canned features per query, records every call."""

    def __init__(self, responses=None, reverse_features=None):
        self.responses = responses or {}
        self.reverse_features = reverse_features or []
        self.calls = []
        self.reverse_calls = []

    def search(self, query, limit, latitude, longitude, types=None):
        self.calls.append({"q": query, "limit": limit, "types": types})
        resp = self.responses.get(query, [])
        if isinstance(resp, Exception):
            raise resp
        return resp

    def reverse(self, latitude, longitude, postcode=None, city=None):
        self.reverse_calls.append(
            {"lat": latitude, "lon": longitude, "postcode": postcode, "city": city}
        )
        if isinstance(self.reverse_features, Exception):
            raise self.reverse_features
        return self.reverse_features


@pytest.fixture
def springfield():
    return CommuneGeoContext(
        id="c-springfield",
        name="Springfield",
        postal_codes=("75000",),
        bounding_box=SPRINGFIELD_BBOX,
        latitude=48.85,
        longitude=2.33,
    )
