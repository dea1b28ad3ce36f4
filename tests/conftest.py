import matplotlib

matplotlib.use('Agg')

import pytest

from wvdm.params import PathMode, ShapeParameters


@pytest.fixture
def shape():
    return ShapeParameters(inner_radius=1.5, outer_radius=3.0)


@pytest.fixture(params=list(PathMode), ids=lambda m: m.value)
def mode(request):
    return request.param
