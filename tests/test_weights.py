import numpy
import pytest

from linearcrf import LabelSpace, WeightIndexError, WeightLayout


def test_domain_dimension_sums_label_index_sizes(chain_space):
    layout = WeightLayout([0, 1, 0, 1, 1], chain_space)
    assert layout.domain_dimension == 2 + 4 + 2 + 4 + 4
    assert list(layout.sizes) == [2, 4, 2, 4, 4]

    space = LabelSpace.full(["O", "B", "I"], "O", window=2)
    layout = WeightLayout([1, 0, 0], space)
    assert layout.domain_dimension == 9 + 3 + 3


def test_round_trip_is_bitwise_identity(chain_layout):
    rng = numpy.random.RandomState(0)
    for _ in range(5):
        x = rng.normal(scale=1e3, size=chain_layout.domain_dimension)
        back = chain_layout.to_1d(chain_layout.to_2d(x))
        assert back.dtype == x.dtype
        assert (back == x).all()


def test_to_2d_slices(chain_layout):
    x = numpy.arange(chain_layout.domain_dimension, dtype=float)
    weights = chain_layout.to_2d(x)
    assert [len(w) for w in weights] == [2, 2, 2, 4]
    assert list(weights[3]) == [6.0, 7.0, 8.0, 9.0]


def test_scaled_view_leaves_x_alone(chain_layout):
    x = numpy.ones(chain_layout.domain_dimension)
    weights = chain_layout.to_2d(x, 0.5)
    assert all((w == 0.5).all() for w in weights)
    assert (x == 1.0).all()
    weights[0][0] = 10.0
    assert x[0] == 1.0


def test_to_2d_rejects_wrong_length(chain_layout):
    with pytest.raises(ValueError):
        chain_layout.to_2d(numpy.zeros(chain_layout.domain_dimension + 1))


def test_weight_indices(chain_layout):
    indices = chain_layout.weight_indices()
    assert list(indices[0]) == [0, 1]
    assert list(indices[3]) == [6, 7, 8, 9]
    assert indices is chain_layout.weight_indices()


def test_empty_2d(chain_layout):
    empty = chain_layout.empty_2d()
    assert chain_layout.to_1d(empty).shape == (chain_layout.domain_dimension,)
    assert not chain_layout.to_1d(empty).any()


def test_check_slot(chain_layout):
    weights = chain_layout.empty_2d()
    chain_layout.check_slot(weights, 3, 3)
    with pytest.raises(WeightIndexError) as err:
        chain_layout.check_slot(weights, 0, 2)
    assert err.value.feature == 0
    assert err.value.slot == 2
    assert err.value.order == 0
    assert err.value.slice_len == 2
    assert isinstance(err.value, IndexError)
