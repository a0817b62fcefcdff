import pytest

from linearcrf import ConfigurationError, CRFLabel, LabelIndex, LabelSpace


def test_label_index():
    index = LabelIndex()
    assert index.add((0, 1)) == 0
    assert index.add(CRFLabel((1, 1))) == 1
    assert index.add((0, 1)) == 0
    assert len(index) == 2
    assert index.index_of((1, 1)) == 1
    assert index.index_of((1, 0)) == -1
    assert index.get(1) == CRFLabel((1, 1))
    assert (0, 1) in index


def test_all_labels_is_lexicographic():
    index = LabelIndex.all_labels(2, 1)
    assert [label.label for label in index] == [(0, 0), (0, 1), (1, 0), (1, 1)]
    assert len(LabelIndex.all_labels(3, 0)) == 3


def test_label_space_lookups(chain_space):
    assert chain_space.window == 2
    assert chain_space.background == 0
    assert list(chain_space.node_classes) == [0, 1]
    assert list(chain_space.edge_prev) == [0, 0, 1, 1]
    assert list(chain_space.edge_curr) == [0, 1, 0, 1]
    assert chain_space.edge_mask.all()


def test_partial_edge_alphabet():
    space = LabelSpace([LabelIndex([(1,), (0,)]), LabelIndex([(0, 0), (0, 1), (1, 0)])],
                       ["O", "B"], "O")
    assert list(space.node_slot) == [1, 0]
    assert not space.edge_mask[1, 1]
    assert space.edge_mask[1, 0]


def test_label_space_errors():
    with pytest.raises(ConfigurationError):
        LabelSpace.full(["O", "B"], "X")
    with pytest.raises(ConfigurationError):
        LabelSpace.full(["O", "B"], "O", window=3)
    with pytest.raises(ConfigurationError):
        LabelSpace([LabelIndex([(0,), (2,)])], ["O", "B"], "O")
