import numpy
import pytest

from linearcrf import CRFLogConditionalObjectiveFunction, Document, LabelSpace, WeightLayout

CLASSES = ["O", "B"]

# node features 0, 1, 2 and the edge feature 3
CHAIN_MAP = [0, 0, 0, 1]


@pytest.fixture
def node_space():
    return LabelSpace.full(CLASSES, "O", window=1)


@pytest.fixture
def chain_space():
    return LabelSpace.full(CLASSES, "O", window=2)


@pytest.fixture
def chain_docs():
    return [
        Document([((0,), (3,)), ((1,), (3,)), ((0, 1), (3,)), ((2,), (3,))], labels=[0, 1, 1, 0]),
        Document([((1, 2), (3,)), ((0,), (3,)), ((2,), (3,))], labels=[1, 0, 0]),
        Document([((0, 2), (3,)), ((1,), (3,))], labels=[0, 1]),
    ]


@pytest.fixture
def chain_layout(chain_space):
    return WeightLayout(CHAIN_MAP, chain_space)


@pytest.fixture
def random_weights(chain_layout):
    rng = numpy.random.RandomState(7)
    return chain_layout.to_2d(rng.normal(scale=0.5, size=chain_layout.domain_dimension))


@pytest.fixture
def make_objective(chain_space):
    def make(docs, featureMap=CHAIN_MAP, **kwargs):
        return CRFLogConditionalObjectiveFunction(
            docs, chain_space.label_indices, featureMap, CLASSES, "O", **kwargs)
    return make
