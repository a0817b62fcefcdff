import numpy
import pytest

from linearcrf import ConfigurationError, CRFLogConditionalObjectiveFunction, Document, NumericalError


def numeric_gradient(func, x, eps=1e-6):
    grad = numpy.zeros_like(x)
    for k in range(len(x)):
        xp = x.copy(); xp[k] += eps
        xm = x.copy(); xm[k] -= eps
        grad[k] = (func.value_and_gradient(xp)[0] - func.value_and_gradient(xm)[0]) / (2 * eps)
    return grad


@pytest.fixture
def x0():
    rng = numpy.random.RandomState(3)
    # 3 node features * 2 + 1 edge feature * 4
    return rng.normal(scale=0.5, size=10)


@pytest.mark.parametrize("prior", ["NONE", "QUADRATIC", "HUBER"])
def test_gradient_matches_finite_differences(make_objective, chain_docs, x0, prior):
    func = make_objective(chain_docs, prior=prior, sigma=1.5)
    value, grad = func.value_and_gradient(x0)
    assert value > 0
    numpy.testing.assert_allclose(grad, numeric_gradient(func, x0), rtol=1e-5, atol=1e-6)


def test_dropout_gradient_matches_finite_differences(make_objective, chain_docs, x0):
    func = make_objective(chain_docs, prior="DROPOUT", delta=0.3, dropoutScale=1.5)
    value, grad = func.value_and_gradient(x0)
    numpy.testing.assert_allclose(grad, numeric_gradient(func, x0), rtol=1e-5, atol=1e-6)


def test_dropout_with_unlabeled_documents(make_objective, chain_docs, x0):
    unsup = [Document([((0, 2), (3,)), ((1,), (3,)), ((2,), (3,))])]
    func = make_objective(chain_docs, prior="DROPOUT", delta=0.2,
                          unsupDocs=unsup, unsupDropoutScale=0.5)
    value, grad = func.value_and_gradient(x0)
    numpy.testing.assert_allclose(grad, numeric_gradient(func, x0), rtol=1e-5, atol=1e-6)

    plain = make_objective(chain_docs, prior="DROPOUT", delta=0.2)
    assert value > plain.value_and_gradient(x0)[0]


def test_unlabeled_documents_ignored_without_dropout(make_objective, chain_docs, x0):
    unsup = [Document([((0, 2), (3,)), ((1,), (3,))])]
    a = make_objective(chain_docs, unsupDocs=unsup, unsupDropoutScale=1.0)
    b = make_objective(chain_docs)
    va, ga = a.value_and_gradient(x0)
    vb, gb = b.value_and_gradient(x0)
    assert va == vb
    assert (ga == gb).all()
    assert a.data_dimension() == 3


def test_zero_delta_dropout_is_unregularized(make_objective, chain_docs, x0):
    dropout = make_objective(chain_docs, prior="DROPOUT", delta=0.0)
    none = make_objective(chain_docs, prior="NONE")
    vd, gd = dropout.value_and_gradient(x0)
    vn, gn = none.value_and_gradient(x0)
    assert vd == pytest.approx(vn)
    numpy.testing.assert_allclose(gd, gn, atol=1e-12)


def test_dropout_scale(make_objective, chain_docs, x0):
    none = make_objective(chain_docs, prior="NONE").value_and_gradient(x0)[0]
    once = make_objective(chain_docs, prior="DROPOUT", delta=0.4).value_and_gradient(x0)[0]
    twice = make_objective(chain_docs, prior="DROPOUT", delta=0.4,
                           dropoutScale=2.0).value_and_gradient(x0)[0]
    assert once > none
    assert twice - none == pytest.approx(2.0 * (once - none))


@pytest.mark.parametrize("prior", ["QUADRATIC", "DROPOUT"])
def test_thread_count_invariance(make_objective, chain_docs, x0, prior):
    docs = chain_docs * 4
    single = make_objective(docs, prior=prior, delta=0.3, numThreads=1)
    pooled = make_objective(docs, prior=prior, delta=0.3, numThreads=4)
    v1, g1 = single.value_and_gradient(x0)
    v4, g4 = pooled.value_and_gradient(x0)
    assert v4 == pytest.approx(v1, rel=1e-9)
    numpy.testing.assert_allclose(g4, g1, rtol=1e-9, atol=1e-12)


def test_nan_is_fatal(make_objective, chain_docs):
    func = make_objective(chain_docs)
    with pytest.raises(NumericalError):
        func.calculate(numpy.full(func.domain_dimension(), numpy.nan))


def test_stochastic_update_halves_add_up(make_objective, chain_docs, x0):
    '''two half batch updates taken from the same x add up to the full batch update'''
    func = make_objective(chain_docs * 2)
    full = x0.copy()
    func.calculate_stochastic_update(full, 1.0, range(6), 0.1)
    first = x0.copy()
    func.calculate_stochastic_update(first, 1.0, range(3), 0.1)
    second = x0.copy()
    func.calculate_stochastic_update(second, 1.0, range(3, 6), 0.1)
    numpy.testing.assert_allclose((first - x0) + (second - x0), full - x0, atol=1e-12)


def test_stochastic_update_returns_batch_value(make_objective, chain_docs, x0):
    func = make_objective(chain_docs, prior="NONE")
    x = x0.copy()
    value = func.calculate_stochastic_update(x, 0.5, [0, 1, 2], 1.0)
    assert value == pytest.approx(func.value_and_gradient(0.5 * x0)[0])
    # a gradient step at x0 * 0.5
    numpy.testing.assert_allclose(x, x0 - func.derivative, atol=1e-12)


def test_stochastic_gradient_over_everything(make_objective, chain_docs, x0):
    func = make_objective(chain_docs, prior="DROPOUT", delta=0.3)
    grad = func.calculate_stochastic_gradient(x0, range(3)).copy()
    none = make_objective(chain_docs, prior="NONE").value_and_gradient(x0)[1]
    numpy.testing.assert_allclose(grad, none, atol=1e-12)


def test_calculate_stochastic_full_batch(make_objective, chain_docs, x0):
    func = make_objective(chain_docs, prior="QUADRATIC")
    value = func.calculate_stochastic(x0, None, [0, 1, 2])
    grad = func.derivative.copy()
    full_value, full_grad = func.value_and_gradient(x0)
    assert value == pytest.approx(full_value)
    numpy.testing.assert_allclose(grad, full_grad, atol=1e-12)


def test_calculate_stochastic_scales_empirical_counts(make_objective, chain_docs, x0):
    func = make_objective(chain_docs, prior="NONE")
    func.calculate_stochastic(x0, None, [0])
    single = make_objective(chain_docs[:1], prior="NONE")
    # E(doc 0) - Ehat(all docs) / 3
    expected = (single.value_and_gradient(x0)[1] + single.to_1d(single.Ehat)
                - func.to_1d(func.Ehat) / 3.0)
    numpy.testing.assert_allclose(func.derivative, expected, atol=1e-12)


def test_value_at(make_objective, chain_docs, x0):
    func = make_objective(chain_docs, prior="DROPOUT", delta=0.3)
    none = make_objective(chain_docs, prior="NONE")
    assert func.value_at(x0, 1.0, range(3)) == pytest.approx(none.value_and_gradient(x0)[0])
    assert func.value_at(x0, 2.0, [1]) == pytest.approx(
        make_objective(chain_docs[1:2], prior="NONE").value_and_gradient(2.0 * x0)[0])


def test_initial_point(make_objective, chain_docs):
    a = make_objective(chain_docs).initial()
    b = make_objective(chain_docs).initial()
    assert a.shape == (10,)
    assert (a > 0).all() and (a < 1.0 + 1e-6).all()
    assert (a == b).all()
    assert not (make_objective(chain_docs, seed=1).initial() == a).all()


def test_feature_grouping(make_objective, chain_docs):
    func = make_objective(chain_docs)
    groups = func.feature_grouping()
    assert len(groups) == 1
    assert list(groups[0]) == list(range(10))
    func.set_feature_grouping([numpy.arange(5), numpy.arange(5, 10)])
    assert len(func.feature_grouping()) == 2


def test_weight_views(make_objective, chain_docs, x0):
    func = make_objective(chain_docs)
    assert func.domain_dimension() == 10
    weights = func.clique_potential_function(x0)
    assert (func.to_1d(weights) == x0).all()
    assert list(func.weight_indices()[3]) == [6, 7, 8, 9]
    assert len(func.empty_2d()) == 4


def test_configuration_errors(make_objective, chain_docs, node_space):
    with pytest.raises(ConfigurationError):
        make_objective(chain_docs, prior="LAPLACE")
    with pytest.raises(ConfigurationError):
        make_objective(chain_docs, sigma=0.0)
    with pytest.raises(ConfigurationError):
        make_objective(chain_docs, prior="DROPOUT", delta=1.0)
    with pytest.raises(ConfigurationError):
        make_objective([Document([((0,), (3,))])])

    doc = Document([((0,),), ((1,),)], labels=[0, 1])
    with pytest.raises(ConfigurationError):
        CRFLogConditionalObjectiveFunction([doc], node_space.label_indices, [0, 0],
                                           ["O", "B"], "O", prior="DROPOUT", delta=0.5)


def test_repeated_feature_gradient(make_objective):
    docs = [Document([((0, 0), (2,)), ((1,), (2,))], labels=[1, 0])]
    func = make_objective(docs, featureMap=[0, 0, 1], prior="NONE")
    x = numpy.random.RandomState(9).normal(scale=0.5, size=8)
    value, grad = func.value_and_gradient(x)
    numpy.testing.assert_allclose(grad, numeric_gradient(func, x), rtol=1e-5, atol=1e-6)
    # feature 0 fires twice at position 0
    assert func.Ehat[0][1] == 2.0


def test_self_training_gradient(make_objective, chain_docs, x0):
    # the leading label B seeds the window before position 0
    docs = chain_docs + [Document([((0,), (3,)), ((2,), (3,))], labels=[1, 1, 1, 0])]
    func = make_objective(docs, prior="QUADRATIC")
    value, grad = func.value_and_gradient(x0)
    numpy.testing.assert_allclose(grad, numeric_gradient(func, x0), rtol=1e-5, atol=1e-6)
