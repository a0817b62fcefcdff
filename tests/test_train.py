from linearcrf import readData, train

CORPUS = """O N:0 E:4
B N:1,2 E:4
B N:1 E:4
O N:3 E:4

B N:1 E:4
O N:0,3 E:4

O N:0 E:4
O N:2,3 E:4
B N:1 E:4
"""


def write(tmp_path):
    path = tmp_path / "train.txt"
    path.write_text(CORPUS, encoding="utf-8")
    return str(path)


def test_check_derivative(tmp_path, capsys):
    maxerr = train.checkCrfDev(write(tmp_path), step=1e-6, prior="QUADRATIC")
    assert maxerr < 1e-3
    assert "dev numeric~:" in capsys.readouterr().out


def test_check_derivative_dropout(tmp_path):
    maxerr = train.checkCrfDev(write(tmp_path), nparams=6, step=1e-6, prior="DROPOUT", delta=0.3)
    assert maxerr < 1e-3


def test_train_lowers_the_objective(tmp_path, capsys):
    path = write(tmp_path)
    func = train.buildObjective(readData(path))
    start = func.value_and_gradient(func.initial())[0]

    theta, fobj, info = train.train(path, maxiter=200)
    assert theta.shape == (func.domain_dimension(),)
    assert fobj < start
    assert "Training finished" in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    assert train.train(str(tmp_path / "nothing.txt")) is None
    assert "doesn't exist" in capsys.readouterr().out
