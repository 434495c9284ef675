from complexity_engine.analysis import complexity_class as cc


def test_normalize_spelling_variants():
    assert cc.normalize("O(n^2)") == cc.normalize("o(n²)")
    assert cc.normalize("O(n * log n)") == cc.normalize("O(n log n)")
    assert cc.normalize("O(sqrt(n))") == cc.normalize("O(√n)")
    assert cc.normalize("n") == "o(n)"
    assert cc.normalize(None) == ""


def test_order_is_total():
    ranks = [cc.rank(label) for label in cc.ORDER]
    assert ranks == sorted(ranks)
    assert len(set(ranks)) == len(cc.ORDER)
    assert cc.rank(cc.O_1) < cc.rank(cc.O_LOG_N) < cc.rank(cc.O_N) < cc.rank(cc.O_N_LOG_N)
    assert cc.rank(cc.O_N2) < cc.rank(cc.O_N3) < cc.rank(cc.O_2_N) < cc.rank(cc.O_N_FACT)


def test_unknown_labels_rank():
    assert cc.rank("O(n · 2^n)") == cc.rank(cc.O_2_N)
    assert cc.rank("O(n · n!)") == cc.rank(cc.O_N_FACT)
    assert cc.rank("O(4^n / √n)") == cc.rank(cc.O_K_N)
    assert cc.rank("O(nm)") == cc.rank(cc.O_N2)
    assert cc.rank("O(m + n)") == cc.rank(cc.O_N)
    assert not cc.is_known("O(m + n)")


def test_is_exponential():
    assert cc.is_exponential(cc.O_2_N)
    assert cc.is_exponential(cc.O_N_FACT)
    assert cc.is_exponential("O(k^n)")
    assert not cc.is_exponential(cc.O_N2)
    assert not cc.is_exponential(cc.O_N_LOG_N)


def test_compare_and_max():
    assert cc.compare(cc.O_N, cc.O_N2) == -1
    assert cc.compare(cc.O_N2, cc.O_N) == 1
    assert cc.compare("O(n^2)", cc.O_N2) == 0
    assert cc.max_complexity([cc.O_N, cc.O_N_LOG_N, cc.O_1]) == cc.O_N_LOG_N
    assert cc.max_complexity([]) == cc.O_1


def test_canonical():
    assert cc.canonical("o(n^2)") == cc.O_N2
    assert cc.canonical(" O(m + n) ") == "O(m + n)"
