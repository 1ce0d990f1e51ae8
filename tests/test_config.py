from jobs.config import DEFAULT_SYMBOL, INSTRUMENTS, get_instrument, is_valid_period


def test_default_instrument_is_inr_etf():
    instrument = get_instrument(DEFAULT_SYMBOL)

    assert instrument is not None
    assert instrument.currency == "INR"


def test_get_instrument_unknown_symbol():
    assert get_instrument("SI=F") is None
    assert [item.symbol for item in INSTRUMENTS] == ["GOLDBEES.NS", "GC=F"]


def test_is_valid_period():
    assert is_valid_period("3mo")
    assert not is_valid_period("10y")
