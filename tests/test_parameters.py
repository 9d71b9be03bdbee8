import pytest

from tradedesk.models import DataType, ParameterInfo, ParameterValue
from tradedesk.parameters import combo_labels, combo_option, display_value, snapshot_parameters


def test_combo_option_picks_entry():
    assert combo_option("BUY;SELL;BOTH", 1) == "SELL"
    assert combo_option("only", 0) == "only"


@pytest.mark.parametrize("index", [-1, 3])
def test_combo_option_out_of_range(index):
    with pytest.raises(IndexError):
        combo_option("BUY;SELL;BOTH", index)


def test_combo_labels():
    assert combo_labels("BUY;SELL") == ["BUY", "SELL"]
    assert combo_labels("") == []
    assert combo_labels("a;;b") == ["a"]


def test_snapshot_resolves_combo_and_copies():
    original = {
        "Mode": ParameterInfo(type=DataType.COMBO, parameter=ParameterValue(text="BUY;SELL", integer=1)),
        "Qty": ParameterInfo(type=DataType.INT, parameter=ParameterValue(integer=50)),
    }
    snapshot = snapshot_parameters(original)
    assert snapshot["Mode"].parameter.text == "SELL"
    assert original["Mode"].parameter.text == "BUY;SELL"
    snapshot["Qty"].parameter.integer = 75
    assert original["Qty"].parameter.integer == 50
    assert list(snapshot) == ["Mode", "Qty"]


def test_snapshot_bad_combo_index():
    params = {"Mode": ParameterInfo(type=DataType.COMBO, parameter=ParameterValue(text="A;B", integer=4))}
    with pytest.raises(IndexError):
        snapshot_parameters(params)


def test_display_value_by_type():
    assert display_value(ParameterInfo(type=DataType.INT, parameter=ParameterValue(integer=12))) == "12"
    assert display_value(ParameterInfo(type=DataType.FLOAT, parameter=ParameterValue(floating=2.5))) == "2.50"
    assert display_value(ParameterInfo(type=DataType.CONTRACT, parameter=ParameterValue(text="NIFTY"))) == "NIFTY"
    assert display_value(ParameterInfo(type=DataType.RADIO, parameter=ParameterValue(check=True))) == "1"
    assert display_value(ParameterInfo(type=DataType.END)) == ""