from vq_demo import VQ_SYMBOLS, quantize, quantize_char, format_report


def test_empty_text_gives_none():
    assert quantize("") is None


def test_result_structure():
    result = quantize("test")
    assert result is not None
    assert result.original == "test"
    assert result.indices == [1, 1, 1, 1]
    assert result.symbols == "∆∆∆∆"


def test_indices_stay_in_range():
    text = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz \x00ÿ€😀"
    result = quantize(text)
    assert all(0 <= i <= 3 for i in result.indices)
    assert len(result.symbols) == len(text)
    assert set(result.symbols) <= set(VQ_SYMBOLS)


def test_bin_edges():
    assert quantize_char("\x00") == 0
    assert quantize_char(chr(63)) == 0
    assert quantize_char(chr(64)) == 1
    assert quantize_char(chr(128)) == 2
    assert quantize_char(chr(192)) == 3
    assert quantize_char(chr(255)) == 3
    assert quantize_char("€") == 3


def test_format_report_wraps_symbols():
    result = quantize("a" * 70)
    report = format_report(result)
    lines = report.split("\n")
    assert lines[0] == "Original: " + "a" * 70
    assert lines[1].startswith("Quantized Indices: [1, 1, ")
    assert lines[2] == "Symbols:"
    assert [len(line) for line in lines[3:]] == [60, 10]
