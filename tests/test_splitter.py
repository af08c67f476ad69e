from onebrc.splitter import find_new_line_pos, split_last_line


def test_find_new_line_pos_returns_last_break():
    assert find_new_line_pos(b"a;1\nb;2\nc;") == 7
    assert find_new_line_pos(b"a;1\n") == 3


def test_find_new_line_pos_without_break():
    assert find_new_line_pos(b"Hamburg;12") is None
    assert find_new_line_pos(b"") is None


def test_split_last_line():
    assert split_last_line(b"a;1\nb;2\nc;") == (b"a;1\nb;2\n", b"c;")
    assert split_last_line(b"a;1\n") == (b"a;1\n", b"")
    assert split_last_line(b"partial") == (b"", b"partial")
