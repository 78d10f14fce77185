import pytest

from collector.disk.diskstats_parser import (
    METRIC_NAMES,
    metric_key,
    normalize,
    sanitize_device_name,
    tokenize,
)
from core.errors import MalformedRow

VDA_ROW = "253 0 vda 62695 0 2880751 26352 1383415 166185 10725792 396176 0 25204 301208".split()


def test_tokenize_keeps_order_and_field_counts(diskstats_text):
    rows = tokenize(diskstats_text)
    assert [r[2] for r in rows] == ["vda", "vda1", "loop0", "nvme0n1"]
    assert [len(r) for r in rows] == [14, 14, 18, 18]


def test_tokenize_skips_blank_lines():
    text = "\n   \n 8 0 sda 1 2 3 4 5 6 7 8 9 10 11\n\n\t\n"
    rows = tokenize(text)
    assert rows == [["8", "0", "sda", "1", "2", "3", "4", "5", "6", "7", "8", "9", "10", "11"]]


def test_tokenize_empty():
    assert tokenize("") == []


def test_metric_key_inserts_label_after_first_dot():
    assert metric_key("request.reads", "vda1") == "request.vda1.reads"
    assert metric_key("time.ioWeighted", "vda") == "time.vda.ioWeighted"


def test_normalize_sample_row():
    metrics = normalize("vda", VDA_ROW, {})

    assert len(metrics) == 11
    assert metrics["request.vda.reads"] == pytest.approx(62695 / 60)
    assert metrics["sector.vda.written"] == pytest.approx(10725792 / 60)
    assert metrics["inprogress.vda.io"] == 0
    assert metrics["time.vda.ioWeighted"] == pytest.approx(301208 / 60)
    assert not any("discard" in k.lower() for k in metrics)


def test_normalize_inprogress_is_not_scaled():
    row = VDA_ROW[:11] + ["42"] + VDA_ROW[12:]
    metrics = normalize("vda", row, {})
    assert metrics["inprogress.vda.io"] == 42.0


def test_normalize_discard_fields():
    row = "259 0 nvme0n1 8829 1214 1091564 2451 5128 4417 317184 3013 2 6720 5464 12 3 4096 7".split()
    metrics = normalize("nvme0n1", row, {})

    assert len(metrics) == 15
    assert metrics["request.nvme0n1.discards"] == pytest.approx(12 / 60)
    assert metrics["sector.nvme0n1.Discarded"] == pytest.approx(4096 / 60)
    assert metrics["time.nvme0n1.discard"] == pytest.approx(7 / 60)
    assert metrics["inprogress.nvme0n1.io"] == 2.0


def test_normalize_flush_fields():
    row = VDA_ROW + ["0", "0", "0", "0", "30", "120"]
    metrics = normalize("vda", row, {})

    assert len(metrics) == len(METRIC_NAMES)
    assert metrics["request.vda.flushes"] == pytest.approx(30 / 60)
    assert metrics["time.vda.flush"] == pytest.approx(2.0)


def test_normalize_ignores_counters_past_catalogue():
    row = VDA_ROW + ["1"] * (len(METRIC_NAMES) - 11 + 3)
    metrics = normalize("vda", row, {})
    assert len(metrics) == len(METRIC_NAMES)


def test_normalize_merges_into_existing_mapping():
    metrics = {"request.sda.reads": 1.0}
    normalize("vda", VDA_ROW, metrics)
    assert metrics["request.sda.reads"] == 1.0
    assert "request.vda.reads" in metrics


def test_normalize_rejects_non_numeric_token():
    row = list(VDA_ROW)
    row[6] = "n/a"

    with pytest.raises(MalformedRow) as excinfo:
        normalize("vda", row, {})

    assert excinfo.value.token == "n/a"
    assert excinfo.value.field == "time.read"
    assert excinfo.value.device == "vda"
    assert "n/a" in str(excinfo.value)


def test_normalize_rejects_row_without_counters():
    with pytest.raises(MalformedRow):
        normalize("vda", ["253", "0", "vda"], {})


@pytest.mark.parametrize("name, expected", [
    ("loop0", "loop0"),
    ("dm-0", "dm-0"),
    ("md_root", "md_root"),
    ("cciss!c0d0", "ccissc0d0"),
    ("sd.a", "sda"),
    ("vd a:1", "vda1"),
])
def test_sanitize_device_name(name, expected):
    assert sanitize_device_name(name) == expected
