from subtitle_bridge.core.models import SubtitleDocument, SubtitleEntry, TimeRange
from subtitle_bridge.core.repair import repair_document


def _document(*ranges, numbers=None):
    numbers = numbers or list(range(1, len(ranges) + 1))
    return SubtitleDocument([
        SubtitleEntry(number, TimeRange(start, end), f"text {number}")
        for number, (start, end) in zip(numbers, ranges)
    ])


def test_renumbers_densely_without_reordering():
    document = _document(
        ("00:00:01,000", "00:00:02,000"),
        ("00:00:03,000", "00:00:04,000"),
        ("00:00:05,000", "00:00:06,000"),
        numbers=[7, 3, 3],
    )

    report = repair_document(document)

    assert [entry.sequence_number for entry in document] == [1, 2, 3]
    assert document.texts() == ["text 7", "text 3", "text 3"]
    assert report.renumbered == 2
    assert report.anomalies == 0


def test_counts_overlaps_and_inverted_ranges_without_touching_them():
    document = _document(
        ("00:00:01,000", "00:00:03,000"),
        ("00:00:02,000", "00:00:04,000"),
        ("00:00:06,000", "00:00:05,000"),
    )

    report = repair_document(document)

    assert report.overlaps == 1
    assert report.overlap_positions == [1]
    assert report.inverted == 1
    assert report.inverted_positions == [2]
    assert report.anomalies == 2
    assert document[1].time_range == TimeRange("00:00:02,000", "00:00:04,000")


def test_unparseable_timestamps_are_ignored():
    document = _document(
        ("garbage", "00:00:03,000"),
        ("00:00:02,000", "later"),
        ("00:00:01,000", "00:00:02,000"),
    )

    report = repair_document(document)

    assert report.overlaps == 1
    assert report.overlap_positions == [1]
    assert report.inverted == 0


def test_clean_document_reports_nothing():
    document = _document(("00:00:01,000", "00:00:02,000"), ("00:00:02,000", "00:00:03,000"))
    report = repair_document(document)

    assert report.renumbered == 0
    assert report.anomalies == 0
