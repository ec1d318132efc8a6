"""
Tests for streak detection over chronologically ordered audits.

Covers:
- empty and all-PENDING input
- longest run selection and tie handling
- PENDING ending both runs
- streak boundaries and trade lists
"""

from botledger.audits.service import analyze_streaks, audits_service

from helpers import make_audits


def test_empty_input_has_no_streaks():
    report = analyze_streaks([])
    assert report.longest_win is None
    assert report.longest_loss is None
    assert report.trades_analyzed == 0


def test_all_pending_has_no_streaks():
    report = analyze_streaks(make_audits("PENDING", "PENDING", "PENDING"))
    assert report.longest_win is None
    assert report.longest_loss is None
    assert report.trades_analyzed == 3


def test_single_win():
    report = analyze_streaks(make_audits("WIN"))
    assert report.longest_win.length == 1
    assert report.longest_loss is None


def test_longest_win_is_the_third_run():
    audits = make_audits("WIN", "WIN", "LOSS", "WIN", "WIN", "WIN", "LOSS")
    report = analyze_streaks(audits)

    assert report.longest_win.length == 3
    assert report.longest_win.type == "WIN"
    assert [t.id for t in report.longest_win.trades] == [a.id for a in audits[3:6]]
    assert report.longest_win.start_timestamp == audits[3].timestamp
    assert report.longest_win.end_timestamp == audits[5].timestamp

    assert report.longest_loss.length == 1
    assert report.longest_loss.type == "LOSS"


def test_pending_does_not_merge_runs():
    report = analyze_streaks(make_audits("WIN", "PENDING", "WIN"))
    assert report.longest_win.length == 1
    assert report.longest_loss is None


def test_pending_ends_losing_run():
    report = analyze_streaks(make_audits("LOSS", "LOSS", "PENDING", "LOSS", "LOSS", "LOSS"))
    assert report.longest_loss.length == 3


def test_ties_keep_the_earliest_streak():
    audits = make_audits("LOSS", "LOSS", "WIN", "LOSS", "LOSS")
    report = analyze_streaks(audits)

    assert report.longest_loss.length == 2
    assert report.longest_loss.trades[0].id == audits[0].id
    assert report.longest_loss.end_timestamp == audits[1].timestamp


def test_runs_are_mutually_exclusive():
    report = analyze_streaks(make_audits("WIN", "LOSS", "WIN", "LOSS", "WIN"))
    assert report.longest_win.length == 1
    assert report.longest_loss.length == 1


def test_whole_input_as_one_streak():
    audits = make_audits(*["LOSS"] * 50)
    report = analyze_streaks(audits)
    assert report.longest_loss.length == 50
    assert len(report.longest_loss.trades) == 50
    assert report.longest_win is None


def test_input_order_is_trusted():
    """Records are analysed in the order given, even if timestamps disagree"""
    audits = make_audits("WIN", "WIN", "LOSS")
    reordered = [audits[2], audits[0], audits[1]]
    report = analyze_streaks(reordered)
    assert report.longest_win.length == 2
    assert report.longest_win.start_timestamp == audits[0].timestamp


def test_service_delegates_to_analyzer():
    report = audits_service.analyze_streaks(make_audits("LOSS", "WIN", "WIN"))
    assert report.longest_win.length == 2
    assert report.longest_loss.length == 1
