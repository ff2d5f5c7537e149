import pytest

from credscore.risk_patterns import RiskPatternDetector


@pytest.fixture
def detector(dictionaries):
    return RiskPatternDetector(dictionaries)


def test_neutral_text_has_no_risk(detector):
    result = detector.analyze("The city council approved the annual budget on Tuesday.")
    assert result.risk_score == 0.0
    assert result.analysis == ()
    assert result.flagged_terms == ()
    assert not result.patterns.excessive_punctuation
    assert not result.patterns.all_caps


def test_findings_follow_fixed_order(detector):
    result = detector.analyze("SHOCKING!!! DEEP STATE chemtrails, URGENT!!!")
    assert result.patterns.excessive_punctuation
    assert result.patterns.all_caps
    assert result.patterns.conspiracy_terms == ("deep state", "chemtrails")
    assert result.patterns.emotive_language
    assert result.patterns.urgency_indicators
    assert [line.split(":")[0] for line in result.analysis] == [
        "High punctuation ratio detected",
        "High uppercase ratio detected",
        "Conspiracy-related terms detected",
        "Excessive emotional language detected",
        "Urgency-inducing language detected",
    ]
    assert result.analysis[2] == "Conspiracy-related terms detected: deep state, chemtrails"
    assert result.flagged_terms == ("deep state", "chemtrails", "shocking", "urgent")


def test_risk_score_weights(detector):
    # 7 punctuation marks in 44 characters, 23 of 33 letters uppercase
    result = detector.analyze("SHOCKING!!! DEEP STATE chemtrails, URGENT!!!")
    expected = 0.15 * (7 / 44) + 0.15 * (23 / 33) + 0.30 * 0.4 + 0.20 + 0.20
    assert result.risk_score == pytest.approx(expected)


def test_flat_weights_for_emotive_and_urgency(detector):
    assert detector.analyze("a devastating report").risk_score == pytest.approx(0.20)
    assert detector.analyze("time is running out for the vote").risk_score == pytest.approx(0.20)


def test_conspiracy_contribution_saturates(detector):
    text = "deep state illuminati new world order chemtrails microchip mind control false flag"
    result = detector.analyze(text)
    assert len(result.patterns.conspiracy_terms) == 7
    assert result.risk_score == pytest.approx(0.30)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "!!!",
        "WAKE UP!!! SHARE BEFORE DELETED!!! DEEP STATE FALSE FLAG CHEMTRAILS ILLUMINATI MICROCHIP!!!",
        "a perfectly ordinary sentence about gardening",
    ],
)
def test_risk_score_is_bounded(detector, text):
    assert 0.0 <= detector.analyze(text).risk_score <= 1.0


def test_adding_conspiracy_term_never_decreases_risk(detector):
    text = "officials said the report mentioned a cover up"
    baseline = detector.analyze(text).risk_score
    repeated = detector.analyze(text + " and another cover up").risk_score
    extended = detector.analyze(text + " and the deep state").risk_score
    assert repeated >= baseline
    assert extended > baseline
