import pytest

from analyzers.clickbait_analyzer import ClickbaitAnalyzer
from analyzers.entity_extractor import EntityExtractor, merge_entities
from analyzers.language_analyzer import LanguageAnalyzer, extract_claims
from analyzers.sentiment_analyzer import SentimentAnalyzer


# =============================================================================
# Emotion
# =============================================================================

def test_neutral_text_scores_zero():
    result = SentimentAnalyzer().analyze("The council approved the budget on Monday.")
    assert result.score == 0.0
    assert result.label == "Neutral"
    assert result.matches == ()


def test_weights_accumulate_per_level():
    result = SentimentAnalyzer().analyze("A shocking and outrageous scandal.")
    assert result.score == pytest.approx(0.6)
    # 0.6 is not strictly above the 0.6 threshold
    assert result.label == "Slightly emotional"
    assert set(result.matches) == {"shocking", "outrageous", "scandal"}


def test_each_occurrence_counts_and_case_is_ignored():
    result = SentimentAnalyzer().analyze("SHOCKING. Shocking. shocking. shocking!")
    assert result.score == pytest.approx(0.8)
    assert result.label == "Highly emotional"


def test_only_whole_words_match():
    result = SentimentAnalyzer().analyze("The breakingly slow tide was unshocking to everyone.")
    assert result.score == 0.0


def test_emotion_score_is_capped():
    text = "shocking outrageous unbelievable evil exclusive breaking scandal bombshell"
    assert SentimentAnalyzer().analyze(text).score == 1.0


def test_moderate_words_use_lower_weight():
    result = SentimentAnalyzer().analyze("An important and significant development.")
    assert result.score == pytest.approx(0.1)


# =============================================================================
# Clickbait
# =============================================================================

def test_no_clickbait_phrases():
    result = ClickbaitAnalyzer().analyze("The DOH reported 1,200 dengue cases this week.")
    assert result.score == 0.0
    assert result.label == "No clickbait"


def test_phrase_increments_by_category():
    result = ClickbaitAnalyzer().analyze("You won't believe what happens next")
    assert result.score == pytest.approx(0.26)
    assert result.label == "Some clickbait"
    assert "you won't believe" in result.matches


def test_vague_attribution_weighs_most():
    result = ClickbaitAnalyzer().analyze("This is what they don't want you to know")
    assert result.score == pytest.approx(0.22)


def test_question_mark_penalty_only_above_limit():
    analyzer = ClickbaitAnalyzer()
    assert analyzer.analyze("Why? How? When? Where?").score == 0.0
    assert analyzer.analyze("Why? How? When? Where? Who?").score == pytest.approx(0.12)


def test_clickbait_score_is_capped():
    text = ("You won't believe what happens next! Doctors hate this miracle. "
            "They don't want you to know. Share before it's deleted. Act now!")
    result = ClickbaitAnalyzer().analyze(text)
    assert result.score == 1.0
    assert result.label == "Strong clickbait"


# =============================================================================
# Credibility patterns
# =============================================================================

def test_missing_citations_is_recorded_first():
    result = LanguageAnalyzer().analyze("The DOH reported 1,200 dengue cases this week.")
    assert result.score == pytest.approx(0.85)
    assert result.issues == ("No citations or attributed sources found",)
    assert result.has_issues


def test_two_citation_patterns_raise_score():
    text = ("According to the ministry, exports rose in June. "
            "Officials said the figures were consistent with data from the central bank.")
    result = LanguageAnalyzer().analyze(text)
    assert result.score == 1.0
    assert not result.has_issues
    assert result.citation_count >= 2
    assert result.label == "Well sourced"


def test_issues_follow_check_order():
    text = "They say ATTENTION people, HURRY now, this SCANDAL is real and growing fast today."
    result = LanguageAnalyzer().analyze(text)
    assert result.issues == (
        "No citations or attributed sources found",
        "Vague attribution (e.g. 'they say', 'sources claim')",
        "Excessive use of ALL CAPS",
    )
    assert result.score == pytest.approx(0.63)
    assert result.label == "Partially sourced"


def test_hedging_words_add_credit():
    text = "According to the report, prices may rise and reportedly could stay high. Data from the agency agrees."
    result = LanguageAnalyzer().analyze(text)
    assert result.hedging_count >= 2
    assert result.score == 1.0


def test_ellipses_penalised():
    text = "Something happened... nobody knows... the truth... is out there... somewhere"
    result = LanguageAnalyzer().analyze(text)
    assert "Excessive ellipses" in result.issues
    assert result.score == pytest.approx(0.77)


def test_passive_voice_penalised():
    text = "Mistakes were made. Funds were moved. Records were deleted. Staff were warned."
    result = LanguageAnalyzer().analyze(text)
    assert "Excessive passive voice obscures who did what" in result.issues


# =============================================================================
# Content quality and claims
# =============================================================================

def test_specific_text_is_highly_specific():
    text = "On Monday 3 officials in Manila reported 45 cases and 12 deaths."
    quality = LanguageAnalyzer().score_content_quality(text, 1.0)
    assert quality.specificity_label == "Highly specific"
    assert quality.grammar_issues is None


def test_quote_and_citations_give_strong_evidence():
    text = ('According to the WHO, a study found lower rates. '
            'Officials said "the programme is working as intended" on Friday.')
    quality = LanguageAnalyzer().score_content_quality(text, 1.0)
    assert quality.evidence_label == "Strong"


def test_grammar_issues_reduce_quality_up_to_cap():
    analyzer = LanguageAnalyzer()
    text = "According to officials, the bridge reopened on Monday after 6 weeks of repairs."
    baseline = analyzer.score_content_quality(text, 1.0)
    clean = analyzer.score_content_quality(text, 1.0, grammar_issues=0)
    sloppy = analyzer.score_content_quality(text, 1.0, grammar_issues=50)

    assert clean.overall_score == baseline.overall_score
    assert baseline.overall_score - sloppy.overall_score == pytest.approx(0.2, abs=1e-3)
    assert sloppy.grammar_issues == 50


def test_extract_claims_skips_short_sentences():
    text = "First claim here is long. Short. Another sentence that counts!"
    assert extract_claims(text) == ["First claim here is long", "Another sentence that counts"]


def test_extract_claims_respects_limit():
    text = " ".join(f"Sentence number {i} is here." for i in range(10))
    assert len(extract_claims(text)) == 5
    assert len(extract_claims(text, limit=2)) == 2


# =============================================================================
# Entities
# =============================================================================

def test_capitalized_pairs_become_persons_and_organizations():
    entities = EntityExtractor().extract("Maria Santos met John Cruz at Acme Corp yesterday.")
    assert entities.persons == ("Maria Santos", "John Cruz")
    assert entities.organizations == ("Acme Corp",)
    assert entities.locations == ()


def test_acronyms_are_not_entities():
    entities = EntityExtractor().extract("The DOH reported 1,200 dengue cases this week.")
    assert entities.persons == ()
    assert entities.organizations == ()


def test_entities_deduplicated_and_capped():
    names = ["Ana Reyes", "Ben Tan", "Carl Lim", "Dina Cruz", "Eli Go", "Fay Uy", "Ana Reyes"]
    entities = EntityExtractor().extract(", and ".join(names) + ".")
    assert len(entities.persons) == 5
    assert entities.persons.count("Ana Reyes") == 1


def test_merge_entities_adds_remote_groups():
    base = EntityExtractor().extract("Maria Santos spoke today.")
    merged = merge_entities(base, [
        {"word": "Department of Health", "entity_group": "ORG", "score": 0.99},
        {"word": "Cebu", "entity_group": "LOC", "score": 0.97},
        {"word": "maria santos", "entity_group": "PER", "score": 0.9},
        {"word": "##ila", "entity_group": "LOC", "score": 0.5},
        {"word": "Tuesday", "entity_group": "MISC", "score": 0.5},
    ])
    assert merged.persons == ("Maria Santos",)
    assert merged.organizations == ("Department of Health",)
    assert merged.locations == ("Cebu",)
