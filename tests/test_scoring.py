"""
Tests for the evaluation functions and the score aggregator.
"""

import pytest

from criteria import ERROR, PENDING, REGISTRY, SUCCESS, WARNING, EvaluationResult
from scoring import (
    EVALUATION_FUNCTIONS, RULE_FUNCTIONS, build_report, count_words, extract_anchors,
    extract_subheadings, keyword_density, overall_status, percentage, section_scores,
    strip_html, total_score,
)
from snapshot import ContentSnapshot


def filler(count: int, word: str = "lorem") -> str:
    return " ".join([word] * count)


def evaluate(criterion_id: int, **fields) -> EvaluationResult:
    return EVALUATION_FUNCTIONS[criterion_id](None, ContentSnapshot(fields))


def result(status, score):
    return EvaluationResult(status, "m", score)


class TestEvaluationTable:

    def test_every_criterion_has_an_evaluator(self):
        assert set(EVALUATION_FUNCTIONS) == set(REGISTRY.ids())
        assert set(RULE_FUNCTIONS) == set(REGISTRY.ids())

    def test_scores_respect_weights(self, article):
        snapshots = [ContentSnapshot(), article, article.replace(primaryKeyword="tea")]
        for snapshot in snapshots:
            for criterion in REGISTRY:
                res = EVALUATION_FUNCTIONS[criterion.id](None, snapshot)
                assert 0 <= res.score <= criterion.weight
                assert (res.score == criterion.weight) == (res.status == SUCCESS)
                if res.status in (ERROR, PENDING):
                    assert res.score == 0
                if res.status == WARNING:
                    assert res.score == criterion.effective_warning_score

    def test_empty_snapshot_is_pending_everywhere(self):
        for criterion in REGISTRY:
            assert EVALUATION_FUNCTIONS[criterion.id](None, ContentSnapshot()).status == PENDING

    def test_changed_value_may_be_none(self, article):
        for criterion in REGISTRY:
            assert EVALUATION_FUNCTIONS[criterion.id](None, article).status != PENDING


class TestKeywordInTitle:

    def test_blank_meta_title_is_pending(self):
        res = evaluate(101, metaTitle="", primaryKeyword="coffee")
        assert res.status == PENDING
        assert res.score == 0

    def test_blank_keyword_is_pending(self):
        assert evaluate(101, metaTitle="Best Coffee Guide", primaryKeyword="  ").status == PENDING

    def test_keyword_present(self):
        res = evaluate(101, metaTitle="Best Coffee Guide", primaryKeyword="coffee")
        assert res.status == SUCCESS
        assert res.score == 30
        assert res.message == "seo.criteria.core.keyword_in_title.success"

    def test_terms_out_of_order_warn(self):
        res = evaluate(101, metaTitle="Guide to Brewing Coffee", primaryKeyword="coffee guide")
        assert res.status == WARNING
        assert res.score == 21

    def test_keyword_missing(self):
        res = evaluate(101, metaTitle="Tea Brewing Tips", primaryKeyword="coffee")
        assert res == EvaluationResult(ERROR, "seo.criteria.core.keyword_in_title.error", 0)


class TestCoreEssentials:

    def test_keyword_in_meta_description(self):
        assert evaluate(102, metaDescription="All about COFFEE.", primaryKeyword="coffee").status == SUCCESS
        assert evaluate(102, metaDescription="All about tea.", primaryKeyword="coffee").status == ERROR

    def test_keyword_in_url_uses_slug_form(self):
        assert evaluate(103, urlSlug="best-coffee-guide", primaryKeyword="Best Coffee").status == SUCCESS
        assert evaluate(103, urlSlug="tea-guide", primaryKeyword="coffee").status == ERROR
        assert evaluate(103, urlSlug="", primaryKeyword="coffee").status == PENDING

    def test_keyword_without_slug_form_never_matches(self):
        assert evaluate(103, urlSlug="tea-tips", primaryKeyword="???").status == ERROR

    def test_keyword_in_first_ten_percent(self):
        early = f"<p>coffee {filler(99)}</p>"
        late = f"<p>{filler(99)} coffee</p>"
        assert evaluate(104, content=early, primaryKeyword="coffee").status == SUCCESS
        assert evaluate(104, content=late, primaryKeyword="coffee").status == ERROR

    def test_short_body_fits_multi_word_keyword(self):
        content = "<p>Coffee brewing guide for beginners at home today</p>"
        assert evaluate(104, content=content, primaryKeyword="coffee brewing").status == SUCCESS
        assert evaluate(104, content=content, primaryKeyword="home today").status == ERROR

    def test_keyword_in_content(self):
        assert evaluate(105, content="<p>We love Coffee.</p>", primaryKeyword="coffee").status == SUCCESS
        assert evaluate(105, content="<p>We love tea.</p>", primaryKeyword="coffee").status == ERROR

    def test_markup_only_content_is_pending(self):
        assert evaluate(105, content="<div></div>", primaryKeyword="coffee").status == PENDING

    @pytest.mark.parametrize("words, status, score", [
        (1500, WARNING, 3),
        (500, ERROR, 0),
        (3000, SUCCESS, 4),
        (2500, SUCCESS, 4),
        (1000, WARNING, 3),
        (999, ERROR, 0),
    ])
    def test_content_length(self, words, status, score):
        res = evaluate(106, content=f"<p>{filler(words)}</p>")
        assert (res.status, res.score) == (status, score)

    def test_content_length_pending_without_content(self):
        assert evaluate(106, content="").status == PENDING

    @pytest.mark.parametrize("length, status", [(150, SUCCESS), (120, WARNING), (50, ERROR), (250, ERROR)])
    def test_meta_description_length(self, length, status):
        res = evaluate(107, metaDescription="x" * length)
        assert res.status == status
        if status == WARNING:
            assert res.score == 2


class TestBoosters:

    def test_keyword_in_subheadings(self):
        content = "<h2>Why coffee matters</h2><p>text</p>"
        assert evaluate(201, content=content, primaryKeyword="Coffee").status == SUCCESS
        assert evaluate(201, content="<h2>Tea</h2><p>text</p>", primaryKeyword="coffee").status == ERROR
        assert evaluate(201, content="<p>coffee without headings</p>", primaryKeyword="coffee").status == ERROR

    def test_keyword_density(self):
        good = f"<p>coffee coffee {filler(98)}</p>"
        heavy = f"<p>{filler(10, 'coffee')} {filler(90)}</p>"
        none = f"<p>{filler(100)}</p>"
        assert evaluate(202, content=good, primaryKeyword="coffee").status == SUCCESS
        res = evaluate(202, content=heavy, primaryKeyword="coffee")
        assert (res.status, res.score) == (WARNING, 2)
        assert evaluate(202, content=none, primaryKeyword="coffee").status == ERROR

    @pytest.mark.parametrize("slug, status", [
        ("best-coffee-guide", SUCCESS),
        ("one-two-three-four-five-six", SUCCESS),
        ("coffee-guide", WARNING),
        ("a-b-c-d-e-f-g-h", WARNING),
        ("coffee", ERROR),
        ("a-b-c-d-e-f-g-h-i", ERROR),
    ])
    def test_url_slug_length(self, slug, status):
        assert evaluate(203, urlSlug=slug).status == status

    def test_external_links(self):
        linked = '<p><a href="https://example.com">source</a></p>'
        assert evaluate(204, content=linked).status == SUCCESS
        assert evaluate(204, content="<p>no links</p>").status == ERROR
        assert evaluate(204, content="<p>text</p>", externalLinks=["https://example.com"]).status == SUCCESS
        assert evaluate(204, content="", externalLinks=[]).status == PENDING

    def test_dofollow_links(self):
        nofollow = '<p><a rel="nofollow noopener" href="https://example.com">x</a></p>'
        dofollow = '<p><a href="https://example.com" rel="noopener">x</a></p>'
        assert evaluate(205, content=nofollow).status == ERROR
        assert evaluate(205, content=dofollow).status == SUCCESS
        entries = [{"url": "https://example.com", "rel": "nofollow"}]
        assert evaluate(205, content="<p>x</p>", externalLinks=entries).status == ERROR

    def test_internal_links(self):
        assert evaluate(206, content='<p><a href="/blog/tea">tea</a></p>').status == SUCCESS
        assert evaluate(206, content='<p><a href="https://example.com">x</a></p>').status == ERROR
        assert evaluate(206, content='<p><a href="mailto:me@example.com">x</a></p>').status == ERROR
        assert evaluate(206, internalLinks=["/about"]).status == SUCCESS

    def test_secondary_keywords(self):
        content = "<p>espresso and latte recipes</p>"
        assert evaluate(207, content=content, secondaryKeywords=["Espresso", "latte"]).status == SUCCESS
        res = evaluate(207, content=content, secondaryKeywords=["espresso", "mocha"])
        assert (res.status, res.score) == (WARNING, 3)
        assert evaluate(207, content=content, secondaryKeywords=["mocha"]).status == ERROR
        assert evaluate(207, content=content, secondaryKeywords=[]).status == PENDING


class TestTitleOptimization:

    def test_keyword_at_start(self):
        assert evaluate(301, title="Coffee Guide", primaryKeyword="coffee").status == SUCCESS
        res = evaluate(301, title="Best Coffee", primaryKeyword="coffee")
        assert (res.status, res.score) == (ERROR, 0)

    def test_sentiment(self):
        assert evaluate(302, title="Best Coffee").status == SUCCESS
        assert evaluate(302, title="Avoid These Beans").status == SUCCESS
        assert evaluate(302, title="Coffee Notes").status == ERROR

    def test_power_words(self):
        assert evaluate(303, title="The Ultimate Complete Coffee Guide").status == SUCCESS
        res = evaluate(303, title="Ultimate Coffee")
        assert (res.status, res.score) == (WARNING, 2)
        assert evaluate(303, title="Coffee").status == ERROR

    @pytest.mark.parametrize("length, status", [(55, SUCCESS), (40, WARNING), (20, ERROR), (80, ERROR)])
    def test_meta_title_length(self, length, status):
        assert evaluate(304, metaTitle="x" * length).status == status


class TestContentClarity:

    def test_table_of_contents(self):
        assert evaluate(401, toc=["Intro"]).status == SUCCESS
        three = "<h2>A</h2><h2>B</h2><h3>C</h3>"
        assert evaluate(401, content=three).status == SUCCESS
        assert evaluate(401, content="<h2>A</h2><p>x</p>", toc=[]).status == ERROR
        assert evaluate(401, content="", toc=[]).status == PENDING

    def test_short_paragraphs(self):
        short = f"<p>{filler(10)}</p>"
        long = f"<p>{filler(200)}</p>"
        assert evaluate(402, content=short * 5).status == SUCCESS
        res = evaluate(402, content=short * 3 + long * 2)
        assert (res.status, res.score) == (WARNING, 3)
        assert evaluate(402, content=short + long).status == ERROR
        assert evaluate(402, content="<div>no paragraphs</div>").status == ERROR

    def test_media_content(self):
        assert evaluate(403, images=["cup.png"]).status == SUCCESS
        assert evaluate(403, content='<p>x</p><img src="a.png">').status == SUCCESS
        assert evaluate(403, content="<p>x</p>").status == ERROR
        assert evaluate(403).status == PENDING


class TestHelpers:

    def test_strip_html_and_count(self):
        assert count_words(strip_html("<p>one <b>two</b>&nbsp;three</p>")) == 3

    def test_body_only(self):
        page = "<html><head><title>skip me</title></head><body><h2>Kept</h2></body></html>"
        assert extract_subheadings(page) == ["Kept"]

    def test_anchors(self):
        anchors = extract_anchors('<a href="/x" rel="nofollow">a</a><a class="c" href=\'https://y\'>b</a>')
        assert anchors == [{"url": "/x", "rel": "nofollow"}, {"url": "https://y", "rel": ""}]

    def test_keyword_density(self):
        assert keyword_density("coffee beans " + filler(8), "coffee beans") == pytest.approx(20.0)
        assert keyword_density("", "coffee") == 0.0


class TestAggregation:

    def test_total_score(self):
        state = {101: result(SUCCESS, 30), 106: result(WARNING, 3), 102: result(ERROR, 0)}
        assert total_score(state) == 33
        assert total_score({}) == 0

    def test_percentage_rounds_half_up(self):
        assert percentage({101: result(SUCCESS, 30)}) == 28
        assert percentage({}) == 0

    @pytest.mark.parametrize("statuses, expected", [
        ([], PENDING),
        ([PENDING, PENDING], SUCCESS),
        ([PENDING, WARNING], WARNING),
        ([SUCCESS, PENDING], SUCCESS),
        ([SUCCESS, WARNING], WARNING),
        ([SUCCESS] * 20 + [ERROR], ERROR),
        ([WARNING, ERROR, PENDING], ERROR),
    ])
    def test_overall_status(self, statuses, expected):
        state = {i: result(s, 0) for i, s in enumerate(statuses)}
        assert overall_status(state) == expected

    def test_section_scores(self):
        state = {101: result(SUCCESS, 30), 203: result(WARNING, 3)}
        sections = section_scores(state)
        assert [s.score for s in sections] == [30, 3, 0, 0]
        assert sections[0].max_score == 51
        assert sections[1].status == WARNING
        assert sections[2].status == PENDING

    def test_build_report(self, article):
        state = {cid: fn(None, article) for cid, fn in EVALUATION_FUNCTIONS.items()}
        report = build_report(state)
        assert report.total_score == total_score(state) <= REGISTRY.max_score
        data = report.to_dict()
        assert data["max_possible"] == 108
        assert len(data["sections"]) == 4
        assert data["sections"][0]["criteria"]["101"]["status"] == SUCCESS
        assert "TOTAL" in report.summary()
