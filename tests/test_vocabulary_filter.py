from apps.application.services.vocabulary_filter import (
    CANDIDATE_TERMS,
    GENERIC_TERMS,
    OFFSITE_TERMS,
    ONSITE_TERMS,
    build_term_whitelist,
    contains_term,
)


class TestContainsTerm:
    def test_case_insensitive(self):
        assert contains_term('total impressions: 10', 'Impressions')

    def test_special_characters_match_literally(self):
        assert contains_term('SPA (Product) ROAS 4.1', 'SPA (Product)')
        assert not contains_term('SPA Product ROAS 4.1', 'SPA (Product)')

    def test_percent_terms(self):
        assert contains_term('NTB% 35', 'NTB%')
        assert not contains_term('NTB 35', 'NTB%')

    def test_substring_match(self):
        # Literal substring rule, not word boundaries
        assert contains_term('Display spending', 'Spend')


class TestBuildTermWhitelist:
    def test_candidate_lists(self):
        assert len(ONSITE_TERMS) == 10
        assert len(OFFSITE_TERMS) == 8
        assert len(GENERIC_TERMS) == 10
        assert CANDIDATE_TERMS == ONSITE_TERMS + OFFSITE_TERMS + GENERIC_TERMS

    def test_allowed_and_forbidden(self):
        whitelist = build_term_whitelist('Impressions: 1000\nCTR: 2.5%')

        assert whitelist.allowed == ('Impressions', 'CTR')
        assert 'Paid Social' in whitelist.forbidden
        assert 'Impressions' not in whitelist.forbidden
        assert len(whitelist.allowed) + len(whitelist.forbidden) == len(CANDIDATE_TERMS)

    def test_allowed_preserves_candidate_order(self):
        whitelist = build_term_whitelist('ROAS 3.2, Clicks 40, Paid Social, AOV $25')

        assert whitelist.allowed == ('AOV', 'Paid Social', 'Clicks', 'ROAS')

    def test_allowed_list_text(self):
        assert build_term_whitelist('CTR 1%').allowed_list() == 'CTR'
        assert build_term_whitelist('nothing relevant').allowed_list() == 'none'

    def test_find_violations(self):
        whitelist = build_term_whitelist('Impressions: 1000\nCTR: 2.5%')

        violations = whitelist.find_violations('{"executiveSummary": "Paid Social lifted CTR"}')

        assert violations == ['Paid Social']

    def test_no_violations_for_allowed_terms(self):
        whitelist = build_term_whitelist('Impressions: 1000\nCTR: 2.5%')

        assert whitelist.find_violations('Impressions grew and CTR held at 2.5%') == []

    def test_custom_candidates(self):
        whitelist = build_term_whitelist('Foo and bar', candidates=['Foo', 'Baz'])

        assert whitelist.allowed == ('Foo',)
        assert whitelist.forbidden == ('Baz',)
