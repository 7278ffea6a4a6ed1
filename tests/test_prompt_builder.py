from apps.domain.models import DocumentType
from apps.application.services.prompt_builder import (
    DEFAULT_BRAND_NAME,
    PROMPT_VERSION,
    build_analysis_prompt,
    build_retry_prompt,
    extract_brand_name,
)
from apps.application.services.vocabulary_filter import build_term_whitelist


class TestExtractBrandName:
    def test_brand_name_declaration(self):
        assert extract_brand_name('Brand Name is Tiki Cat\nImpressions: 10') == 'Tiki Cat'

    def test_brand_name_wins_over_vendor(self):
        text = 'Reporting Vendor Name is Acme Pets\nBrand Name is Tiki Cat\n'
        assert extract_brand_name(text) == 'Tiki Cat'

    def test_vendor_name_declaration(self):
        assert extract_brand_name('Reporting Vendor Name is Acme Pets ... Impressions') == 'Acme Pets'

    def test_declaration_is_case_insensitive(self):
        assert extract_brand_name('brand name is Whisker Co\n') == 'Whisker Co'

    def test_capitalized_token_before_brand_roas(self):
        assert extract_brand_name('report for Zignature dog food, Brand ROAS 3.4') == 'Zignature'

    def test_fallback_placeholder(self):
        assert extract_brand_name('impressions 1000 ctr 2%') == DEFAULT_BRAND_NAME


class TestBuildAnalysisPrompt:
    def test_prompt_contents(self):
        content = 'Reporting Vendor Name is Acme Pets\nImpressions: 1000\nCTR: 2.5%'
        whitelist = build_term_whitelist(content)

        prompt = build_analysis_prompt(content, 'Acme Pets', DocumentType.MIXED, whitelist, 'Petco')

        assert 'for the brand Acme Pets' in prompt
        assert 'Do NOT refer to Petco as the brand.' in prompt
        assert 'Document type: MIXED' in prompt
        assert 'Allowed terms detected: Impressions, CTR' in prompt
        assert 'For MIXED content' in prompt
        assert '"executiveSummary": string' in prompt
        assert 'Ground every statement strictly in the provided input only.' in prompt
        assert prompt.rstrip().endswith(content)

    def test_onsite_directive(self):
        whitelist = build_term_whitelist('Onsite ROAS 4.0')

        prompt = build_analysis_prompt('Onsite ROAS 4.0', 'the brand', DocumentType.ONSITE, whitelist)

        assert 'For ONSITE documents' in prompt
        assert 'Allowed terms detected: ROAS' in prompt

    def test_retry_prompt_lists_forbidden_terms(self):
        retry = build_retry_prompt('BASE PROMPT', ['Paid Social', 'PLA'])

        assert retry.startswith('BASE PROMPT')
        assert 'unless they appear verbatim in the input: Paid Social, PLA' in retry
        assert 'Regenerate strictly using only allowed terms.' in retry

    def test_prompt_version_is_set(self):
        assert PROMPT_VERSION
