"""Unit tests for ChapterValidator

Tests cover:
- Creation: required fields, title, content and HTML rules, metadata
- Update: only present fields, status transitions
- Publishing readiness (strict mode)
- Content quality analysis
"""

import copy

from domain.publishing import ChapterValidator
from domain.validation.models import FindingSeverity


class DebugErrorLogger:
    """Logger-like sink with debug and error only"""

    def __init__(self):
        self.messages = []

    def debug(self, msg, *args, **kwargs):
        self.messages.append(msg)

    def error(self, msg, *args, **kwargs):
        self.messages.append(msg)


class TestChapterCreation:
    """Test chapter creation rules"""

    def test_valid_chapter_passes_cleanly(self, chapter_validator, valid_chapter):
        """Test a complete chapter has no findings"""
        result = chapter_validator.validate_for_creation(valid_chapter)

        assert result.is_valid is True
        assert result.codes() == []
        assert result.summary == "Validation passed without issues"

    def test_caller_record_not_mutated(self, chapter_validator, valid_chapter):
        """Test validation leaves the caller's mapping untouched"""
        before = copy.deepcopy(valid_chapter)
        chapter_validator.validate_for_creation(valid_chapter)
        assert valid_chapter == before

    def test_missing_required_fields(self, chapter_validator):
        """Test title and publication_id are required"""
        result = chapter_validator.validate_for_creation({"content": "x" * 150})

        assert result.codes(FindingSeverity.ERROR) == ["required_field", "required_field"]
        assert [e.field for e in result.errors] == ["title", "publication_id"]

    def test_non_mapping_record(self, chapter_validator):
        """Test a non-object record short-circuits"""
        result = chapter_validator.validate_for_creation(["not", "a", "chapter"])

        assert result.codes() == ["invalid_record_format"]
        assert result.errors[0].field == "general"

    def test_title_rules(self, chapter_validator, valid_chapter):
        """Test banned characters and overlong titles"""
        valid_chapter["title"] = "Chapter <1> " + "x" * 200
        result = chapter_validator.validate_for_creation(valid_chapter)

        assert result.codes(FindingSeverity.ERROR) == ["title_too_long", "title_invalid_chars"]

    def test_blank_title(self, chapter_validator, valid_chapter):
        """Test a whitespace-only title is too short"""
        valid_chapter["title"] = "   "
        result = chapter_validator.validate_for_creation(valid_chapter)

        assert result.codes(FindingSeverity.ERROR) == ["title_too_short"]

    def test_numbered_title_warning(self, chapter_validator, valid_chapter):
        """Test 'Chapter N' style titles get a soft warning"""
        valid_chapter["title"] = "Ch. 12"
        result = chapter_validator.validate_for_creation(valid_chapter)

        assert result.is_valid is True
        assert result.codes(FindingSeverity.WARNING) == ["numbered_chapter_title"]

    def test_invalid_publication_id(self, chapter_validator, valid_chapter):
        """Test publication_id must be a UUID"""
        valid_chapter["publication_id"] = "pub-42"
        result = chapter_validator.validate_for_creation(valid_chapter)

        assert result.codes() == ["invalid_publication_id_format"]

    def test_order_index_rules(self, chapter_validator, valid_chapter):
        """Test negative and very high order indexes"""
        valid_chapter["order_index"] = -1
        assert chapter_validator.validate_for_creation(valid_chapter).codes() == ["invalid_order_index"]

        valid_chapter["order_index"] = 10_000
        assert chapter_validator.validate_for_creation(valid_chapter).codes() == ["high_order_index"]

        valid_chapter["order_index"] = None
        assert chapter_validator.validate_for_creation(valid_chapter).codes() == ["missing_order_index"]

    def test_missing_content_is_a_warning(self, chapter_validator, valid_chapter):
        """Test drafts without content are still valid"""
        del valid_chapter["content"]
        result = chapter_validator.validate_for_creation(valid_chapter)

        assert result.is_valid is True
        assert result.codes() == ["missing_content"]

    def test_blank_content_is_a_warning(self, chapter_validator, valid_chapter):
        """Test whitespace-only content warns"""
        valid_chapter["content"] = "   \n  "
        result = chapter_validator.validate_for_creation(valid_chapter)

        assert result.codes() == ["empty_content"]
        assert result.is_valid is True

    def test_non_string_content(self, chapter_validator, valid_chapter):
        """Test content must be a string"""
        valid_chapter["content"] = {"text": "hello"}
        assert chapter_validator.validate_for_creation(valid_chapter).codes() == ["invalid_content_type"]

    def test_short_content(self, chapter_validator, valid_chapter):
        """Test content under 100 characters warns"""
        valid_chapter["content"] = "A short opening."
        assert chapter_validator.validate_for_creation(valid_chapter).codes() == ["short_content"]

    def test_content_too_long(self, chapter_validator, valid_chapter):
        """Test content over 500,000 characters is an error"""
        valid_chapter["content"] = ("word " * 100_001).strip()
        result = chapter_validator.validate_for_creation(valid_chapter)

        assert "content_too_long" in result.codes(FindingSeverity.ERROR)

    def test_dangerous_html_tag(self, chapter_validator, valid_chapter):
        """Test a script tag is a hard error"""
        valid_chapter["content"] = valid_chapter["content"] + "\n\n<script>alert(1)</script>"
        result = chapter_validator.validate_for_creation(valid_chapter)

        assert result.is_valid is False
        assert result.codes(FindingSeverity.ERROR) == ["dangerous_html_tag"]
        assert "script" in result.errors[0].message

    def test_unmatched_html_tags(self, chapter_validator, valid_chapter):
        """Test opening and closing tag counts must match"""
        valid_chapter["content"] = valid_chapter["content"] + "\n\n<p>An unclosed paragraph <em>here</em>"
        result = chapter_validator.validate_for_creation(valid_chapter)

        assert result.codes(FindingSeverity.ERROR) == ["unmatched_html_tags"]

    def test_formatting_warnings(self, chapter_validator, valid_chapter):
        """Test double spaces and long text without paragraph breaks"""
        valid_chapter["content"] = " ".join(f"Sentence number {i}." for i in range(12)) + "  The end."
        result = chapter_validator.validate_for_creation(valid_chapter)

        assert result.codes(FindingSeverity.WARNING) == ["excessive_whitespace", "missing_paragraph_breaks"]

    def test_excerpt_rules(self, chapter_validator, valid_chapter):
        """Test excerpt type, minimum and maximum length"""
        valid_chapter["excerpt"] = "Too short."
        assert chapter_validator.validate_for_creation(valid_chapter).codes() == ["excerpt_too_short"]

        valid_chapter["excerpt"] = "e" * 501
        assert chapter_validator.validate_for_creation(valid_chapter).codes() == ["excerpt_too_long"]

        valid_chapter["excerpt"] = 42
        assert chapter_validator.validate_for_creation(valid_chapter).codes() == ["invalid_excerpt_type"]

    def test_word_count_and_reading_time(self, chapter_validator, valid_chapter):
        """Test the independently bounded counters"""
        valid_chapter["word_count"] = 0
        valid_chapter["reading_time"] = 301
        result = chapter_validator.validate_for_creation(valid_chapter)
        assert result.codes() == ["zero_word_count", "very_long_reading_time"]

        valid_chapter["word_count"] = -5
        valid_chapter["reading_time"] = 2.5
        result = chapter_validator.validate_for_creation(valid_chapter)
        assert result.codes() == ["invalid_word_count", "invalid_reading_time"]

    def test_very_long_chapter_word_count(self, chapter_validator, valid_chapter):
        """Test word counts over 50,000 warn"""
        valid_chapter["word_count"] = 50_001
        assert chapter_validator.validate_for_creation(valid_chapter).codes() == ["very_long_chapter"]

    def test_keyword_rules(self, chapter_validator, valid_chapter):
        """Test keyword item rules and case-insensitive duplicates"""
        valid_chapter["keywords"] = ["Sea", "sea", "x", 7]
        result = chapter_validator.validate_for_creation(valid_chapter)

        assert result.codes(FindingSeverity.ERROR) == ["keyword_too_short", "invalid_keyword_format"]
        assert result.codes(FindingSeverity.WARNING) == ["duplicate_keywords"]

    def test_too_many_keywords(self, chapter_validator, valid_chapter):
        """Test more than 15 keywords warns"""
        valid_chapter["keywords"] = [f"keyword{i}" for i in range(16)]
        assert chapter_validator.validate_for_creation(valid_chapter).codes() == ["too_many_keywords"]

    def test_keywords_must_be_list(self, chapter_validator, valid_chapter):
        """Test a comma separated string is rejected"""
        valid_chapter["keywords"] = "sea, lighthouse"
        assert chapter_validator.validate_for_creation(valid_chapter).codes() == ["invalid_keywords_format"]

    def test_invalid_status(self, chapter_validator, valid_chapter):
        """Test status must be in the chapter vocabulary"""
        valid_chapter["status"] = "suspended"
        assert chapter_validator.validate_for_creation(valid_chapter).codes() == ["invalid_status"]

    def test_non_mapping_options_ignored(self, chapter_validator, valid_chapter):
        """Test an options list is treated as no options"""
        result = chapter_validator.validate_for_creation(valid_chapter, ["strict"])

        assert result.is_valid is True
        assert result.codes() == []

    def test_debug_error_logger(self, now, settings, valid_chapter):
        """Test a logger with only debug and error serves a whole pass"""
        sink = DebugErrorLogger()
        validator = ChapterValidator(logger=sink, clock=lambda: now, settings=settings)
        del valid_chapter["title"]

        result = validator.validate_for_creation(valid_chapter)

        assert result.codes() == ["required_field"]
        assert sink.messages


class TestChapterUpdate:
    """Test partial update rules"""

    def test_only_present_fields_are_checked(self, chapter_validator):
        """Test missing required fields are not reported on update"""
        result = chapter_validator.validate_for_update("ch-1", {"excerpt": "e" * 60})

        assert result.is_valid is True
        assert result.codes() == []

    def test_updated_title_validated(self, chapter_validator):
        """Test an explicit None title is invalid"""
        result = chapter_validator.validate_for_update("ch-1", {"title": None})
        assert result.codes() == ["invalid_title"]

    def test_status_membership(self, chapter_validator):
        """Test unknown statuses are rejected on update"""
        result = chapter_validator.validate_for_update("ch-1", {"status": "live"})
        assert result.codes() == ["invalid_status"]

    def test_status_transition_with_current_status(self, chapter_validator):
        """Test the matrix is applied when the current status is known"""
        result = chapter_validator.validate_for_update(
            "ch-1", {"status": "draft"}, {"current_status": "published"}
        )
        assert result.codes() == ["invalid_status_transition"]

        result = chapter_validator.validate_for_update(
            "ch-1", {"status": "review"}, {"current_status": "draft"}
        )
        assert result.is_valid is True

    def test_content_update_uses_content_rules(self, chapter_validator):
        """Test updated content goes through the content rules"""
        result = chapter_validator.validate_for_update("ch-1", {"content": "<iframe src='x'></iframe>"})

        assert "dangerous_html_tag" in result.codes(FindingSeverity.ERROR)


class TestChapterPublishingReadiness:
    """Test strict mode"""

    def test_valid_chapter_is_ready(self, chapter_validator, valid_chapter):
        """Test a complete chapter is ready for publishing"""
        assert chapter_validator.validate_for_publishing_readiness(valid_chapter).is_valid is True

    def test_strict_requires_content_and_order_index(self, chapter_validator, valid_chapter):
        """Test strict mode widens the required set"""
        del valid_chapter["content"]
        del valid_chapter["order_index"]
        result = chapter_validator.validate_for_publishing_readiness(valid_chapter)

        assert result.codes() == ["required_field", "required_field"]
        assert [e.field for e in result.errors] == ["content", "order_index"]

    def test_blank_content_is_an_error(self, chapter_validator, valid_chapter):
        """Test blank content blocks publishing"""
        valid_chapter["content"] = "    "
        result = chapter_validator.validate_for_publishing_readiness(valid_chapter)

        assert result.is_valid is False
        assert result.codes() == ["empty_content"]


class TestChapterContentQuality:
    """Test content quality analysis"""

    def test_empty_content_stops_analysis(self, chapter_validator):
        """Test there is nothing to analyse without text"""
        result = chapter_validator.validate_content_quality({"content": ""})
        assert result.codes() == ["empty_content"]

    def test_very_short_chapter(self, chapter_validator, valid_chapter):
        """Test fewer than 100 words warns"""
        result = chapter_validator.validate_content_quality(valid_chapter)
        assert result.codes() == ["very_short_chapter"]

    def test_unmatched_quotes_and_single_paragraph(self, chapter_validator):
        """Test dialogue quotes and wall-of-text detection"""
        content = '"Hello, she said. ' + "The tide came in again and again. " * 80
        result = chapter_validator.validate_content_quality({"content": content})

        assert result.codes(FindingSeverity.WARNING) == ["unmatched_quotes", "single_paragraph"]

    def test_very_long_chapter(self, chapter_validator):
        """Test more than 20,000 words warns"""
        content = "\n\n".join(["word " * 1000] * 21)
        result = chapter_validator.validate_content_quality({"content": content})

        assert result.codes() == ["very_long_chapter"]
