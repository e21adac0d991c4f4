"""Unit tests for the keyword responder."""

import json

import pytest

from src.modules.chat.constants import (
    CATEGORY_DELIVERY_TIME,
    CATEGORY_GREETING,
    CATEGORY_HUMAN_AGENT,
    CATEGORY_ORDER_TRACKING,
    CATEGORY_PAYMENTS,
    CATEGORY_RETURNS,
    CATEGORY_SIZE_GUIDANCE,
    DEFAULT_KEYWORD_TABLE,
    DELIVERY_TIME_TEXT,
    HELP_MENU_TEXT,
    HUMAN_AGENT_TEXT,
    ORDER_TRACKING_TEXT,
    PAYMENTS_TEXT,
    RETURNS_TEXT,
    SIZE_GUIDANCE_TEXT,
)
from src.modules.chat.responder import (
    ResponderEngine,
    build_categories,
    load_extra_keywords,
    normalize,
)


@pytest.fixture
def engine() -> ResponderEngine:
    return ResponderEngine()


class TestNormalize:
    def test_trims_lowercases_and_collapses_whitespace(self):
        assert normalize("  Where   IS\tmy ORDER \n") == "where is my order"

    def test_none_is_empty(self):
        assert normalize(None) == ""


class TestClassify:
    @pytest.mark.parametrize(
        "text, category",
        [
            ("hello", CATEGORY_GREETING),
            ("Namaste", CATEGORY_GREETING),
            ("talk to agent", CATEGORY_HUMAN_AGENT),
            ("manche sanga kura garna paincha?", CATEGORY_HUMAN_AGENT),
            ("where is my order", CATEGORY_ORDER_TRACKING),
            ("mero order kaha cha", CATEGORY_ORDER_TRACKING),
            ("delivery kati din lagcha", CATEGORY_DELIVERY_TIME),
            ("refund", CATEGORY_RETURNS),
            ("khalti chalena", CATEGORY_PAYMENTS),
            ("esewa payment failed", CATEGORY_PAYMENTS),
            ("kun size", CATEGORY_SIZE_GUIDANCE),
        ],
    )
    def test_keyword_categories(self, engine, text, category):
        assert engine.classify(text) == category

    def test_case_and_spacing_do_not_matter(self, engine):
        assert engine.classify("  ORDER    Status  ") == CATEGORY_ORDER_TRACKING

    @pytest.mark.parametrize(
        "digit, category",
        [
            ("1", CATEGORY_ORDER_TRACKING),
            ("2", CATEGORY_DELIVERY_TIME),
            ("3", CATEGORY_RETURNS),
            ("4", CATEGORY_PAYMENTS),
            ("5", CATEGORY_SIZE_GUIDANCE),
            ("6", CATEGORY_HUMAN_AGENT),
        ],
    )
    def test_menu_digits_map_to_categories(self, engine, digit, category):
        assert engine.classify(digit) == category

    def test_digit_inside_text_is_not_a_shortcut(self, engine):
        assert engine.classify("7 5") is None

    def test_first_category_in_table_order_wins(self, engine):
        # "agent" (human_agent) appears before "order status" in the table
        assert engine.classify("agent, order status please") == CATEGORY_HUMAN_AGENT

    def test_every_default_keyword_reaches_its_category(self, engine):
        for name, keywords, _ in DEFAULT_KEYWORD_TABLE:
            for keyword in keywords:
                assert engine.classify(keyword) == name, keyword

    @pytest.mark.parametrize("text", ["shipping time", "which size", "delivery kahile aaucha"])
    def test_greeting_inside_a_word_wins(self, engine, text):
        assert engine.classify(text) == CATEGORY_GREETING

    def test_unmatched_text_has_no_category(self, engine):
        assert engine.classify("asdf qwerty") is None
        assert engine.classify("   ") is None


class TestReply:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("hello", HELP_MENU_TEXT),
            ("6", HUMAN_AGENT_TEXT),
            ("track my order", ORDER_TRACKING_TEXT),
            ("estimated delivery?", DELIVERY_TIME_TEXT),
            ("return policy", RETURNS_TEXT),
            ("esewa problem", PAYMENTS_TEXT),
            ("size guide", SIZE_GUIDANCE_TEXT),
        ],
    )
    def test_canned_replies(self, engine, text, expected):
        assert engine.reply(text) == expected

    def test_fallback_is_help_menu(self, engine):
        assert engine.reply("asdf qwerty") == HELP_MENU_TEXT

    def test_reply_is_deterministic(self, engine):
        assert engine.reply("refund kasari") == engine.reply("refund kasari")

    def test_custom_fallback(self):
        engine = ResponderEngine(fallback="Sorry, try again.")
        assert engine.reply("zzz") == "Sorry, try again."


class TestBuildCategories:
    def test_keeps_table_order(self):
        categories = build_categories(DEFAULT_KEYWORD_TABLE)
        assert [c.name for c in categories] == [name for name, _, _ in DEFAULT_KEYWORD_TABLE]

    def test_extra_keywords_are_merged_and_normalized(self):
        categories = build_categories(DEFAULT_KEYWORD_TABLE, {"payments": ["  FonePay "]})
        engine = ResponderEngine(categories=categories)
        assert engine.classify("fonepay not working") == CATEGORY_PAYMENTS

    def test_duplicate_keywords_are_dropped(self):
        categories = build_categories(DEFAULT_KEYWORD_TABLE, {"greeting": ["HELLO"]})
        greeting = categories[0]
        assert greeting.keywords.count("hello") == 1

    def test_unknown_category_is_rejected(self):
        with pytest.raises(ValueError, match="Unknown responder categories"):
            build_categories(DEFAULT_KEYWORD_TABLE, {"weather": ["rain"]})


class TestLoadExtraKeywords:
    def test_reads_json_mapping(self, tmp_path):
        path = tmp_path / "keywords.json"
        path.write_text(json.dumps({"greeting": ["namaskar"]}), encoding="utf-8")
        assert load_extra_keywords(path) == {"greeting": ["namaskar"]}

    def test_rejects_wrong_shape(self, tmp_path):
        path = tmp_path / "keywords.json"
        path.write_text(json.dumps({"greeting": "namaskar"}), encoding="utf-8")
        with pytest.raises(ValueError, match="expected an object"):
            load_extra_keywords(path)
