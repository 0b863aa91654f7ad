from domain.models import RecommendationSection
from services.recommendations import parse_recommendations


def test_parses_sections_and_strips_bullets():
    text = "**Solar Energy:**\n* Install panels\n- Use batteries\n**Water:**\nHarvest rain"
    assert parse_recommendations(text) == [
        RecommendationSection(title="Solar Energy", items=["Install panels", "Use batteries"]),
        RecommendationSection(title="Water", items=["Harvest rain"]),
    ]


def test_header_without_items_is_dropped():
    text = "**Empty:**\n**Water:**\nHarvest rain"
    sections = parse_recommendations(text)
    assert [s.title for s in sections] == ["Water"]


def test_empty_and_whitespace_input():
    assert parse_recommendations("") == []
    assert parse_recommendations("   \n\t\n  ") == []
    assert parse_recommendations(None) == []


def test_leading_title_line_is_skipped():
    text = "AI Recommendations for your site\n**Wind:**\n* Small turbines"
    sections = parse_recommendations(text)
    assert sections == [RecommendationSection(title="Wind", items=["Small turbines"])]


def test_title_marker_only_skipped_on_first_line():
    text = "**Notes:**\nAI Recommendations are advisory"
    sections = parse_recommendations(text)
    assert sections[0].items == ["AI Recommendations are advisory"]


def test_preamble_lines_produce_no_items():
    text = "Here is what we found.\nMore intro.\n**Trees:**\n  - Plant natives  \n"
    sections = parse_recommendations(text)
    assert sections == [RecommendationSection(title="Trees", items=["Plant natives"])]


def test_no_headers_yields_nothing():
    assert parse_recommendations("just some text\n* and a bullet") == []


def test_bullet_without_space_keeps_text():
    sections = parse_recommendations("**Soil:**\n*Mulch beds\n-   Compost")
    assert sections[0].items == ["Mulch beds", "Compost"]


def test_bare_bullet_is_not_an_item():
    sections = parse_recommendations("**Soil:**\n*\n- Compost")
    assert sections[0].items == ["Compost"]


def test_header_keeps_inner_colon():
    sections = parse_recommendations("**Phase 1: Solar:**\n* Install panels")
    assert sections == [RecommendationSection(title="Phase 1: Solar", items=["Install panels"])]
