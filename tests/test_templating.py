from ai_news_digest.templating import get_environment


def test_get_environment_registers_digest_filters():
    env = get_environment()
    assert "excerpt" in env.filters
    assert "format_date" in env.filters


def test_excerpt_filter_marks_truncation():
    env = get_environment()
    template = env.from_string("{{ value | excerpt(5) }}")

    assert template.render(value="short") == "short"
    assert template.render(value="longer text") == "longe..."
