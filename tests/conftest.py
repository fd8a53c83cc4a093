import textwrap

import pytest


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    """Keep tests independent of the developer's shell settings."""
    for name in ("AI_NEWS_LANG", "AI_NEWS_OUTPUT_DIR", "AI_NEWS_LOG_LEVEL", "GITHUB_TOKEN"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def rss_document():
    return textwrap.dedent(
        """\
        <?xml version="1.0"?>
        <rss version="2.0">
          <channel>
            <title>Test Feed</title>
            <link>https://example.com</link>
            <item>
              <title>First Post</title>
              <link>https://example.com/1</link>
              <pubDate>Mon, 01 Jan 2024 00:00:00 GMT</pubDate>
              <description>This is the first post</description>
            </item>
            <item>
              <title>Second Post</title>
              <link>https://example.com/2</link>
              <pubDate>Tue, 02 Jan 2024 00:00:00 GMT</pubDate>
              <description><![CDATA[<p>Rich <b>HTML</b> content</p>]]></description>
            </item>
          </channel>
        </rss>
        """
    )


@pytest.fixture
def atom_document():
    return textwrap.dedent(
        """\
        <?xml version="1.0"?>
        <feed xmlns="http://www.w3.org/2005/Atom">
          <title>Atom Feed</title>
          <link href="https://example.com/" rel="alternate"/>
          <entry>
            <title type="html">Atom &amp; Post</title>
            <link href="https://example.com/atom/1" rel="alternate"/>
            <updated>2024-01-16T09:00:00Z</updated>
            <published>2024-01-15T10:00:00Z</published>
            <summary>An atom post summary</summary>
          </entry>
        </feed>
        """
    )
